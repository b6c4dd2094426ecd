# cryptopairs/strategies/__init__.py
from .signals import Action, PairSignal, classify_action, evaluate_pair

__all__ = [
    "Action",
    "PairSignal",
    "classify_action",
    "evaluate_pair",
]

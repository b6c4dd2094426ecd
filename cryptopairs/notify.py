# cryptopairs/notify.py
"""
Outbound notifications. `notify(text)` returns True/False and never raises:
delivery problems are logged and must not reach the signal pipeline.
"""
from __future__ import annotations
from typing import Optional, Protocol
import logging
import os
import requests

__all__ = ["Notifier", "LogNotifier", "TelegramNotifier"]

logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org"


class Notifier(Protocol):
    def notify(self, text: str) -> bool: ...


class LogNotifier:
    """Writes messages to the log; used when no chat credentials are set."""

    def notify(self, text: str) -> bool:
        logger.info("notification: %s", text)
        return True


class TelegramNotifier:
    """Telegram Bot API `sendMessage` to a single chat."""

    def __init__(
        self,
        bot_token: Optional[str],
        chat_id: Optional[str],
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_env(cls, **kwargs) -> "TelegramNotifier":
        """Credentials from TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID."""
        return cls(os.getenv("TELEGRAM_BOT_TOKEN"), os.getenv("TELEGRAM_CHAT_ID"), **kwargs)

    @property
    def configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    def notify(self, text: str) -> bool:
        if not self.configured:
            logger.warning("telegram notification skipped: missing TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID")
            return False
        if not text:
            logger.warning("telegram notification skipped: empty text")
            return False
        url = f"{TELEGRAM_API}/bot{self.bot_token}/sendMessage"
        payload = {"chat_id": self.chat_id, "text": text, "disable_web_page_preview": True}
        try:
            resp = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("telegram send failed: %s", e)
            return False
        if not resp.ok:
            logger.warning("telegram send failed: HTTP %s", resp.status_code)
            return False
        try:
            return bool(resp.json().get("ok", False))
        except ValueError:
            logger.warning("telegram send returned a non-JSON body")
            return False

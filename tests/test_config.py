"""Tests for configuration objects and YAML loading."""

from dataclasses import replace

import pytest

from cryptopairs.config import AlertConfig, AppConfig, ScreenerConfig, SignalConfig, load_config
from cryptopairs.errors import ConfigError
from cryptopairs.universes import DEFAULT_UNIVERSE, load_universe


class TestDefaults:
    """Out-of-the-box values."""

    def test_signal_defaults(self):
        cfg = SignalConfig()
        assert (cfg.beta_lookback, cfg.z_lookback) == (240, 240)
        assert (cfg.entry_threshold, cfg.exit_threshold) == (2.0, 0.7)

    def test_screener_defaults(self):
        cfg = ScreenerConfig()
        assert cfg.base == "BTCUSDT"
        assert cfg.universe == DEFAULT_UNIVERSE
        assert cfg.bars == 720 and cfg.corr_lookback == 240
        assert cfg.n_workers == 1

    def test_alert_signal_config(self):
        sig = AlertConfig().signal_config()
        assert sig.beta_lookback == 200
        assert sig.z_lookback == 168


class TestValidation:
    """Rejected parameter values."""

    @pytest.mark.parametrize("kwargs", [
        {"beta_lookback": 1},
        {"z_lookback": 0},
        {"z_lookback": True},
        {"entry_threshold": 0},
        {"exit_threshold": 2.5},
        {"exit_threshold": -0.1},
    ])
    def test_signal_config_rejects(self, kwargs):
        with pytest.raises(ConfigError):
            SignalConfig(**kwargs)

    @pytest.mark.parametrize("kwargs", [
        {"n_workers": 0},
        {"prefer": "fork"},
        {"fetch_workers": 0},
        {"bars": 1},
    ])
    def test_screener_config_rejects(self, kwargs):
        with pytest.raises(ConfigError):
            ScreenerConfig(**kwargs)

    def test_risk_must_exceed_entry(self):
        with pytest.raises(ConfigError):
            AlertConfig(risk_threshold=2.0)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            SignalConfig(beta_lookback=1)


class TestScreenerUniverse:
    """Universe normalisation."""

    def test_string_universe(self):
        cfg = ScreenerConfig(universe="ethusdt, solusdt ethusdt BTCEUR")
        assert cfg.universe == ("ETHUSDT", "SOLUSDT")

    def test_alts_exclude_base(self):
        cfg = ScreenerConfig(base="ethusdt", universe=("BTCUSDT", "ETHUSDT", "SOLUSDT"))
        assert cfg.base == "ETHUSDT"
        assert cfg.alts == ("BTCUSDT", "SOLUSDT")

    def test_replace_revalidates(self):
        with pytest.raises(ConfigError):
            replace(ScreenerConfig(), z_lookback=1)

    def test_packaged_universe_name(self):
        cfg = ScreenerConfig(universe="layer1")
        assert cfg.universe == load_universe("layer1")
        assert "ETHUSDT" in cfg.alts

    def test_ticker_file_universe(self, tmp_path):
        p = tmp_path / "mine.txt"
        p.write_text("# picks\nopusdt\nARBUSDT\n")
        assert ScreenerConfig(universe=str(p)).universe == ("OPUSDT", "ARBUSDT")

    def test_unreadable_universe(self, tmp_path):
        with pytest.raises(ConfigError, match="universe"):
            ScreenerConfig(universe=str(tmp_path / "nope.csv"))


class TestLoadConfig:
    """YAML configuration files."""

    def test_none_gives_defaults(self):
        assert load_config(None) == AppConfig()

    def test_partial_file(self, tmp_path):
        p = tmp_path / "cfg.yaml"
        p.write_text(
            "signal:\n"
            "  z_lookback: 96\n"
            "screener:\n"
            "  base: ethusdt\n"
            "  universe: [SOLUSDT, BNBUSDT]\n"
            "  n_workers: null\n"
        )
        cfg = load_config(p)
        assert cfg.signal.z_lookback == 96
        assert cfg.signal.beta_lookback == 240
        assert cfg.screener.base == "ETHUSDT"
        assert cfg.screener.universe == ("SOLUSDT", "BNBUSDT")
        assert cfg.screener.n_workers is None
        assert cfg.alert == AlertConfig()

    def test_universe_by_name(self, tmp_path):
        p = tmp_path / "cfg.yaml"
        p.write_text("screener:\n  universe: majors\n")
        assert load_config(p).screener.universe == DEFAULT_UNIVERSE

    def test_empty_file(self, tmp_path):
        p = tmp_path / "empty.yaml"
        p.write_text("")
        assert load_config(p) == AppConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "nope.yaml")

    def test_unknown_section(self, tmp_path):
        p = tmp_path / "cfg.yaml"
        p.write_text("backtest:\n  fee: 0.001\n")
        with pytest.raises(ConfigError, match="backtest"):
            load_config(p)

    def test_unknown_key(self, tmp_path):
        p = tmp_path / "cfg.yaml"
        p.write_text("signal:\n  lookback: 100\n")
        with pytest.raises(ConfigError, match="lookback"):
            load_config(p)

    def test_invalid_value(self, tmp_path):
        p = tmp_path / "cfg.yaml"
        p.write_text("alert:\n  entry_threshold: 3.5\n")
        with pytest.raises(ConfigError):
            load_config(p)

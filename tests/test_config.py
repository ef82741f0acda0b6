from decimal import Decimal

from loan_compare.config import EngineConfig, load_config, log_level_from_env


def test_defaults(monkeypatch):
    monkeypatch.delenv("LOAN_COMPARE_TOLERANCE", raising=False)
    config = load_config()
    assert config.tolerance == Decimal("10")
    assert config.limits.max_months == 600
    assert config.limits.max_grace_months == 120


def test_tolerance_override(monkeypatch):
    monkeypatch.setenv("LOAN_COMPARE_TOLERANCE", "2")
    assert load_config().tolerance == Decimal("2")


def test_invalid_tolerance_is_ignored(monkeypatch, caplog):
    monkeypatch.setenv("LOAN_COMPARE_TOLERANCE", "plenty")
    assert load_config().tolerance == EngineConfig().tolerance
    assert "Ignoring invalid LOAN_COMPARE_TOLERANCE" in caplog.text


def test_log_level(monkeypatch):
    monkeypatch.setenv("LOAN_COMPARE_LOG_LEVEL", "debug")
    assert log_level_from_env() == "DEBUG"
    monkeypatch.delenv("LOAN_COMPARE_LOG_LEVEL")
    assert log_level_from_env() == "WARNING"

"""
Tests for startup configuration helpers.
"""

import logging

import pytest

from src.app_shell.config import (
    configure_logging,
    ledger_config_from_rules,
    validate_ops_rules,
)
from src.components.envelopes import LedgerConfig
from src.rules.loader import parse_rules
from src.rules.models import Rules


def _rules(extra: str = "") -> Rules:
    return parse_rules("project: {slug: test, rules_version: '1'}\n" + extra)


def test_ledger_config_defaults() -> None:
    assert ledger_config_from_rules(_rules()) == LedgerConfig()


def test_ledger_config_from_rules() -> None:
    rules = _rules("ledger: {percentage_tolerance: 0.5, atomic_distribute: false}\n")

    config = ledger_config_from_rules(rules)

    assert config.percentage_tolerance == 0.5
    assert config.atomic_distribute is False


def test_missing_required_env_exits(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ENVELOPE_TEST_SECRET", raising=False)
    rules = _rules("ops: {required_env: [ENVELOPE_TEST_SECRET]}\n")

    with pytest.raises(SystemExit) as exc:
        validate_ops_rules(rules)

    assert exc.value.code == 1


def test_required_env_present(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVELOPE_TEST_SECRET", "x")
    rules = _rules("ops: {required_env: [ENVELOPE_TEST_SECRET]}\n")

    validate_ops_rules(rules)


def test_non_atomic_distribution_warns(caplog: pytest.LogCaptureFixture) -> None:
    rules = _rules("ledger: {atomic_distribute: false}\n")

    with caplog.at_level(logging.WARNING):
        validate_ops_rules(rules)

    assert "atomic_distribute is off" in caplog.text


def test_configure_logging_sets_level() -> None:
    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging(_rules("ops: {log_level: WARNING}\n"))
        assert root.level == logging.WARNING
    finally:
        root.setLevel(previous)

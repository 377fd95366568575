"""Unit tests for environment-driven settings."""

from __future__ import annotations

import pytest
from app.core.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    ensure_secrets,
    env_bool,
    env_int,
    get_config,
)
from tests.helpers.utils import not_raises


@pytest.mark.parametrize("raw, expected", [("1", True), ("Yes", True), ("off", False), ("", False)])
def test_env_bool(monkeypatch, raw, expected):
    monkeypatch.setenv("SOME_FLAG", raw)
    assert env_bool("SOME_FLAG") is expected


def test_env_bool_default(monkeypatch):
    monkeypatch.delenv("SOME_FLAG", raising=False)
    assert env_bool("SOME_FLAG", True) is True


def test_env_int(monkeypatch):
    monkeypatch.setenv("SOME_INT", " 42 ")
    assert env_int("SOME_INT", 1) == 42
    monkeypatch.setenv("SOME_INT", "")
    assert env_int("SOME_INT", 1) == 1


@pytest.mark.parametrize(
    "name, expected",
    [("production", ProductionConfig), ("TESTING", TestingConfig), ("whatever", DevelopmentConfig)],
)
def test_get_config_selects_class(monkeypatch, name, expected):
    monkeypatch.setenv("APP_ENV", name)
    assert get_config() is expected


class TestEnsureSecrets:
    def test_placeholders_rejected_in_production(self):
        with pytest.raises(RuntimeError, match="ACCESS_TOKEN_SECRET"):
            ensure_secrets({"ACCESS_TOKEN_SECRET": "CHANGE_ME_ACCESS", "REFRESH_TOKEN_SECRET": "r"})

    def test_missing_refresh_secret_rejected(self):
        with pytest.raises(RuntimeError, match="REFRESH_TOKEN_SECRET"):
            ensure_secrets({"ACCESS_TOKEN_SECRET": "a"})

    def test_shared_secret_rejected(self):
        with pytest.raises(RuntimeError, match="must differ"):
            ensure_secrets({"ACCESS_TOKEN_SECRET": "same", "REFRESH_TOKEN_SECRET": "same"})

    def test_real_secrets_accepted(self):
        with not_raises(RuntimeError):
            ensure_secrets({"ACCESS_TOKEN_SECRET": "a" * 32, "REFRESH_TOKEN_SECRET": "b" * 32})

    def test_debug_and_testing_are_lenient(self):
        with not_raises(RuntimeError):
            ensure_secrets({"TESTING": True})
            ensure_secrets({"DEBUG": True})

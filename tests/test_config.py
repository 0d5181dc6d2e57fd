"""Tests for RentLog settings."""

import pytest

from pydantic import ValidationError

from rentlog.config import RentLogSettings


def test_defaults():
    settings = RentLogSettings(_env_file=None)
    assert settings.json_indent == 2
    assert settings.host_profile == "auto"
    assert settings.default_file_prefix == "rentlog-data"


def test_zero_indent_is_rejected():
    # Saved files must always be indented
    with pytest.raises(ValidationError):
        RentLogSettings(_env_file=None, json_indent=0)


def test_unknown_host_profile_is_rejected():
    with pytest.raises(ValidationError):
        RentLogSettings(_env_file=None, host_profile="cloud")


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("RENTLOG_HOST_PROFILE", "Fallback")
    assert RentLogSettings(_env_file=None).host_profile == "fallback"

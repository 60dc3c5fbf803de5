"""Tests for environment helpers in the settings module."""

import pytest

from todo_api import config


@pytest.mark.parametrize("env, production, development", [
    ("production", True, False),
    ("development", False, True),
    ("test", False, False),
])
def test_environment_helpers(monkeypatch, env, production, development):
    monkeypatch.setattr(config, "ENV", env)
    assert config.is_production() is production
    assert config.is_development() is development

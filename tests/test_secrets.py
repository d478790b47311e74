"""Tests for signing-secret validation."""
from __future__ import annotations

import pytest

from huddle.security import MissingSecretError, is_placeholder, require_secret


@pytest.mark.parametrize("value", [None, "", "   ", "changeme", "Replace-With-A-Long-Random-String"])
def test_placeholders(value):
    assert is_placeholder(value) is True


def test_require_secret(monkeypatch):
    monkeypatch.setenv("HUDDLE_TEST_SECRET", "  a-real-signing-key  ")
    assert require_secret("HUDDLE_TEST_SECRET") == "a-real-signing-key"

    monkeypatch.setenv("HUDDLE_TEST_SECRET", "short")
    with pytest.raises(MissingSecretError) as excinfo:
        require_secret("HUDDLE_TEST_SECRET")
    assert "short" not in str(excinfo.value)

    monkeypatch.delenv("HUDDLE_TEST_SECRET")
    with pytest.raises(MissingSecretError):
        require_secret("HUDDLE_TEST_SECRET")

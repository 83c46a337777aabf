"""Tests for platform detection and tool settings."""

import logging

import pytest
from pydantic import ValidationError

from crossenv.platform import is_windows
from crossenv.settings import LOG_LEVEL_VAR, Settings


class TestIsWindows:
    def test_win32(self, monkeypatch):
        monkeypatch.setattr("crossenv.platform.sys.platform", "win32")
        assert is_windows()

    @pytest.mark.parametrize("ostype", ["cygwin", "msys"])
    def test_unix_emulation_layers(self, monkeypatch, ostype):
        monkeypatch.setattr("crossenv.platform.sys.platform", "linux")
        monkeypatch.setenv("OSTYPE", ostype)
        assert is_windows()

    def test_linux(self, monkeypatch):
        monkeypatch.setattr("crossenv.platform.sys.platform", "linux")
        monkeypatch.delenv("OSTYPE", raising=False)
        assert not is_windows()

    def test_linux_ostype(self, monkeypatch):
        monkeypatch.setattr("crossenv.platform.sys.platform", "linux")
        monkeypatch.setenv("OSTYPE", "linux-gnu")
        assert not is_windows()


class TestSettings:
    def test_defaults(self):
        assert Settings.from_env({}).log_level is None

    def test_level_is_normalized(self):
        assert Settings.from_env({LOG_LEVEL_VAR: " debug "}).log_level == "DEBUG"

    def test_blank_level_ignored(self):
        assert Settings.from_env({LOG_LEVEL_VAR: ""}).log_level is None

    def test_unknown_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings.from_env({LOG_LEVEL_VAR: "LOUD"})

    def test_configure_logging(self, monkeypatch):
        calls = []
        monkeypatch.setattr(
            "crossenv.settings.logging.basicConfig", lambda **kw: calls.append(kw)
        )
        Settings(log_level="INFO").configure_logging()
        Settings().configure_logging()

        assert len(calls) == 1
        assert calls[0]["level"] == "INFO"
        assert logging.getLevelName(calls[0]["level"]) == logging.INFO

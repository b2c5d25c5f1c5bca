# tests/test_log_config.py
import logging

from spicelib_core.log_config import LOG_LEVEL_ENV_VAR, resolve_log_level


class TestResolveLogLevel:

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "ERROR")
        assert resolve_log_level("debug") == logging.DEBUG
        assert resolve_log_level(logging.WARNING) == logging.WARNING

    def test_environment_variable(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, " warning ")
        assert resolve_log_level() == logging.WARNING

    def test_default_is_info(self, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)
        assert resolve_log_level() == logging.INFO

    def test_unknown_name_falls_back_to_info(self):
        assert resolve_log_level("chatty") == logging.INFO

"""Tests for the server log configuration."""

import logging

from uvicorn.config import LOGGING_CONFIG

from mt5platform.logging import QUIET_LOGGERS, setup_logging, uvicorn_log_config


class TestUvicornLogConfig:
    def test_access_lines_quiet_outside_debug(self):
        assert uvicorn_log_config(debug=False)["loggers"]["uvicorn.access"]["level"] == "WARNING"

    def test_access_lines_kept_in_debug(self):
        assert uvicorn_log_config(debug=True)["loggers"]["uvicorn.access"]["level"] == "INFO"

    def test_uvicorn_defaults_untouched(self):
        uvicorn_log_config(debug=False)
        assert LOGGING_CONFIG["loggers"]["uvicorn.access"]["level"] == "INFO"


class TestSetupLogging:
    def test_redis_client_loggers_quietened(self):
        setup_logging(debug=True)
        assert all(logging.getLogger(name).level == logging.WARNING for name in QUIET_LOGGERS)

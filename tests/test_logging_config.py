import logging

from token_session.logging_config import HealthCheckFilter, get_logging_config


def test_logging_config():
    config = get_logging_config("DEBUG")

    assert config["loggers"]["token_session"]["level"] == "DEBUG"
    assert config["filters"]["health_check_filter"]["()"] is HealthCheckFilter


def test_health_check_filter():
    record = logging.LogRecord("uvicorn.access", logging.INFO, "", 0, '"GET /health HTTP/1.1" 200', None, None)
    assert HealthCheckFilter().filter(record) is False

    record = logging.LogRecord("uvicorn.access", logging.INFO, "", 0, '"GET /session HTTP/1.1" 200', None, None)
    assert HealthCheckFilter().filter(record) is True


def test_filter_passes_other_loggers():
    record = logging.LogRecord("token_session", logging.INFO, "", 0, "GET /health seen", None, None)
    assert HealthCheckFilter().filter(record) is True

import logging

from deskmetrics.core.config import Settings


def test_settings_fields():
    assert set(Settings.model_fields) == {
        "DATABASE_URL",
        "CONVERSATIONS_DATABASE_URL",
        "QUERY_CONCURRENCY",
        "LOG_LEVEL",
    }


def test_unknown_log_level_falls_back_to_info():
    assert Settings(LOG_LEVEL="verbose").log_level_value == logging.INFO
    assert Settings(LOG_LEVEL="debug").log_level_value == logging.DEBUG

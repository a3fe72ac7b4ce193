import logging
import logging.handlers

from src.config import Settings
from src.logging_config import APP_LOGGER_NAME, get_logger, setup_logging


def test_get_logger_namespaces_module_loggers():
    assert get_logger("src.crud.crud_account").name == "pocket_ledger.src.crud.crud_account"
    assert get_logger(APP_LOGGER_NAME).name == APP_LOGGER_NAME
    assert get_logger("pocket_ledger.health").name == "pocket_ledger.health"


def test_setup_replaces_handlers_instead_of_stacking():
    settings = Settings(environment="test", jwt_secret="x", app_log_level="debug")

    setup_logging(settings)
    logger = setup_logging(settings)

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_log_file_adds_rotating_handler(tmp_path):
    log_file = tmp_path / "logs" / "api.log"
    settings = Settings(environment="test", jwt_secret="x", log_file=str(log_file))

    logger = setup_logging(settings)
    try:
        assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers)
        assert log_file.parent.is_dir()
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()


def test_third_party_loggers_are_capped():
    setup_logging(Settings(environment="test", jwt_secret="x", third_party_log_level="ERROR"))

    assert logging.getLogger("sqlalchemy.engine").level == logging.ERROR
    assert logging.getLogger("slowapi").level == logging.ERROR

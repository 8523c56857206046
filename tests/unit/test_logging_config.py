"""Tests for engine logging configuration."""

import logging

from bsm_engine.utils.logging_config import get_logger, setup_logging


def test_setup_logging_configures_engine_logger():
    logger = setup_logging("debug")

    assert logger.name == "bsm_engine"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert not logger.propagate


def test_setup_logging_is_idempotent():
    setup_logging()
    logger = setup_logging()
    assert len(logger.handlers) == 1


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "engine.log"
    setup_logging("INFO", log_file=str(log_file))

    get_logger("tests").info("hello from the engine")
    for handler in logging.getLogger("bsm_engine").handlers:
        handler.flush()

    assert "hello from the engine" in log_file.read_text()


def test_get_logger_namespaces():
    assert get_logger().name == "bsm_engine"
    assert get_logger("solvers.newton_raphson").name == "bsm_engine.solvers.newton_raphson"


def test_setup_logging_closes_replaced_file_handler(tmp_path):
    setup_logging("INFO", log_file=str(tmp_path / "first.log"))
    first_handler = next(
        h for h in logging.getLogger("bsm_engine").handlers if isinstance(h, logging.FileHandler)
    )

    setup_logging("INFO", log_file=str(tmp_path / "second.log"))

    assert first_handler.stream is None
    assert first_handler not in logging.getLogger("bsm_engine").handlers

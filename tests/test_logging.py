import json
import logging

import pytest

from reduct_kernels.logging import ReductJSONFormatter, setup_logging


@pytest.fixture
def restore_kernel_logger():
    logger = logging.getLogger("reduct_kernels")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def test_default_config_writes_json_lines(tmp_path, monkeypatch, restore_kernel_logger):
    monkeypatch.chdir(tmp_path)
    setup_logging()
    logging.getLogger("reduct_kernels.tests").debug("hello %s", "world")
    for handler in restore_kernel_logger.handlers:
        handler.flush()
    log_file = tmp_path / "logs" / "reduct_kernels.log.jsonl"
    assert log_file.is_file()
    record = json.loads(log_file.read_text().splitlines()[-1])
    assert record["message"] == "hello world"
    assert record["level"] == "DEBUG"
    assert record["logger"] == "reduct_kernels.tests"


def test_user_config_takes_precedence(tmp_path, monkeypatch, restore_kernel_logger):
    monkeypatch.chdir(tmp_path)
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "loggers": {"reduct_kernels": {"level": "ERROR"}},
    }
    (tmp_path / "logging_config.json").write_text(json.dumps(config))
    setup_logging()
    assert restore_kernel_logger.level == logging.ERROR
    assert not (tmp_path / "logs").exists()


def test_formatter_maps_keys():
    formatter = ReductJSONFormatter(fmt_keys={"level": "levelname", "msg": "message"})
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "value=%d", (3,), None)
    payload = json.loads(formatter.format(record))
    assert payload["level"] == "INFO"
    assert payload["msg"] == "value=3"
    assert "timestamp" in payload

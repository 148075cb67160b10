"""Unit tests for scalesim logging configuration."""

from __future__ import annotations

import json
import logging
import os
from logging.handlers import RotatingFileHandler
from unittest import mock

import scalesim
from scalesim.logging_config import (
    LOGGER_NAME,
    JsonFormatter,
    _clear_handlers,
    _get_level,
    _get_logger,
)


def _flush():
    for handler in _get_logger().handlers:
        handler.flush()


class TestSilentByDefault:
    def test_import_produces_no_log_output(self, capfd):
        import importlib

        importlib.reload(scalesim)

        captured = capfd.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_logger_has_null_handler(self):
        logger = logging.getLogger(LOGGER_NAME)
        assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)

    def test_simulation_run_is_silent(self, capfd, three_tier):
        scalesim.run_simulation(scalesim.RunConfig(seed=1), three_tier)

        captured = capfd.readouterr()
        assert captured.err == ""


class TestEnableConsoleLogging:
    def test_sets_level(self):
        scalesim.enable_console_logging(level="DEBUG")
        assert _get_logger().level == logging.DEBUG

    def test_outputs_to_stderr(self, capfd):
        scalesim.enable_console_logging(level="INFO")
        logging.getLogger(f"{LOGGER_NAME}.test").info("test message")

        assert "test message" in capfd.readouterr().err

    def test_custom_format(self, capfd):
        scalesim.enable_console_logging(level="INFO", format="[CUSTOM] %(message)s")
        logging.getLogger(f"{LOGGER_NAME}.test").info("hello")

        assert "[CUSTOM] hello" in capfd.readouterr().err

    def test_engine_logs_start_and_finish(self, capfd, three_tier):
        scalesim.enable_console_logging(level="INFO")
        config = scalesim.RunConfig(seed=3, simulation_id="sim-logged")
        scalesim.SimulationEngine().run(config, three_tier)

        err = capfd.readouterr().err
        assert "Simulation sim-logged started" in err
        assert "Simulation sim-logged finished" in err


class TestEnableFileLogging:
    def test_creates_rotating_file_handler(self, tmp_path):
        scalesim.enable_file_logging(tmp_path / "test.log")

        assert any(isinstance(h, RotatingFileHandler) for h in _get_logger().handlers)

    def test_creates_parent_directories(self, tmp_path):
        log_file = tmp_path / "subdir" / "nested" / "test.log"
        scalesim.enable_file_logging(log_file)

        assert log_file.parent.exists()

    def test_writes_to_file(self, tmp_path):
        log_file = tmp_path / "test.log"
        scalesim.enable_file_logging(log_file, level="INFO")

        logging.getLogger(f"{LOGGER_NAME}.test").info("file test message")
        _flush()

        assert "file test message" in log_file.read_text()

    def test_respects_max_bytes(self, tmp_path):
        handler = scalesim.enable_file_logging(tmp_path / "test.log", max_bytes=1024, backup_count=3)

        assert handler.maxBytes == 1024
        assert handler.backupCount == 3


class TestEnableJsonLogging:
    def test_outputs_valid_json(self, capfd):
        scalesim.enable_json_logging(level="INFO")
        logging.getLogger(f"{LOGGER_NAME}.test").info("json test")

        data = json.loads(capfd.readouterr().err.strip())
        assert data["message"] == "json test"
        assert data["level"] == "INFO"
        assert data["logger"] == f"{LOGGER_NAME}.test"
        assert "timestamp" in data

    def test_includes_simulation_id_extra(self, capfd):
        scalesim.enable_json_logging(level="INFO")
        logging.getLogger(f"{LOGGER_NAME}.test").info("tagged", extra={"simulation_id": "sim-7"})

        data = json.loads(capfd.readouterr().err.strip())
        assert data["simulation_id"] == "sim-7"

    def test_writes_json_to_file(self, tmp_path):
        log_file = tmp_path / "logs" / "scalesim.json"
        scalesim.enable_json_logging(level="INFO", path=log_file)

        logging.getLogger(f"{LOGGER_NAME}.test").info("json file test")
        _flush()

        data = json.loads(log_file.read_text().strip())
        assert data["message"] == "json file test"


class TestConfigureFromEnv:
    def test_respects_logging_level(self):
        with mock.patch.dict(os.environ, {"SCALESIM_LOGGING": "DEBUG"}, clear=False):
            scalesim.configure_from_env()

        assert _get_logger().level == logging.DEBUG

    def test_respects_log_file(self, tmp_path):
        log_file = tmp_path / "env_test.log"
        env = {"SCALESIM_LOGGING": "INFO", "SCALESIM_LOG_FILE": str(log_file)}
        with mock.patch.dict(os.environ, env, clear=False):
            scalesim.configure_from_env()

        assert any(isinstance(h, RotatingFileHandler) for h in _get_logger().handlers)

    def test_respects_json_flag(self, capfd):
        env = {"SCALESIM_LOGGING": "INFO", "SCALESIM_LOG_JSON": "1"}
        with mock.patch.dict(os.environ, env, clear=False):
            scalesim.configure_from_env()

        logging.getLogger(f"{LOGGER_NAME}.test").info("json env test")
        data = json.loads(capfd.readouterr().err.strip())
        assert data["message"] == "json env test"

    def test_does_nothing_when_no_env_vars(self):
        initial_count = len(_get_logger().handlers)

        with mock.patch.dict(os.environ, {}, clear=True):
            scalesim.configure_from_env()

        assert len(_get_logger().handlers) == initial_count


class TestLevels:
    def test_set_level_by_string(self):
        scalesim.set_level("WARNING")
        assert _get_logger().level == logging.WARNING

    def test_set_level_by_int(self):
        scalesim.set_level(logging.ERROR)
        assert _get_logger().level == logging.ERROR

    def test_module_level_filters_more_strictly(self, capfd):
        scalesim.enable_console_logging(level="DEBUG")
        scalesim.set_module_level("analysis.bottlenecks", "CRITICAL")

        logging.getLogger(f"{LOGGER_NAME}.analysis.bottlenecks").warning("quiet warning")
        logging.getLogger(f"{LOGGER_NAME}.core.steps").debug("noisy debug")

        err = capfd.readouterr().err
        assert "quiet warning" not in err
        assert "noisy debug" in err

        scalesim.set_module_level("analysis.bottlenecks", logging.NOTSET)


class TestDisableLogging:
    def test_silences_all_output(self, capfd):
        scalesim.enable_console_logging(level="DEBUG")
        scalesim.disable_logging()

        logging.getLogger(f"{LOGGER_NAME}.test").critical("this should not appear")

        assert "this should not appear" not in capfd.readouterr().err

    def test_removes_non_null_handlers(self, tmp_path):
        scalesim.enable_console_logging()
        scalesim.enable_file_logging(tmp_path / "test.log")

        scalesim.disable_logging()

        non_null = [h for h in _get_logger().handlers if not isinstance(h, logging.NullHandler)]
        assert non_null == []


class TestHelpers:
    def test_json_formatter_basic_record(self):
        record = logging.LogRecord(
            name="test.logger",
            level=logging.INFO,
            pathname="test.py",
            lineno=1,
            msg="value=%d",
            args=(42,),
            exc_info=None,
        )

        data = json.loads(JsonFormatter().format(record))

        assert data["message"] == "value=42"
        assert "simulation_id" not in data

    def test_get_level(self):
        assert _get_level("DEBUG") == logging.DEBUG
        assert _get_level("info") == logging.INFO
        assert _get_level(logging.ERROR) == logging.ERROR
        assert _get_level("INVALID") == logging.INFO

    def test_clear_handlers_keeps_null_handler(self):
        scalesim.enable_console_logging()
        _clear_handlers()

        handlers = _get_logger().handlers
        assert handlers
        assert all(isinstance(h, logging.NullHandler) for h in handlers)

"""Tests for the logging helpers."""

import logging
from unittest.mock import MagicMock

import pytest

from src.infrastructure.logging import logger as logger_module


@pytest.fixture
def reset_singletons():
    saved = (
        logger_module.Logger._instance,
        logger_module.AppLogger._instance,
        logger_module.UsageLogger._instance,
    )
    logger_module.Logger._instance = None
    logger_module.AppLogger._instance = None
    logger_module.UsageLogger._instance = None
    yield
    (
        logger_module.Logger._instance,
        logger_module.AppLogger._instance,
        logger_module.UsageLogger._instance,
    ) = saved


def test_builder_writes_dated_file_under_subdir(tmp_path, monkeypatch):
    monkeypatch.setattr(logger_module, "get_project_root", lambda: tmp_path)
    monkeypatch.setattr(
        logger_module.LoggerBuilder,
        "_today_stamp",
        staticmethod(lambda: "20240301"),
    )

    built = (
        logger_module.LoggerBuilder()
        .name("networth.test.snapshots")
        .subdir("snapshots")
        .prefix("snapshot_logs")
        .console(False)
        .level(logging.WARNING)
        .build()
    )

    assert built.level == logging.WARNING
    assert built.propagate is False
    assert [type(h) for h in built.handlers] == [logging.FileHandler]
    expected = tmp_path / "logs" / "snapshots" / "20240301_snapshot_logs.log"
    assert built.handlers[0].baseFilename == str(expected)

    for handler in list(built.handlers):
        handler.close()
        built.removeHandler(handler)


def test_builder_reuses_configured_logger(tmp_path, monkeypatch):
    monkeypatch.setattr(logger_module, "get_project_root", lambda: tmp_path)
    builder = logger_module.LoggerBuilder().name("networth.test.reuse")

    first = builder.build()
    second = builder.build()

    assert first is second
    assert len(first.handlers) == 2

    for handler in list(first.handlers):
        handler.close()
        first.removeHandler(handler)


def test_logger_delegates_to_wrapped_logger(monkeypatch, reset_singletons):
    fake_logger = MagicMock()
    monkeypatch.setattr(
        logger_module.LoggerBuilder,
        "build",
        lambda self: fake_logger,
    )

    logger = logger_module.Logger("networth.test")
    logger.info("snapshot stored")
    logger.warning("membership restored")
    logger.error("gateway down")

    fake_logger.info.assert_called_with("snapshot stored")
    fake_logger.warning.assert_called_with("membership restored")
    fake_logger.error.assert_called_with("gateway down")
    assert logger_module.Logger("other") is logger


def test_app_and_usage_loggers_are_separate_singletons(
    monkeypatch,
    reset_singletons,
):
    built = []

    def _fake_build(self):
        built.append((self._name, self._subdir, self._console))
        return MagicMock()

    monkeypatch.setattr(logger_module.LoggerBuilder, "build", _fake_build)

    app_logger = logger_module.get_app_logger()
    usage_logger = logger_module.get_usage_logger()

    assert logger_module.get_app_logger() is app_logger
    assert logger_module.get_usage_logger() is usage_logger
    assert app_logger is not usage_logger
    assert built == [
        ("networth.app", "app", True),
        ("networth.usage", "usage", False),
    ]

"""Tests for logger cleanup cascade via BaseCloseable."""

import tempfile
from pathlib import Path

import pytest

from conflux.core.log import ConsoleSink, FileSink, Logger, setup_logger


@pytest.fixture(autouse=True)
def restore_test_logger():
    yield
    setup_logger(
        log_root=Path(tempfile.gettempdir()) / "conflux-tests",
        session_name="test",
        console=ConsoleSink(level="debug"),
    )


def test_logger_closes_file_via_context_manager(tmp_path):
    logger = Logger(
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, path=str(tmp_path / "test.log")),
    )
    logger.setup(log_root=tmp_path, session_name="test")

    assert logger.file._file is not None
    assert not logger.file._file.closed

    with logger:
        logger.info("test message")

    assert logger.file._file.closed


def test_logger_closes_on_exception(tmp_path):
    logger = Logger(
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, path=str(tmp_path / "test.log")),
    )
    logger.setup(log_root=tmp_path, session_name="test")

    with pytest.raises(ValueError), logger:
        logger.info("before exception")
        raise ValueError("test exception")

    assert logger.file._file.closed


def test_config_cascade_closes_logger(tmp_path):
    """Config.close() -> Logger.close() -> FileSink.close()."""
    from conflux.core.config import Config, GitConfig

    config = Config(
        logger=Logger(
            console=ConsoleSink(enabled=False),
            file=FileSink(enabled=True, path=str(tmp_path / "cascade.log")),
        ),
        git=GitConfig(workdir=tmp_path),
        log_root=tmp_path,
    )
    sink = config.logger.file
    assert sink._file is not None and not sink._file.closed

    config.close()

    assert sink._file.closed


def test_disabled_sink_opens_nothing(tmp_path):
    logger = Logger(
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=False, path=str(tmp_path / "never.log")),
    )
    logger.setup(log_root=tmp_path, session_name="test")
    logger.close()

    assert not (tmp_path / "never.log").exists()

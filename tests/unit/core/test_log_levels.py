"""Test log level filtering in the file sink."""

import tempfile
from pathlib import Path

import pytest

from conflux.core.log import ConsoleSink, FileSink, setup_logger


@pytest.fixture
def temp_log_dir():
    """Create temporary directory for log files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def restore_test_logger():
    """Reinstall the console-only test logger afterwards."""
    yield
    setup_logger(
        log_root=Path(tempfile.gettempdir()) / "conflux-tests",
        session_name="test",
        console=ConsoleSink(level="debug"),
    )


def file_logger(temp_log_dir, level):
    log_file = temp_log_dir / f"{level}.log"
    logger = setup_logger(
        log_root=temp_log_dir,
        session_name="test",
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, level=level, path=str(log_file)),
    )
    return logger, log_file


def emit_all(logger):
    logger.spew("SPEW message")
    logger.trace("TRACE message")
    logger.debug("DEBUG message")
    logger.info("INFO message")
    logger.warning("WARN message")
    logger.error("ERROR message")
    logger.close()


@pytest.mark.parametrize(
    "level,included,excluded",
    [
        ("spew", ["SPEW", "TRACE", "DEBUG", "INFO"], []),
        ("trace", ["TRACE", "DEBUG", "INFO"], ["SPEW"]),
        ("debug", ["DEBUG", "INFO", "WARN"], ["SPEW", "TRACE"]),
        ("info", ["INFO", "WARN", "ERROR"], ["SPEW", "TRACE", "DEBUG"]),
        ("error", ["ERROR"], ["SPEW", "TRACE", "DEBUG", "INFO", "WARN"]),
    ],
)
def test_file_sink_level(temp_log_dir, level, included, excluded):
    logger, log_file = file_logger(temp_log_dir, level)

    emit_all(logger)

    content = log_file.read_text()
    for name in included:
        assert f"{name} message" in content
    for name in excluded:
        assert f"{name} message" not in content


def test_file_path_template(temp_log_dir):
    """Default path expands {log_root} and {session_name}."""
    logger = setup_logger(
        log_root=temp_log_dir,
        session_name="myrepo",
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True),
    )
    logger.info("hello file")
    logger.close()

    log_file = temp_log_dir / "myrepo" / "conflux.log"
    assert "hello file" in log_file.read_text()


def test_logger_level_cascades_to_sinks(temp_log_dir):
    logger = setup_logger(
        log_root=temp_log_dir,
        session_name="test",
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, path=str(temp_log_dir / "x.log")),
        level="warn",
    )

    assert logger.file.level == "warn"
    assert logger.console.level == "warn"
    logger.close()


def test_console_sink_writes_to_stderr(temp_log_dir, capsys):
    logger = setup_logger(
        log_root=temp_log_dir,
        session_name="test",
        console=ConsoleSink(level="info"),
    )

    logger.info("console message")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "console message" in captured.err

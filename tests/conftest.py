"""Pytest configuration and fixtures for conflux tests."""

import sys
import tempfile
from pathlib import Path

import pytest

from conflux.core.log import ConsoleSink, setup_logger
from conflux.core.result import ProcessResult


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Configure logging for console-only mode during tests.

    Debug output shows up in failing test runs; nothing leaves the
    machine.
    """
    test_log_root = Path(tempfile.gettempdir()) / "conflux-tests"
    setup_logger(
        log_root=test_log_root,
        session_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture(scope="session")
def test_config():
    """Load configuration for tests without CLI parsing conflicts.

    Creates a State object with full configuration loading, but
    temporarily replaces sys.argv to avoid conflicts with pytest's
    command line arguments.

    Returns:
        Config object with all settings loaded from defaults
    """
    from conflux.core.config import State

    old_argv = sys.argv
    sys.argv = ['conflux']

    try:
        state = State()
        return state.config
    finally:
        sys.argv = old_argv


class FakeExecutor:
    """Executor stand-in that records argument lists.

    Responses are looked up by the longest registered argument prefix;
    anything unregistered succeeds with no output.
    """

    def __init__(self, workdir=None):
        self.workdir = workdir
        self.executable = "git"
        self.calls: list[list[str]] = []
        self.envs: list[dict | None] = []
        self.responses: dict[tuple[str, ...], ProcessResult] = {}

    def respond(self, args, returncode=0, stdout="", stderr=""):
        self.responses[tuple(args)] = ProcessResult(
            command="git " + " ".join(args),
            returncode=returncode,
            stdout=stdout,
            stderr=stderr,
        )

    def run(self, args, silent=False, env=None):
        self.calls.append(list(args))
        self.envs.append(env)
        for length in range(len(args), 0, -1):
            response = self.responses.get(tuple(args[:length]))
            if response is not None:
                return response
        return ProcessResult(command="git " + " ".join(args), returncode=0)

    def probe(self, args):
        return self.run(args, silent=True).success

    def close(self):
        pass

    def mutating_calls(self):
        """Calls other than the read-only queries Git makes."""
        queries = {"show-ref", "config", "rev-parse", "branch", "diff"}
        return [call for call in self.calls if call[0] not in queries]


@pytest.fixture
def executor(tmp_path):
    return FakeExecutor(workdir=tmp_path)


@pytest.fixture
def git(executor):
    from conflux.git.repo import Git
    return Git(executor, remote="origin")

"""Tests for the process executor."""

import shutil
import threading
from pathlib import Path

import pytest

from conflux.core.executor import Executor


class FakeRaw:
    def __init__(self, exited=0, stdout="", stderr=""):
        self.exited = exited
        self.stdout = stdout
        self.stderr = stderr


class FakeRunner:
    """Runner stand-in recording execute() calls."""

    def __init__(self, result=None):
        self.result = result or FakeRaw()
        self.calls = []
        self.threads = []

    def execute(self, command, cwd=None, check=True, env=None, **kwargs):
        self.calls.append({"command": command, "cwd": cwd, "check": check, "env": env})
        self.threads.append(threading.current_thread())
        return self.result


@pytest.fixture
def runner():
    return FakeRunner()


def test_run_success(runner, tmp_path):
    runner.result = FakeRaw(stdout="one\n\ntwo\n", stderr="warn\n")
    executor = Executor(workdir=tmp_path, runner_factory=lambda: runner)

    result = executor.run(["status", "--short"])

    assert result.success
    assert result.output_lines == ["one", "two", "warn"]
    assert runner.calls == [{
        "command": "git status --short",
        "cwd": tmp_path,
        "check": False,
        "env": None,
    }]


def test_run_failure_is_a_result(runner):
    runner.result = FakeRaw(exited=1, stderr="fatal: not a git repository\n")
    executor = Executor(runner_factory=lambda: runner)

    result = executor.run(["status"])

    assert not result.success
    assert result.returncode == 1
    assert result.output_lines == ["fatal: not a git repository"]


def test_arguments_are_quoted(runner):
    executor = Executor(runner_factory=lambda: runner)

    executor.run(["commit", "-m", "two words"])

    assert runner.calls[0]["command"] == "git commit -m 'two words'"


def test_env_passed_through(runner):
    executor = Executor(runner_factory=lambda: runner)

    executor.run(["rebase", "--continue"], env={"GIT_EDITOR": "true"})

    assert runner.calls[0]["env"] == {"GIT_EDITOR": "true"}


def test_probe(runner):
    executor = Executor(runner_factory=lambda: runner)
    assert executor.probe(["show-ref", "--verify", "refs/heads/main"])

    runner.result = FakeRaw(exited=1)
    assert not executor.probe(["show-ref", "--verify", "refs/heads/nope"])


def test_submit_delivers_on_drain(runner):
    runner.result = FakeRaw(stdout="done\n")
    executor = Executor(runner_factory=lambda: runner)
    delivered = []

    def callback(result):
        delivered.append((result.output_lines, threading.current_thread()))

    future = executor.submit(["fetch", "origin"], callback)
    future.result(timeout=5)

    # Completed, but not delivered until drained
    assert delivered == []
    assert runner.threads[0] is not threading.current_thread()

    assert executor.drain(block=True, timeout=5) == 1
    assert delivered == [(["done"], threading.current_thread())]
    assert executor.drain() == 0
    executor.close()


def test_submit_runs_in_order(runner):
    executor = Executor(runner_factory=lambda: runner)
    order = []

    for name in ("first", "second", "third"):
        executor.submit([name], lambda result, name=name: order.append(name))
    executor.close()

    assert executor.drain() == 3
    assert order == ["first", "second", "third"]
    assert [call["command"] for call in runner.calls] == [
        "git first", "git second", "git third"
    ]


def test_each_thread_gets_its_own_runner():
    built = []

    def factory():
        built.append(FakeRunner())
        return built[-1]

    executor = Executor(runner_factory=factory)
    executor.run(["status"])
    executor.submit(["fetch", "origin"], lambda result: None)
    executor.submit(["fetch", "upstream"], lambda result: None)
    executor.run(["log"])
    executor.close()

    assert len(built) == 2
    caller, worker = built
    assert [call["command"] for call in caller.calls] == [
        "git status", "git log"
    ]
    assert set(caller.threads) == {threading.current_thread()}
    assert [call["command"] for call in worker.calls] == [
        "git fetch origin", "git fetch upstream"
    ]
    assert threading.current_thread() not in worker.threads


@pytest.mark.skipif(shutil.which("sh") is None, reason="sh is not installed")
def test_background_and_foreground_keep_workdir(tmp_path):
    workdir = tmp_path / "sub"
    workdir.mkdir()
    executor = Executor(workdir=workdir, executable="sh")
    background = []

    future = executor.submit(
        ["-c", "sleep 0.3; pwd"], background.append
    )
    foreground = executor.run(["-c", "pwd"])
    future.result(timeout=10)
    executor.drain()
    executor.close()

    assert foreground.success, foreground.output_lines
    assert Path(foreground.output_lines[0]).resolve() == workdir.resolve()
    assert background[0].success, background[0].output_lines
    assert Path(background[0].output_lines[0]).resolve() == workdir.resolve()

"""Process executor: run git and hand back success plus output lines.

Everything that talks to git goes through an Executor. Calls are
either blocking (run, probe) or background (submit). Background
completions are queued and only delivered when the owning thread
calls drain(), so a callback never runs alongside a model mutation.
"""

from __future__ import annotations

import queue
import shlex
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from conflux.core.log import logger
from conflux.core.result import ProcessResult
from conflux.core.runner import Runner

Callback = Callable[[ProcessResult], None]


class Executor:
    """Runs one executable (git by default) inside a working tree."""

    def __init__(
        self,
        workdir: Path | None = None,
        executable: str = "git",
        runner_factory: Callable[[], Runner] = Runner,
    ):
        """Initialize executor.

        Args:
            workdir: Working directory for every command
            executable: Program to prefix every argument list with
            runner_factory: Builds the invoke Runner for each thread that
                runs commands. invoke keeps the cd stack on the Context,
                so the caller and the background worker never share one.
        """
        self.workdir = workdir
        self.executable = executable
        self.runner_factory = runner_factory
        self._local = threading.local()
        self._pool: ThreadPoolExecutor | None = None
        self._completed: queue.Queue = queue.Queue()

    @property
    def runner(self) -> Runner:
        """The calling thread's Runner, built on first use."""
        runner = getattr(self._local, "runner", None)
        if runner is None:
            runner = self._local.runner = self.runner_factory()
        return runner

    def command_line(self, args: list[str]) -> str:
        """Shell-quoted command line for an argument list."""
        return shlex.join([self.executable, *args])

    def run(
        self,
        args: list[str],
        silent: bool = False,
        env: dict[str, str] | None = None,
    ) -> ProcessResult:
        """Run a command and wait for it.

        Args:
            args: Arguments after the executable (e.g. ["add", "f.py"])
            silent: Do not report failures; for probes that are
                expected to fail sometimes
            env: Extra environment variables

        Returns:
            ProcessResult; a non-zero exit is a result, never an
            exception
        """
        result = self._spawn(args, env)
        if not silent:
            self._report(result)
        return result

    def probe(self, args: list[str]) -> bool:
        """Run a yes/no query silently and return whether it succeeded."""
        return self.run(args, silent=True).success

    def submit(
        self,
        args: list[str],
        callback: Callback,
        silent: bool = False,
        env: dict[str, str] | None = None,
    ) -> Future:
        """Run a command on the background worker.

        The callback is not called from the worker; it is queued and
        runs inside the next drain() on the caller's thread.

        Returns:
            Future resolving to the ProcessResult
        """
        if self._pool is None:
            self._pool = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="conflux-exec"
            )

        future = self._pool.submit(self._spawn, args, env)
        future.add_done_callback(
            lambda done: self._completed.put((done, callback, silent))
        )
        return future

    def drain(self, block: bool = False, timeout: float | None = None) -> int:
        """Deliver queued background completions on this thread.

        Args:
            block: Wait for at least one completion before returning
            timeout: Upper bound on that wait, in seconds

        Returns:
            Number of callbacks run
        """
        delivered = 0
        while True:
            try:
                wait = block and delivered == 0
                done, callback, silent = self._completed.get(
                    block=wait, timeout=timeout if wait else None
                )
            except queue.Empty:
                return delivered

            # Re-raises here, on the owning thread, if the worker failed
            result = done.result()
            if not silent:
                self._report(result)
            callback(result)
            delivered += 1

    def close(self) -> None:
        """Wait for background work to finish and stop the worker."""
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def _spawn(
        self, args: list[str], env: dict[str, str] | None
    ) -> ProcessResult:
        command = self.command_line(args)
        raw = self.runner.execute(
            command,
            cwd=self.workdir,
            check=False,
            env=env,
        )
        result = ProcessResult(
            command=command,
            returncode=raw.exited,
            stdout=raw.stdout,
            stderr=raw.stderr,
        )
        logger.debug(
            "{command} exited {returncode}",
            command=command,
            returncode=result.returncode,
        )
        return result

    def _report(self, result: ProcessResult) -> None:
        if result.success:
            return
        logger.error(
            "{command} failed:\n{output}",
            command=result.command,
            output="\n".join(result.output_lines),
        )

"""Command execution using the invoke library."""

from pathlib import Path

from invoke import Context, Result
from invoke.exceptions import CommandTimedOut

from conflux.core.log import logger


class Runner(Context):
    """invoke.Context with a single keyword-driven execute() method.

    Named execute() so it does not collide with invoke's own run().
    """

    def execute(
        self,
        command: str,
        cwd: Path | None = None,
        timeout: int | None = None,
        log_level: str | None = None,
        check: bool = True,
        env: dict[str, str] | None = None,
    ) -> Result:
        """Execute a shell command and capture its output.

        Args:
            command: Command string to execute
            cwd: Working directory for command execution
            timeout: Maximum execution time in seconds
            log_level: If set, log every output line at this level
            check: If True, raise on non-zero exit code
            env: Environment variables to add (updates os.environ,
                does not replace it)

        Returns:
            invoke.Result with stdout, stderr, exited (return code).
            A timed out command comes back with exited == -1.

        Raises:
            invoke.UnexpectedExit: If check=True and command
                returns non-zero
        """
        kwargs = {
            "hide": True,
            "warn": not check,
            "in_stream": False,
        }
        if timeout:
            kwargs["timeout"] = timeout
        if env:
            kwargs["env"] = env

        logger.spew("Running {command}", command=command, cwd=str(cwd))

        try:
            if cwd:
                with self.cd(str(cwd)):
                    result = self.run(command, **kwargs)
            else:
                result = self.run(command, **kwargs)
        except CommandTimedOut as e:
            result = e.result
            result.exited = -1

        if log_level:
            for line in result.stdout.splitlines():
                logger.log(log_level, line.rstrip())
            for line in result.stderr.splitlines():
                logger.log(log_level, line.rstrip())

        return result

"""Error taxonomy for conflux.

Every error is recovered at the command boundary and reported as a
log message; none of them should reach the user as a traceback.
"""

from __future__ import annotations


class ConfluxError(Exception):
    """Root of all conflux errors."""


class ParseError(ConfluxError, ValueError):
    """A conflicted file could not be read or its markers are malformed.

    Attributes:
        line: 1-based line of the offending marker, if known
    """

    def __init__(self, message: str, line: int | None = None):
        super().__init__(message)
        self.line = line


class ValidationError(ConfluxError, ValueError):
    """A required argument is missing or out of range.

    Raised before any external process runs.
    """


class ProcessFailure(ConfluxError):
    """An external command exited non-zero.

    The output lines are git's own diagnostics and are kept verbatim.

    Attributes:
        label: Human-readable name of the failed operation
        output: Raw stdout/stderr lines of the command
    """

    def __init__(self, label: str, output: list[str] | None = None):
        self.label = label
        self.output = list(output or [])
        super().__init__(self._format())

    def _format(self) -> str:
        if not self.output:
            return f"{self.label} failed"
        return f"{self.label} failed:\n" + "\n".join(self.output)


class PartialWorkflowFailure(ProcessFailure):
    """A merge workflow step failed; earlier steps stay applied.

    Attributes:
        step: 1-based number of the failed step
    """

    def __init__(
        self, step: int, label: str, output: list[str] | None = None
    ):
        self.step = step
        super().__init__(label, output)

    def _format(self) -> str:
        return f"Step {self.step}: {super()._format()}"


__all__ = [
    "ConfluxError",
    "ParseError",
    "ValidationError",
    "ProcessFailure",
    "PartialWorkflowFailure",
]

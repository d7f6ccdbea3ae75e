"""Result types for process execution, saving and workflows."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from conflux.core.errors import (
    PartialWorkflowFailure,
    ValidationError,
)


class ProcessResult(BaseModel):
    """Outcome of one external command."""

    command: str
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def output_lines(self) -> list[str]:
        """stdout lines followed by stderr lines, blanks dropped."""
        lines = []
        for stream in (self.stdout, self.stderr):
            lines.extend(line for line in stream.splitlines() if line)
        return lines


class SaveResult(BaseModel):
    """Outcome of saving a resolver session."""

    file_path: Path
    saved: bool = False
    staged: bool = False
    unresolved: int = 0
    output: list[str] = Field(default_factory=list)


class WorkflowResult(BaseModel):
    """Outcome of a merge workflow run.

    A failed result either names the step that failed (1-based
    ``step``) or, when ``step`` is None, a precondition that stopped
    the run before any command executed.
    """

    success: bool
    message: str
    step: int | None = None
    label: str | None = None
    output: list[str] = Field(default_factory=list)

    @classmethod
    def ok(cls, message: str) -> WorkflowResult:
        return cls(success=True, message=message)

    @classmethod
    def invalid(cls, message: str) -> WorkflowResult:
        return cls(success=False, message=message)

    @classmethod
    def failed(
        cls, step: int, label: str, output: list[str]
    ) -> WorkflowResult:
        return cls(
            success=False,
            message=f"Step {step} failed: {label}",
            step=step,
            label=label,
            output=output,
        )

    def raise_for_failure(self) -> None:
        """Raise the matching error for a failed result.

        Raises:
            ValidationError: If a precondition failed
            PartialWorkflowFailure: If a step failed
        """
        if self.success:
            return
        if self.step is None:
            raise ValidationError(self.message)
        raise PartialWorkflowFailure(self.step, self.label, self.output)


class ConflictPreview(BaseModel):
    """Result of a dry-run merge against a remote branch."""

    remote: str
    branch: str
    has_conflicts: bool
    output: list[str] = Field(default_factory=list)


__all__ = [
    "ProcessResult",
    "SaveResult",
    "WorkflowResult",
    "ConflictPreview",
]

"""In-memory conflict resolution state for one file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from conflux.conflict.parser import (
    Chunk,
    ConflictHunk,
    ConflictRef,
    Resolution,
    TextChunk,
    parse,
)
from conflux.core.errors import ParseError, ValidationError


@dataclass
class ResolverSession:
    """A conflicted file being resolved.

    The session is a plain value owned by the caller; every operation
    works on it directly and nothing is shared globally. Hunk numbers
    and the cursor are 1-based.
    """

    file_path: Path
    chunks: list[Chunk] = field(default_factory=list)
    hunks: list[ConflictHunk] = field(default_factory=list)
    cursor: int = 1

    @classmethod
    def from_content(
        cls, file_path: Path | str, content: str | bytes
    ) -> ResolverSession:
        parsed = parse(content)
        return cls(
            file_path=Path(file_path),
            chunks=parsed.chunks,
            hunks=parsed.hunks,
        )

    @classmethod
    def from_file(cls, file_path: Path | str) -> ResolverSession:
        """Read and parse a file.

        Raises:
            ParseError: If the file cannot be read or is malformed
        """
        path = Path(file_path)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise ParseError(f"Could not read {path}: {e}") from e
        return cls.from_content(path, content)

    # Navigation

    @property
    def current(self) -> ConflictHunk | None:
        if not self.hunks:
            return None
        return self.hunks[self.cursor - 1]

    def next(self) -> bool:
        """Move to the next hunk; stays put on the last one."""
        if self.cursor < len(self.hunks):
            self.cursor += 1
            return True
        return False

    def prev(self) -> bool:
        """Move to the previous hunk; stays put on the first one."""
        if self.cursor > 1:
            self.cursor -= 1
            return True
        return False

    def goto(self, index: int) -> None:
        self._hunk(index)
        self.cursor = index

    # Resolution

    def accept_ours(self, index: int | None = None) -> None:
        self._hunk(index).resolve(Resolution.OURS)

    def accept_theirs(self, index: int | None = None) -> None:
        self._hunk(index).resolve(Resolution.THEIRS)

    def accept_both(self, index: int | None = None) -> None:
        """Keep ours followed by theirs."""
        self._hunk(index).resolve(Resolution.BOTH)

    def accept_lines(
        self, lines: list[str], index: int | None = None
    ) -> None:
        """Resolve with an explicit line sequence."""
        self._hunk(index).resolve(Resolution.CUSTOM, lines)

    def unresolve(self, index: int | None = None) -> None:
        self._hunk(index).unresolve()

    def accept_all_ours(self) -> None:
        for hunk in self.hunks:
            hunk.resolve(Resolution.OURS)

    def accept_all_theirs(self) -> None:
        for hunk in self.hunks:
            hunk.resolve(Resolution.THEIRS)

    # Queries

    def unresolved_count(self) -> int:
        return sum(1 for hunk in self.hunks if not hunk.resolved)

    def resolved_count(self) -> int:
        return len(self.hunks) - self.unresolved_count()

    def build_result(self) -> list[str]:
        """Merged file lines, in original chunk order.

        Resolved hunks contribute their chosen lines; unresolved hunks
        keep their original markers. Safe to call repeatedly; it never
        changes the session.
        """
        result: list[str] = []
        for chunk in self.chunks:
            if isinstance(chunk, TextChunk):
                result.extend(chunk.lines)
            else:
                result.extend(self.hunks[chunk.index - 1].output_lines())
        return result

    def render_text(self) -> str:
        """The merged file as written to disk.

        Newline terminated, except that an empty result is an empty file.
        """
        lines = self.build_result()
        if not lines:
            return ""
        return "\n".join(lines) + "\n"

    def current_line(self) -> int:
        """1-based line where the current hunk starts in build_result()."""
        line = 1
        for chunk in self.chunks:
            if isinstance(chunk, ConflictRef):
                if chunk.index == self.cursor:
                    break
                line += len(self.hunks[chunk.index - 1].output_lines())
            else:
                line += len(chunk.lines)
        return line

    def _hunk(self, index: int | None) -> ConflictHunk:
        if index is None:
            index = self.cursor
        if not 1 <= index <= len(self.hunks):
            raise ValidationError(
                f"No conflict {index} in {self.file_path} "
                f"({len(self.hunks)} total)"
            )
        return self.hunks[index - 1]

"""Parse git conflict markers into chunks and hunks.

A conflicted file becomes two parallel structures:

- ``chunks``: the file in order, as TextChunk runs of literal lines
  and ConflictRef placeholders. This is the only record of file
  structure.
- ``hunks``: one ConflictHunk per conflict, referenced from the
  chunks by 1-based index.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from conflux.core.errors import ParseError

OURS_MARKER = "<<<<<<<"
BASE_MARKER = "|||||||"
SEPARATOR = "======="
THEIRS_MARKER = ">>>>>>>"


class Resolution(str, enum.Enum):
    """How a hunk was resolved."""

    OURS = "ours"
    THEIRS = "theirs"
    BOTH = "both"
    CUSTOM = "custom"


@dataclass
class ConflictHunk:
    """One conflicting region.

    Line content and marker lines are fixed at parse time; only the
    resolution fields change afterwards.
    """

    ours: list[str]
    theirs: list[str]
    base: list[str] | None = None
    ours_marker: str = f"{OURS_MARKER} HEAD"
    base_marker: str | None = None
    separator: str = SEPARATOR
    theirs_marker: str = f"{THEIRS_MARKER} MERGE_HEAD"
    resolved: bool = False
    resolution: Resolution | None = None
    custom: list[str] | None = None

    @property
    def ours_ref(self) -> str:
        """Label after the open marker, e.g. HEAD."""
        return self.ours_marker[len(OURS_MARKER):].strip()

    @property
    def theirs_ref(self) -> str:
        """Label after the close marker, e.g. a branch name."""
        return self.theirs_marker[len(THEIRS_MARKER):].strip()

    def resolve(
        self, resolution: Resolution, custom: list[str] | None = None
    ) -> None:
        self.resolved = True
        self.resolution = resolution
        self.custom = list(custom) if resolution is Resolution.CUSTOM else None

    def unresolve(self) -> None:
        self.resolved = False
        self.resolution = None
        self.custom = None

    def resolved_lines(self) -> list[str]:
        """Lines chosen by the resolution."""
        if self.resolution is Resolution.OURS:
            return list(self.ours)
        if self.resolution is Resolution.THEIRS:
            return list(self.theirs)
        if self.resolution is Resolution.BOTH:
            return [*self.ours, *self.theirs]
        if self.resolution is Resolution.CUSTOM:
            return list(self.custom or [])
        return []

    def marked_lines(self) -> list[str]:
        """The hunk with its markers, exactly as it was read."""
        lines = [self.ours_marker, *self.ours]
        if self.base is not None:
            lines.append(self.base_marker or BASE_MARKER)
            lines.extend(self.base)
        lines.append(self.separator)
        lines.extend(self.theirs)
        lines.append(self.theirs_marker)
        return lines

    def output_lines(self) -> list[str]:
        """What this hunk contributes to the merged result."""
        if self.resolved:
            return self.resolved_lines()
        return self.marked_lines()


@dataclass(frozen=True)
class TextChunk:
    """A run of literal lines reproduced verbatim."""

    lines: tuple[str, ...]


@dataclass(frozen=True)
class ConflictRef:
    """Placeholder for hunk number ``index`` (1-based)."""

    index: int


Chunk = TextChunk | ConflictRef


@dataclass
class ParsedFile:
    """Parser output: hunks plus the ordered chunk sequence."""

    hunks: list[ConflictHunk] = field(default_factory=list)
    chunks: list[Chunk] = field(default_factory=list)


def has_conflict_markers(content: str | bytes) -> bool:
    """Check whether any line opens a conflict."""
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")
    return any(
        line.startswith(OURS_MARKER) for line in content.split("\n")
    )


def split_lines(content: str) -> list[str]:
    """Split on newlines, ignoring the newline that ends the file.

    Carriage returns stay in the lines, so CRLF files join back
    unchanged.
    """
    if content == "":
        return []
    if content.endswith("\n"):
        content = content[:-1]
    return content.split("\n")


def parse(content: str | bytes) -> ParsedFile:
    """Parse conflict markers from file content.

    Lines outside conflicts are coalesced into TextChunks. Separator
    and close markers are only markers inside an open conflict; on
    their own they are ordinary text.

    Args:
        content: Full file content (bytes are decoded as UTF-8)

    Returns:
        ParsedFile; no conflicts gives an empty hunk list

    Raises:
        ParseError: If the content is not UTF-8 or a conflict is
            never closed (missing separator or close marker, or a
            new open marker inside an open conflict)
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"File is not valid UTF-8: {e}") from e

    lines = split_lines(content)
    parsed = ParsedFile()
    text: list[str] = []
    i = 0

    while i < len(lines):
        line = lines[i]
        if not line.startswith(OURS_MARKER):
            text.append(line)
            i += 1
            continue

        if text:
            parsed.chunks.append(TextChunk(tuple(text)))
            text = []

        hunk, i = _parse_hunk(lines, i)
        parsed.hunks.append(hunk)
        parsed.chunks.append(ConflictRef(len(parsed.hunks)))

    if text:
        parsed.chunks.append(TextChunk(tuple(text)))

    return parsed


def _parse_hunk(lines: list[str], start: int) -> tuple[ConflictHunk, int]:
    """Read one conflict beginning at ``lines[start]``.

    Returns:
        The hunk and the index of the first line after it
    """
    hunk = ConflictHunk(ours=[], theirs=[], ours_marker=lines[start])
    section = hunk.ours
    seen_separator = False

    for i in range(start + 1, len(lines)):
        line = lines[i]

        if line.startswith(OURS_MARKER):
            raise ParseError(
                f"Conflict opened at line {start + 1} is not closed "
                f"before the next one at line {i + 1}",
                line=start + 1,
            )
        if not seen_separator and line.startswith(BASE_MARKER):
            hunk.base = []
            hunk.base_marker = line
            section = hunk.base
        elif not seen_separator and line.startswith(SEPARATOR):
            hunk.separator = line
            seen_separator = True
            section = hunk.theirs
        elif seen_separator and line.startswith(THEIRS_MARKER):
            hunk.theirs_marker = line
            return hunk, i + 1
        else:
            section.append(line)

    missing = "close marker" if seen_separator else "separator"
    raise ParseError(
        f"Malformed conflict at line {start + 1}: no {missing} found",
        line=start + 1,
    )

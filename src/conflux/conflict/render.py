"""Three-view rendering of a resolver session.

The resolver shows the current hunk's incoming (theirs) and local
(ours) sides next to a live preview of the whole merged file. This
module computes those views; drawing them is up to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from conflux.conflict.session import ResolverSession

KEY_LEGEND = (
    "[l]ours [h]theirs [b]oth [u]ndo [j/k]navigate "
    "[a]ll-ours [A]ll-theirs [s]ave [q]uit"
)


@dataclass
class ResolverView:
    """Everything a UI needs to draw one frame."""

    incoming: list[str] = field(default_factory=list)
    local: list[str] = field(default_factory=list)
    result: list[str] = field(default_factory=list)
    result_line: int = 1
    result_span: int = 0
    info: list[str] = field(default_factory=list)


def status_label(session: ResolverSession) -> str:
    hunk = session.current
    if hunk is None or not hunk.resolved:
        return "[unresolved]"
    return f"[{hunk.resolution.value}]"


def render(session: ResolverSession) -> ResolverView:
    """Build the views for the session's current hunk."""
    hunk = session.current
    if hunk is None:
        return ResolverView(info=[f"No conflicts in {session.file_path}"])

    total = len(session.hunks)
    return ResolverView(
        incoming=list(hunk.theirs),
        local=list(hunk.ours),
        result=session.build_result(),
        result_line=session.current_line(),
        result_span=len(hunk.output_lines()),
        info=[
            f"Conflict {session.cursor}/{total} {status_label(session)} "
            f"· File: {session.file_path}",
            f"Resolved: {session.resolved_count()}/{total} · {KEY_LEGEND}",
        ],
    )


def format_view(view: ResolverView, context: int = 5) -> str:
    """Plain-text frame for a terminal.

    Shows both sides of the current hunk, then the current hunk in the
    merged result with ``context`` lines either side, numbered.
    """
    out = []
    out.append("── Incoming (theirs) ──")
    out.extend(view.incoming or ["(empty)"])
    out.append("── Local (ours) ──")
    out.extend(view.local or ["(empty)"])
    out.append("── Result ──")

    start = max(1, view.result_line - context)
    last = view.result_line + max(view.result_span, 1) - 1
    end = min(len(view.result), last + context)
    width = len(str(end)) if end else 1
    for number in range(start, end + 1):
        pointer = ">" if view.result_line <= number <= last else " "
        out.append(f"{pointer}{number:>{width}} {view.result[number - 1]}")

    out.append("──")
    out.extend(view.info)
    return "\n".join(out)

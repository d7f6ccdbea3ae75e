"""Tests for resolver view rendering."""

from conflux.conflict.render import KEY_LEGEND, format_view, render
from conflux.conflict.session import ResolverSession

TWO = (
    "top\n"
    "<<<<<<< HEAD\nx1\n=======\ny1\n>>>>>>> other\n"
    "middle\n"
    "<<<<<<< HEAD\nx2a\nx2b\n=======\ny2\n>>>>>>> other\n"
    "bottom\n"
)


def test_render_current_hunk():
    session = ResolverSession.from_content("two.txt", TWO)
    session.next()

    view = render(session)

    assert view.incoming == ["y2"]
    assert view.local == ["x2a", "x2b"]
    assert view.result == session.build_result()
    assert view.result_line == 8
    assert view.result_span == 6
    assert view.info[0] == "Conflict 2/2 [unresolved] · File: two.txt"
    assert view.info[1] == f"Resolved: 0/2 · {KEY_LEGEND}"


def test_render_shows_resolution_status():
    session = ResolverSession.from_content("two.txt", TWO)
    session.accept_theirs()

    view = render(session)

    assert "[theirs]" in view.info[0]
    assert view.info[1].startswith("Resolved: 1/2")
    assert view.result_span == 1


def test_render_without_conflicts():
    session = ResolverSession.from_content("plain.txt", "text\n")

    view = render(session)

    assert view.result == []
    assert view.info == ["No conflicts in plain.txt"]


def test_format_view_marks_current_hunk():
    session = ResolverSession.from_content("two.txt", TWO)
    session.accept_ours(1)

    text = format_view(render(session), context=1)
    lines = text.splitlines()

    assert "── Incoming (theirs) ──" in lines
    assert ">2 x1" in lines
    assert " 1 top" in lines
    assert " 3 middle" in lines
    # context=1 stops before the second hunk's markers
    assert not any("x2a" in line for line in lines)
    assert lines[-1].startswith("Resolved: 1/2")


def test_format_view_empty_side():
    session = ResolverSession.from_content(
        "f.txt", "<<<<<<< HEAD\n=======\nonly theirs\n>>>>>>> x\n"
    )

    text = format_view(render(session))

    assert "(empty)" in text
    assert "only theirs" in text

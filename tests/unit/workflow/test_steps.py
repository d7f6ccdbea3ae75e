"""Tests for merge workflow step planning."""

from conflux.workflow.steps import build_steps


def set_upstream(executor, branch, remote, merge):
    executor.respond(["config", "--get", f"branch.{branch}.remote"], stdout=remote)
    executor.respond(
        ["config", "--get", f"branch.{branch}.merge"],
        stdout=f"refs/heads/{merge}",
    )


def test_full_sequence_with_upstreams(git, executor):
    set_upstream(executor, "main", "origin", "main")
    set_upstream(executor, "feature", "origin", "feature")

    steps = build_steps(git, "main", "feature", ["--autosquash"])

    assert [step.label for step in steps] == [
        "Checkout main",
        "Pull main from origin/main (rebase)",
        "Checkout feature",
        "Pull feature from origin/feature (rebase)",
        "Rebase feature onto main",
        "Checkout main",
        "Merge feature into main",
    ]
    assert [list(step.args) for step in steps] == [
        ["checkout", "main"],
        ["pull", "--rebase", "origin", "main"],
        ["checkout", "feature"],
        ["pull", "--rebase", "origin", "feature"],
        ["rebase", "--autosquash", "main"],
        ["checkout", "main"],
        ["merge", "feature"],
    ]


def test_pull_skipped_without_upstream(git, executor):
    set_upstream(executor, "main", "upstream", "trunk")

    steps = build_steps(git, "main", "feature")

    assert [step.label for step in steps] == [
        "Checkout main",
        "Pull main from upstream/trunk (rebase)",
        "Checkout feature",
        "Rebase feature onto main",
        "Checkout main",
        "Merge feature into main",
    ]


def test_planning_runs_no_mutating_command(git, executor):
    build_steps(git, "main", "feature")

    assert executor.mutating_calls() == []

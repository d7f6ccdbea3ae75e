"""Tests for the git wrapper against a recording executor."""

import pytest

from conflux.core.errors import ProcessFailure
from conflux.git.repo import BranchUpstream


def test_has_local_branch(git, executor):
    executor.respond(
        ["show-ref", "--verify", "--quiet", "refs/heads/missing"],
        returncode=1,
    )

    assert git.has_local_branch("main") is True
    assert git.has_local_branch("missing") is False
    assert git.has_local_branch("") is False
    assert executor.calls[0] == [
        "show-ref", "--verify", "--quiet", "refs/heads/main"
    ]


def test_upstream_from_branch_config(git, executor):
    executor.respond(["config", "--get", "branch.main.remote"], stdout="origin\n")
    executor.respond(
        ["config", "--get", "branch.main.merge"], stdout="refs/heads/trunk\n"
    )

    upstream = git.upstream("main")

    assert upstream == BranchUpstream(remote="origin", branch="trunk")
    assert upstream.ref == "origin/trunk"


def test_no_upstream(git, executor):
    executor.respond(["config", "--get"], returncode=1)

    assert git.upstream("feature") is None


def test_current_branch(git, executor):
    executor.respond(["rev-parse", "--abbrev-ref", "HEAD"], stdout="feature\n")
    assert git.current_branch() == "feature"


def test_current_branch_detached(git, executor):
    executor.respond(["rev-parse", "--abbrev-ref", "HEAD"], stdout="HEAD\n")
    assert git.current_branch() is None


def test_branches_sorted(git, executor):
    executor.respond(["branch"], stdout="main\nfeature\n\n")
    assert git.branches() == ["feature", "main"]


def test_conflicted_files_relative_to_workdir(git, executor):
    executor.respond(
        ["diff", "--name-only", "--diff-filter=U"], stdout="a.py\n\n"
    )

    assert git.conflicted_files() == ["a.py"]
    assert executor.calls[-1] == [
        "diff", "--name-only", "--diff-filter=U", "--relative"
    ]


def test_rebase_args_before_target(git, executor):
    git.rebase("main", ["--autosquash", "-X", "theirs"])

    assert executor.calls[-1] == [
        "rebase", "--autosquash", "-X", "theirs", "main"
    ]


def test_pull_rebase(git, executor):
    git.pull_rebase(BranchUpstream("upstream", "main"))

    assert executor.calls[-1] == ["pull", "--rebase", "upstream", "main"]


def test_rebase_continue_bypasses_editor(git, executor):
    git.rebase_continue()

    assert executor.calls[-1] == ["rebase", "--continue"]
    assert executor.envs[-1] == {"GIT_EDITOR": "true"}


def test_preview_conflicts_clean(git, executor):
    executor.respond(["merge-tree"], returncode=0, stdout="abc123\n")

    preview = git.preview_conflicts("main")

    assert executor.calls[0] == ["fetch", "origin"]
    assert executor.calls[1] == [
        "merge-tree", "--write-tree", "--name-only", "HEAD", "origin/main"
    ]
    assert preview.has_conflicts is False
    assert preview.remote == "origin"


def test_preview_conflicts_detected(git, executor):
    executor.respond(
        ["merge-tree"],
        returncode=1,
        stdout="abc123\nsrc/app.py\n\nCONFLICT (content): Merge conflict in src/app.py\n",
    )

    preview = git.preview_conflicts("main")

    assert preview.has_conflicts is True
    assert "src/app.py" in preview.output


def test_preview_conflicts_fetch_failure(git, executor):
    executor.respond(["fetch"], returncode=128, stderr="fatal: no such remote")

    with pytest.raises(ProcessFailure, match="no such remote"):
        git.preview_conflicts("main")
    assert len(executor.calls) == 1


def test_preview_conflicts_merge_tree_error(git, executor):
    executor.respond(["merge-tree"], returncode=128, stderr="fatal: bad ref")

    with pytest.raises(ProcessFailure) as excinfo:
        git.preview_conflicts("nope")
    assert excinfo.value.label == "Merge preview against origin/nope"

"""The ordered git commands that bring a feature branch into main."""

from __future__ import annotations

from dataclasses import dataclass

from conflux.core.result import ProcessResult
from conflux.git.repo import Git


@dataclass(frozen=True)
class MergeWorkflowStep:
    """One command in the sequence.

    ``args`` is the git argument list exactly as it will run, which
    lets callers show or test the plan without executing it.
    """

    label: str
    args: tuple[str, ...]

    def run(self, git: Git) -> ProcessResult:
        return git.executor.run(list(self.args))


def build_steps(
    git: Git,
    main_branch: str,
    feature_branch: str,
    rebase_args: list[str] | None = None,
) -> list[MergeWorkflowStep]:
    """Plan the sync of ``feature_branch`` into ``main_branch``.

    The full sequence is:

    1. checkout main
    2. pull --rebase main from its upstream
    3. checkout feature
    4. pull --rebase feature from its upstream
    5. rebase feature onto main
    6. checkout main
    7. merge feature

    A pull step is left out when its branch has no upstream, so the
    plan can be shorter than seven steps.
    """
    steps: list[MergeWorkflowStep] = []

    def add(label: str, args: list[str]) -> None:
        steps.append(MergeWorkflowStep(label=label, args=tuple(args)))

    def checkout_and_pull(branch: str) -> None:
        add(f"Checkout {branch}", ["checkout", branch])
        upstream = git.upstream(branch)
        if upstream is not None:
            add(
                f"Pull {branch} from {upstream.ref} (rebase)",
                ["pull", "--rebase", upstream.remote, upstream.branch],
            )

    checkout_and_pull(main_branch)
    checkout_and_pull(feature_branch)
    add(
        f"Rebase {feature_branch} onto {main_branch}",
        ["rebase", *(rebase_args or []), main_branch],
    )
    add(f"Checkout {main_branch}", ["checkout", main_branch])
    add(
        f"Merge {feature_branch} into {main_branch}",
        ["merge", feature_branch],
    )
    return steps

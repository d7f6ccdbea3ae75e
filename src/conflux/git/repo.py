"""git queries and mutations on top of the process executor."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from conflux.core.errors import ProcessFailure
from conflux.core.executor import Executor
from conflux.core.log import logger
from conflux.core.result import ConflictPreview, ProcessResult


@dataclass(frozen=True)
class BranchUpstream:
    """Remote-tracking branch configured for a local branch."""

    remote: str
    branch: str

    @property
    def ref(self) -> str:
        return f"{self.remote}/{self.branch}"


class Git:
    """Thin wrapper around git invocations used by conflux.

    Query methods run silently and return plain values; mutating
    methods return the ProcessResult so the caller decides how to
    report a failure.
    """

    def __init__(self, executor: Executor, remote: str = "origin"):
        """Initialize git wrapper.

        Args:
            executor: Executor bound to the repository working tree
            remote: Remote used when a branch has no upstream of its own
        """
        self.executor = executor
        self.remote = remote

    @classmethod
    def from_config(cls, git_config) -> Git:
        """Build from a GitConfig section."""
        executor = Executor(
            workdir=git_config.workdir,
            executable=git_config.executable,
        )
        return cls(executor, remote=git_config.remote)

    @property
    def workdir(self) -> Path:
        return Path(self.executor.workdir or ".")

    # Existence probes

    def is_repo(self) -> bool:
        return self.executor.probe(["rev-parse", "--is-inside-work-tree"])

    def has_local_branch(self, name: str) -> bool:
        if not name:
            return False
        return self.executor.probe(
            ["show-ref", "--verify", "--quiet", f"refs/heads/{name}"]
        )

    def is_rebase_in_progress(self) -> bool:
        """True while git has a rebase-merge or rebase-apply directory."""
        return any(
            path is not None and path.is_dir()
            for path in (
                self._git_path("rebase-merge"),
                self._git_path("rebase-apply"),
            )
        )

    def is_merge_in_progress(self) -> bool:
        path = self._git_path("MERGE_HEAD")
        return path is not None and path.is_file()

    # Read-only queries

    def branches(self) -> list[str]:
        result = self.executor.run(
            ["branch", "--format", "%(refname:short)"], silent=True
        )
        if not result.success:
            return []
        return sorted(
            line.strip() for line in result.stdout.splitlines()
            if line.strip()
        )

    def current_branch(self) -> str | None:
        """Checked-out branch name, or None when HEAD is detached."""
        result = self.executor.run(
            ["rev-parse", "--abbrev-ref", "HEAD"], silent=True
        )
        if not result.success or not result.output_lines:
            return None
        branch = result.output_lines[0].strip()
        return None if branch == "HEAD" else branch

    def upstream(self, branch: str) -> BranchUpstream | None:
        """Tracking branch from branch.<name>.remote/.merge, if set."""
        remote = self._config_value(f"branch.{branch}.remote")
        merge = self._config_value(f"branch.{branch}.merge")
        if not remote or not merge:
            return None
        return BranchUpstream(
            remote=remote,
            branch=merge.removeprefix("refs/heads/"),
        )

    def conflicted_files(self) -> list[str]:
        """Paths with unmerged entries, relative to the working directory."""
        result = self.executor.run(
            ["diff", "--name-only", "--diff-filter=U", "--relative"],
            silent=True,
        )
        if not result.success:
            return []
        return [line for line in result.stdout.splitlines() if line.strip()]

    # Mutations

    def stage(self, path: Path | str) -> ProcessResult:
        return self.executor.run(["add", "--", str(path)])

    def checkout(self, branch: str) -> ProcessResult:
        return self.executor.run(["checkout", branch])

    def pull_rebase(self, upstream: BranchUpstream) -> ProcessResult:
        return self.executor.run(
            ["pull", "--rebase", upstream.remote, upstream.branch]
        )

    def rebase(
        self, onto: str, extra_args: list[str] | None = None
    ) -> ProcessResult:
        return self.executor.run(["rebase", *(extra_args or []), onto])

    def merge(self, branch: str) -> ProcessResult:
        return self.executor.run(["merge", branch])

    def commit_no_edit(self) -> ProcessResult:
        """Conclude an in-progress merge with git's prepared message."""
        return self.executor.run(["commit", "--no-edit"])

    def rebase_continue(
        self, env: dict[str, str] | None = None
    ) -> ProcessResult:
        """Continue a rebase; env should bypass the message editor."""
        return self.executor.run(
            ["rebase", "--continue"], env=env or {"GIT_EDITOR": "true"}
        )

    def preview_conflicts(self, branch: str) -> ConflictPreview:
        """Dry-run merge of <remote>/<branch> into HEAD.

        Fetches the remote, then lets ``git merge-tree --write-tree``
        compute the merge without touching the working tree. Exit
        status 1 means the merge would conflict.

        Raises:
            ProcessFailure: If the fetch or merge-tree itself fails
        """
        fetch = self.executor.run(["fetch", self.remote])
        if not fetch.success:
            raise ProcessFailure(
                f"Fetch {self.remote}", fetch.output_lines
            )

        target = f"{self.remote}/{branch}"
        result = self.executor.run(
            ["merge-tree", "--write-tree", "--name-only", "HEAD", target],
            silent=True,
        )
        if result.returncode not in (0, 1):
            raise ProcessFailure(
                f"Merge preview against {target}", result.output_lines
            )

        logger.debug(
            "merge-tree against {target} exited {returncode}",
            target=target,
            returncode=result.returncode,
        )
        return ConflictPreview(
            remote=self.remote,
            branch=branch,
            has_conflicts=result.returncode == 1,
            output=result.output_lines,
        )

    def _git_path(self, name: str) -> Path | None:
        """Resolve a path inside the git directory (worktree aware)."""
        result = self.executor.run(
            ["rev-parse", "--git-path", name], silent=True
        )
        if not result.success or not result.output_lines:
            return None
        path = Path(result.output_lines[0].strip())
        if not path.is_absolute():
            path = self.workdir / path
        return path

    def _config_value(self, key: str) -> str | None:
        result = self.executor.run(["config", "--get", key], silent=True)
        if not result.success or not result.output_lines:
            return None
        return result.output_lines[0].strip()

"""Check command - preview conflicts with a remote branch."""

from __future__ import annotations

from pydantic import BaseModel, Field

from conflux.core.errors import ConfluxError, ValidationError
from conflux.core.log import logger
from conflux.git.repo import Git


class CheckCommand(BaseModel):
    """Fetch, then dry-run a merge of <remote>/<branch> into HEAD.

    Uses git merge-tree, so neither the working tree nor the index is
    touched.
    """

    branch: str | None = Field(
        default=None,
        description=(
            "Remote branch to check against (default: the current "
            "branch, else config.workflow.main_branch)"
        ),
    )

    async def run_workflow(self, state: "State") -> int:
        """Run the conflict preview.

        Returns:
            Exit code (0 whether or not conflicts are predicted,
            1 if the check itself failed)
        """
        git = Git.from_config(state.config.git)
        try:
            if not git.is_repo():
                raise ValidationError(
                    f"{git.workdir} is not a git repository"
                )

            branch = (
                self.branch
                or git.current_branch()
                or state.config.workflow.main_branch
            )
            logger.info("Checking for conflicts...")
            preview = git.preview_conflicts(branch)
        except ConfluxError as e:
            logger.error(str(e))
            return 1

        target = f"{preview.remote}/{preview.branch}"
        if preview.has_conflicts:
            logger.warning(
                f"Conflicts detected when merging {target} "
                "into current branch"
            )
            for line in preview.output:
                print(line)
        else:
            logger.info(f"No conflicts detected. Safe to merge {target}")
        return 0

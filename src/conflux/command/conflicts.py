"""Conflicts command - list files with unresolved conflicts."""

from pydantic import BaseModel

from conflux.core.log import logger
from conflux.git.repo import Git


class ConflictsCommand(BaseModel):
    """List files git reports as conflicted, one per line."""

    async def run_workflow(self, state: "State") -> int:
        git = Git.from_config(state.config.git)
        if not git.is_repo():
            logger.error(f"{git.workdir} is not a git repository")
            return 1

        files = git.conflicted_files()
        for path in files:
            print(path)
        logger.info(f"{len(files)} conflicted file(s)")
        return 0

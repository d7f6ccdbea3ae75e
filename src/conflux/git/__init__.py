"""git access for conflux."""

from conflux.git.repo import BranchUpstream, Git

__all__ = ["BranchUpstream", "Git"]

"""Resolver controller: open a file, dispatch keys, save and continue."""

from __future__ import annotations

import enum
from collections.abc import Callable
from pathlib import Path

from conflux.conflict.session import ResolverSession
from conflux.core.config import ResolverConfig
from conflux.core.errors import ConfluxError, ValidationError
from conflux.core.log import logger
from conflux.core.result import ProcessResult, SaveResult
from conflux.git.repo import Git

Confirm = Callable[[str], bool]


class Action(str, enum.Enum):
    """What the UI should do after a key press."""

    CONTINUE = "continue"
    SAVE = "save"
    QUIT = "quit"
    IGNORED = "ignored"


# key -> (session method name or None, resulting action)
KEYMAP: dict[str, tuple[str | None, Action]] = {
    "j": ("next", Action.CONTINUE),
    "k": ("prev", Action.CONTINUE),
    "l": ("accept_ours", Action.CONTINUE),
    "h": ("accept_theirs", Action.CONTINUE),
    "a": ("accept_all_ours", Action.CONTINUE),
    "A": ("accept_all_theirs", Action.CONTINUE),
    "b": ("accept_both", Action.CONTINUE),
    "u": ("unresolve", Action.CONTINUE),
    "s": (None, Action.SAVE),
    "q": (None, Action.QUIT),
    "<Esc>": (None, Action.QUIT),
    "\x1b": (None, Action.QUIT),
}


class ConflictResolver:
    """Drives a ResolverSession against a real working tree.

    The session itself knows nothing about disk or git; this class
    reads the file, writes the result back, stages it and offers to
    finish an in-progress rebase or merge.
    """

    def __init__(self, git: Git, config: ResolverConfig | None = None):
        self.git = git
        self.config = config or ResolverConfig()

    def open(self, file_path: Path | str) -> ResolverSession | None:
        """Load a conflicted file into a new session.

        Relative paths are taken from the git working tree.

        Returns:
            The session, or None when the file has no conflict markers

        Raises:
            ValidationError: If no path was given
            ParseError: If the file is unreadable or malformed
        """
        if not file_path or not str(file_path).strip():
            raise ValidationError("No file given to resolve")

        path = self._absolute(Path(file_path))
        session = ResolverSession.from_file(path)
        if not session.hunks:
            logger.info(f"No conflicts in {path}, nothing to resolve")
            return None

        logger.info(
            f"Opened {path} with {len(session.hunks)} conflict(s)"
        )
        return session

    def handle_key(self, session: ResolverSession, key: str) -> Action:
        """Apply the model operation bound to ``key``.

        Unknown keys change nothing and return Action.IGNORED.
        """
        binding = KEYMAP.get(key)
        if binding is None:
            return Action.IGNORED

        method, action = binding
        if method is not None and session.hunks:
            getattr(session, method)()
            logger.trace(
                f"Key {key!r} -> {method}, "
                f"{session.unresolved_count()} unresolved"
            )
        return action

    def save(self, session: ResolverSession, confirm: Confirm) -> SaveResult:
        """Write the merged result and stage it.

        With unresolved hunks left, ``confirm`` is asked first; those
        hunks are written with their markers intact. A staging failure
        is logged and reported, the written file is left in place.
        """
        path = session.file_path
        unresolved = session.unresolved_count()
        result = SaveResult(file_path=path, unresolved=unresolved)

        if unresolved and not confirm(
            f"{unresolved} conflict(s) unresolved. Save anyway?"
        ):
            logger.info("Save cancelled")
            return result

        try:
            path.write_text(session.render_text(), encoding="utf-8")
        except OSError as e:
            raise ConfluxError(f"Could not write {path}: {e}") from e
        result.saved = True
        logger.info(f"Saved {path}")

        staged = self.git.stage(path)
        result.output = staged.output_lines
        if staged.success:
            result.staged = True
            logger.info(f"Staged {path}")
        else:
            logger.warning(
                f"Saved {path} but could not stage it:\n"
                + "\n".join(staged.output_lines)
            )
        return result

    def after_save(
        self, saved: SaveResult, confirm: Confirm
    ) -> ProcessResult | None:
        """Offer to continue the rebase or conclude the merge.

        Only runs once the file is staged. An in-progress rebase takes
        priority over a merge; at most one prompt is shown.

        Returns:
            The continue/commit result, or None if nothing ran
        """
        if not saved.staged or not self.config.offer_continue:
            return None

        if self.git.is_rebase_in_progress():
            if not confirm("Continue rebase?"):
                return None
            result = self.git.rebase_continue(env=self.config.continue_env)
            if result.success:
                logger.info("Rebase continued")
            return result

        if self.git.is_merge_in_progress():
            if not confirm("Commit merge?"):
                return None
            result = self.git.commit_no_edit()
            if result.success:
                logger.info("Merge committed")
            return result

        return None

    def get_conflicted_files(self) -> list[str]:
        return self.git.conflicted_files()

    def _absolute(self, path: Path) -> Path:
        if path.is_absolute():
            return path
        return self.git.workdir / path

"""Resolve command - resolve conflict hunks in one file."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from conflux.conflict.render import format_view, render
from conflux.conflict.resolver import Action, ConflictResolver
from conflux.conflict.session import ResolverSession
from conflux.core.errors import ConfluxError
from conflux.core.log import logger
from conflux.git.repo import Git


def ask(prompt: str, assume_yes: bool = False) -> bool:
    """Yes/no prompt on the terminal; end of input counts as no."""
    if assume_yes:
        logger.info(f"{prompt} yes")
        return True
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def choose_file(files: list[str]) -> str | None:
    """Numbered pick on the terminal.

    Empty input takes the first file; q or end of input picks nothing.
    """
    for number, name in enumerate(files, 1):
        print(f"{number:>3}  {name}")
    while True:
        try:
            answer = input(
                f"Resolve which file? [1-{len(files)}, q to quit] "
            ).strip()
        except EOFError:
            return None
        if not answer:
            return files[0]
        if answer.lower() == "q":
            return None
        if answer.isdigit() and 1 <= int(answer) <= len(files):
            return files[int(answer) - 1]
        logger.warning(f"Pick a number from 1 to {len(files)}")


class ResolveCommand(BaseModel):
    """Resolve merge conflicts in a file.

    Without --accept, shows each conflict with both sides and a
    preview of the merged file, and reads one key per line:
    l ours, h theirs, b both, u undo, j/k next/previous,
    a/A all ours/theirs, s save, q quit.

    Saving writes the file and stages it, then offers to continue an
    in-progress rebase or commit an in-progress merge.
    """

    file: str | None = Field(
        default=None,
        description=(
            "File to resolve (default: pick from the conflicted files; "
            "the first one with --accept or --yes)"
        ),
    )
    accept: Literal["ours", "theirs"] | None = Field(
        default=None,
        description="Resolve every conflict with one side and save",
    )
    yes: bool = Field(
        default=False,
        description="Answer yes to every prompt",
    )

    async def run_workflow(self, state: "State") -> int:
        """Run the resolver.

        Args:
            state: State instance

        Returns:
            Exit code (0=success)
        """
        git = Git.from_config(state.config.git)
        resolver = ConflictResolver(git, state.config.resolver)
        runtime = state.runtime.resolve

        try:
            path = self._choose_file(resolver)
            if path is None:
                return 0

            session = resolver.open(path)
            if session is None:
                return 0

            runtime.session = session
            runtime.status = "open"

            if self.accept is not None:
                return self._accept_and_save(resolver, session, runtime)
            return self._interactive(resolver, session, runtime)
        except ConfluxError as e:
            logger.error(str(e))
            return 1
        finally:
            git.executor.close()

    def _choose_file(self, resolver: ConflictResolver) -> str | None:
        if self.file:
            return self.file

        files = resolver.get_conflicted_files()
        if not files:
            logger.info("No conflicted files")
            return None
        if len(files) == 1 or self.accept is not None or self.yes:
            if len(files) > 1:
                logger.info(
                    f"{len(files)} conflicted files, starting with {files[0]}"
                )
            return files[0]

        path = choose_file(files)
        if path is None:
            logger.info("No file chosen")
        return path

    def _confirm(self, prompt: str) -> bool:
        return ask(prompt, self.yes)

    def _accept_and_save(self, resolver, session, runtime) -> int:
        if self.accept == "ours":
            session.accept_all_ours()
        else:
            session.accept_all_theirs()
        logger.info(
            f"Accepted {self.accept} for {len(session.hunks)} conflict(s)"
        )
        saved = resolver.save(session, self._confirm)
        if not saved.saved:
            return 1
        return self._finish(resolver, saved, runtime)

    def _interactive(
        self,
        resolver: ConflictResolver,
        session: ResolverSession,
        runtime,
    ) -> int:
        while True:
            print(format_view(render(session)))
            try:
                key = input("> ").strip()
            except EOFError:
                key = "q"

            action = resolver.handle_key(session, key)
            if action is Action.IGNORED and key:
                logger.warning(f"Unknown key {key!r}")
            elif action is Action.SAVE:
                saved = resolver.save(session, self._confirm)
                if saved.saved:
                    return self._finish(resolver, saved, runtime)
            elif action is Action.QUIT:
                runtime.status = "closed"
                runtime.session = None
                logger.info("Closed without saving")
                return 0

    def _finish(self, resolver, saved, runtime) -> int:
        runtime.status = "saved"
        runtime.session = None
        if not saved.staged:
            return 1

        followup = resolver.after_save(saved, self._confirm)
        if followup is not None and not followup.success:
            return 1
        return 0

"""Application state and configuration."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import platformdirs
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from conflux.core.base import BaseConfig, BaseState
from conflux.core.log import Logger
from conflux.core.yaml_settings import (
    CONFIG_FILENAME,
    YamlWithIncludesSettingsSource,
)

# Modules available for template substitution in YAML files
# Usage: {platformdirs.user_state_dir}, {os.sep}
TEMPLATE_NAMESPACE = {
    'os': os,
    'platformdirs': platformdirs,
    'Path': Path,
}

# ============================================================
# CONFIG MODELS (loaded from YAML/env/CLI)
# ============================================================

class GitConfig(BaseConfig):
    """Repository location and git invocation settings."""

    workdir: Path = Field(
        default=Path("."),
        description="Path to the git working tree",
    )
    remote: str = Field(
        default="origin",
        description="Remote used when a branch has no upstream of its own",
    )
    executable: str = Field(
        default="git",
        description="git executable to invoke",
    )


class WorkflowConfig(BaseConfig):
    """Sync-feature-branch-with-main workflow settings."""

    main_branch: str = Field(
        default="main",
        description="Branch that feature branches are merged into",
    )
    rebase_args: list[str] = Field(
        default_factory=list,
        description=(
            "Extra arguments for the rebase step, placed before the "
            "target branch (e.g. ['--autosquash'])"
        ),
    )


class ResolverConfig(BaseConfig):
    """Conflict resolver settings."""

    offer_continue: bool = Field(
        default=True,
        description=(
            "After save and stage, offer to continue an in-progress "
            "rebase or commit an in-progress merge"
        ),
    )
    continue_env: dict[str, str] = Field(
        default_factory=lambda: {"GIT_EDITOR": "true"},
        description=(
            "Environment for 'rebase --continue' so no editor blocks"
        ),
    )


class Config(BaseConfig):
    """Application configuration loaded from YAML/env/CLI."""

    logger: Logger = Field(
        default=None,
        description="Logger configuration and runtime instance"
    )
    git: GitConfig = Field(
        default_factory=GitConfig,
        description="Repository settings",
    )
    workflow: WorkflowConfig = Field(
        default_factory=WorkflowConfig,
        description="Merge workflow settings",
    )
    resolver: ResolverConfig = Field(
        default_factory=ResolverConfig,
        description="Conflict resolver settings",
    )

    log_level: str = Field(
        default="info",
        alias="log-level",
        description=(
            "Console log level: 'trace', 'debug', 'info', "
            "'warn', 'error', 'fatal'"
        ),
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir()) / "conflux"
        ),
        description=(
            "Root directory for all log files "
            "(supports {platformdirs.*} templates)"
        ),
    )

    model_config = ConfigDict(populate_by_name=True)

    @property
    def session_name(self) -> str:
        """Name used for log directories: the working tree's name."""
        return self.git.workdir.resolve().name or "conflux"

    @model_validator(mode='after')
    def _setup_logger(self) -> 'Config':
        """Install the global logger once config has loaded."""
        from conflux.core.log import setup_logger
        from conflux.core.yaml_settings import _cleanup_bootstrap_logger

        if self.logger is None:
            self.logger = Logger()

        setup_logger(
            log_root=self.log_root,
            session_name=self.session_name,
            console=self.logger.console,
            file=self.logger.file,
            level=self.logger.level or self.log_level,
        )

        _cleanup_bootstrap_logger()

        return self

    def close(self):
        """Close the global logger, then the other children."""
        from conflux.core.log import logger
        logger.close()

        super().close()


# ============================================================
# RUNTIME STATE MODELS (mutable during execution)
# ============================================================

class ResolveState(BaseState):
    """Conflict resolver runtime state."""

    session: Any = Field(
        default=None,
        description="Active ResolverSession, if a file is open",
    )
    status: str = Field(
        default="idle",
        description="Resolver status: idle, open, saved, closed",
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)


class SyncState(BaseState):
    """Merge workflow runtime state (the workflow graph's state)."""

    main_branch: str = Field(
        default="",
        description="Branch being merged into",
    )
    feature_branch: str = Field(
        default="",
        description="Branch being rebased and merged",
    )
    rebase_args: list[str] = Field(
        default_factory=list,
        description="Extra rebase arguments for this run",
    )
    steps: list[Any] = Field(
        default_factory=list,
        description="MergeWorkflowStep sequence built for this run",
    )
    completed: int = Field(
        default=0,
        description="Number of steps that finished successfully",
    )
    status: str = Field(
        default="pending",
        description="Workflow status: pending, running, complete, failed",
    )


class Runtime(BaseModel):
    """All runtime state organized by command."""

    resolve: ResolveState = Field(
        default_factory=ResolveState,
        description="Conflict resolver runtime state"
    )
    sync: SyncState = Field(
        default_factory=SyncState,
        description="Merge workflow runtime state"
    )


# ============================================================
# STATE (config + runtime combined)
# ============================================================

class State(BaseSettings):
    """Complete application state - configuration and runtime.

    The single object handed to every command. As a pydantic
    BaseSettings it loads from YAML files, .env, environment
    variables and the command line, and validates on load.
    """

    config: Config = Field(
        default_factory=Config,
        description="Application configuration (from YAML/env/CLI)",
    )
    runtime: Runtime = Field(
        default_factory=Runtime,
        description="Runtime state (mutates during execution)",
    )
    include: list[str] | None = Field(
        default=None,
        description=(
            "Additional YAML files to include and merge. "
            "Use --include on CLI or include: in YAML files."
        ),
    )

    model_config = SettingsConfigDict(
        yaml_file=CONFIG_FILENAME,
        env_file=".env",
        env_prefix="CONFLUX_",
        env_nested_delimiter="__",
        cli_parse_args=True,
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore'
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority, highest first: init args, YAML, .env, env, secrets."""
        return (
            init_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )

    @model_validator(mode="after")
    def substitute_templates(self) -> "State":
        """Substitute {config.*} and {platformdirs.*} templates.

        Walks the whole State, replacing templates in strings, Paths,
        dict values and list items.
        """
        self._substitute_recursive(self)
        return self

    def _substitute_recursive(self, obj: Any) -> None:
        if isinstance(obj, BaseModel):
            for field_name in obj.__class__.model_fields:
                value = getattr(obj, field_name)
                new_value = self._substitute_value(value)
                if new_value is not value:
                    setattr(obj, field_name, new_value)
        elif isinstance(obj, dict):
            for key in obj:
                obj[key] = self._substitute_value(obj[key])
        elif isinstance(obj, list):
            for i in range(len(obj)):
                obj[i] = self._substitute_value(obj[i])

    def _substitute_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self._substitute_string(value)
        elif isinstance(value, Path):
            substituted = self._substitute_string(str(value))
            return value if substituted == str(value) else Path(substituted)
        elif isinstance(value, (BaseModel, dict, list)):
            self._substitute_recursive(value)
            return value
        else:
            return value

    def _substitute_string(self, value: str) -> str:
        """Replace {field.path} templates with actual field values.

        Examples:
            "{config.git.workdir}/.git"
            -> "/home/user/repo/.git"
            "{platformdirs.user_state_dir}"
            -> "~/.local/state/conflux"
        """
        def replace_template(match):
            parts = match.group(1).split(".")

            if parts[0] in TEMPLATE_NAMESPACE:
                obj = TEMPLATE_NAMESPACE[parts[0]]
                parts = parts[1:]
            else:
                obj = self

            try:
                for part in parts:
                    obj = getattr(obj, part)

                # platformdirs helpers take the application name
                if callable(obj):
                    obj = obj('conflux', appauthor=False)

                return str(obj)
            except (AttributeError, TypeError):
                return match.group(0)

        return re.sub(r'\{([a-z._]+)\}', replace_template, value)


__all__ = [
    "State",
    "Config",
    "GitConfig",
    "WorkflowConfig",
    "ResolverConfig",
    "Runtime",
    "ResolveState",
    "SyncState",
]

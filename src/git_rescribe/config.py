"""Runtime configuration for git-rescribe."""

import logging
import os
from typing import Any, Optional

from git import Repo
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_EDITOR = "vi"
EDITOR_ENV_VARS = ("GIT_EDITOR", "EDITOR", "VISUAL")


class RescribeConfig(BaseModel):
    """Options that control a rescribe run.

    Passed explicitly to the workflow, planner and executor instead of
    living in module state.
    """

    skip_confirmation: bool = False
    update_head: bool = True
    edit: bool = True
    editor: str = DEFAULT_EDITOR
    short_hash_length: int = Field(default=7, ge=7, le=40)
    max_workers: int = Field(default=8, ge=1)
    todo_filename: str = "RESCRIBE_TODO.yml"
    state_filename: str = "RESCRIBE_STATE"

    model_config = {"frozen": True}

    @classmethod
    def load(cls, repo: Optional[Repo] = None, **overrides: Any) -> "RescribeConfig":
        """Build a config from git config, the environment, and explicit overrides.

        Later sources win: defaults, then ``rescribe.*`` git config keys, then
        editor environment variables, then ``overrides`` (``None`` values are
        ignored so unset CLI flags fall through).
        """
        values = {}

        git_editor = None
        if repo is not None:
            reader = repo.config_reader()
            if reader.get_value("rescribe", "yes", False) is True:
                values["skip_confirmation"] = True
            git_editor = reader.get_value("rescribe", "editor", "") or None

        env_editor = next(
            (os.environ[name] for name in EDITOR_ENV_VARS if os.environ.get(name)),
            None,
        )
        editor = env_editor or git_editor
        if editor:
            values["editor"] = str(editor)

        values.update({k: v for k, v in overrides.items() if v is not None})
        config = cls(**values)
        logger.debug("Loaded config: %s", config)
        return config

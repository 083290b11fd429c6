"""Open files in the user's editor."""

import logging
import shlex
import subprocess
from pathlib import Path

from git_rescribe.config import DEFAULT_EDITOR
from git_rescribe.exceptions import EditorError

logger = logging.getLogger(__name__)


def open_editor(path: Path, editor: str = DEFAULT_EDITOR) -> None:
    """Open ``path`` in ``editor`` and wait for it to exit.

    ``editor`` may include arguments, e.g. ``code --wait``.
    """
    command = shlex.split(editor) + [str(path)]
    logger.debug("Running editor: %s", command)
    try:
        result = subprocess.run(command, check=False)  # noqa: S603
    except OSError as e:
        raise EditorError(f"Could not run editor '{editor}': {e}") from e

    if result.returncode != 0:
        raise EditorError(f"Editor exited with code {result.returncode}")

"""Resolution of filesystem paths from environment variables."""

from __future__ import annotations

import os
from pathlib import Path


def resolve_environment_variable_path(env_var_name: str, fallback_relative_path: str) -> Path:
    """Return the path held in an environment variable.

    When the variable is unset, ``fallback_relative_path`` is resolved against
    the current working directory (or ``.`` if that cannot be determined).
    """
    value = os.environ.get(env_var_name)
    if value is not None:
        return Path(value)
    try:
        base = Path.cwd()
    except OSError:
        base = Path(".")
    return base / fallback_relative_path
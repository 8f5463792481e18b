"""Config file discovery.

Walks up from the working directory looking for ``payctl.toml``, the
way git looks for ``.git/``. ``PAYCTL_CONFIG`` and ``--config`` override
the search.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "payctl.toml"
CONFIG_ENV_VAR = "PAYCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest ``payctl.toml`` at or above *start* (default: cwd).

    When ``PAYCTL_CONFIG`` is set it wins outright, and a path that does
    not exist means no config at all.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidate = Path(env_path)
        return candidate if candidate.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None

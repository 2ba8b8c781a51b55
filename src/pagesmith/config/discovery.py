"""Locating pagesmith.toml.

The project root is the directory holding ``pagesmith.toml``; it is
searched for from the working directory upwards. ``PAGESMITH_CONFIG``
names a file directly and disables the search.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "pagesmith.toml"
CONFIG_ENV_VAR = "PAGESMITH_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start* (default: cwd), or None.

    A ``PAGESMITH_CONFIG`` pointing at a missing file yields None rather
    than falling back to the search.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        explicit = Path(override)
        return explicit if explicit.is_file() else None

    origin = (start or Path.cwd()).resolve()
    candidates = (directory / CONFIG_FILENAME for directory in (origin, *origin.parents))
    return next((c for c in candidates if c.is_file()), None)

"""Debug toggle resolution for the process executor."""

from __future__ import annotations

import os
from typing import Mapping, Optional


DEBUG_ENV_VAR = "SWISS_ARMY_DEBUG"

_TRUTHY = ("1", "true", "yes", "on")


def debug_enabled(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Return True if diagnostics are switched on in *environ*.

    Reads ``$SWISS_ARMY_DEBUG`` from *environ* (``os.environ`` when omitted).
    Any of ``1``, ``true``, ``yes`` or ``on`` enables it, case-insensitively.
    """
    env = os.environ if environ is None else environ
    return env.get(DEBUG_ENV_VAR, "").strip().lower() in _TRUTHY

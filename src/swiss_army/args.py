"""Convert option mappings into long-flag command-line arguments.

``{"noLockfile": True, "json": True}`` becomes ``["--no-lockfile", "--json"]``.
Only the presence of a truthy value matters; values are never appended.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Any, List, Mapping, Optional

_RUN_RE = re.compile(r"[^\W_]+")
_APOSTROPHES_RE = re.compile("['’]")

# Latin letters with no canonical decomposition.
_LIGATURES = str.maketrans(
    {
        "Æ": "Ae", "æ": "ae",
        "Ð": "D", "ð": "d",
        "Ø": "O", "ø": "o",
        "Þ": "Th", "þ": "th",
        "ß": "ss",
        "Đ": "D", "đ": "d",
        "ı": "i",
        "Ł": "L", "ł": "l",
        "Œ": "Oe", "œ": "oe",
    }
)


def deburr(text: str) -> str:
    """Strip accents: ``"naïve café"`` -> ``"naive cafe"``."""
    decomposed = unicodedata.normalize("NFKD", text.translate(_LIGATURES))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _split_run(run: str) -> List[str]:
    # Boundaries: lower->Upper, letter<->digit, and the last capital of an
    # acronym that starts a capitalised word ("XMLHttp" -> "XML", "Http").
    parts = []
    start = 0
    for i in range(1, len(run)):
        prev, cur = run[i - 1], run[i]
        nxt = run[i + 1] if i + 1 < len(run) else ""
        if (
            prev.isdigit() != cur.isdigit()
            or (prev.islower() and cur.isupper())
            or (prev.isupper() and cur.isupper() and nxt.islower())
        ):
            parts.append(run[start:i])
            start = i
    parts.append(run[start:])
    return parts


def words(name: str) -> List[str]:
    """Split *name* into words on case, digit, and separator boundaries."""
    text = _APOSTROPHES_RE.sub("", deburr(name))
    return [w for run in _RUN_RE.findall(text) for w in _split_run(run)]


def kebab_case(name: str) -> str:
    """Return *name* as lower-case words joined by hyphens.

    ``"ignoreEngines"`` -> ``"ignore-engines"``, ``"XMLHttpRequest"`` ->
    ``"xml-http-request"``, ``"foo_bar"`` -> ``"foo-bar"``,
    ``"naïveMode"`` -> ``"naive-mode"``, ``"don'tStop"`` -> ``"dont-stop"``.
    """
    return "-".join(w.lower() for w in words(name))


def obj_to_args(obj: Optional[Mapping[str, Any]]) -> List[str]:
    """Return one ``--<kebab-name>`` token per truthy entry of *obj*, in order."""
    if not obj:
        return []
    return [f"--{kebab_case(key)}" for key, value in obj.items() if value]

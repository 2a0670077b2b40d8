# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Key → string lookup for human-readable labels.

Strings live in an optional nested JSON document (``LOCALE_PATH``); keys are
dotted paths, e.g. ``ui.state_events.mission_participation.approve``.
"""

import json
from pathlib import Path
from typing import Any, Optional

from missionhub.core.logging import get_logger

logger = get_logger(__name__)


def humanize(value: str) -> str:
    """``await_approval`` -> ``Await approval``."""
    text = str(value).replace("_", " ").strip()
    if text.endswith(" id"):
        text = text[:-3]
    return text[:1].upper() + text[1:]


def titleize(value: str) -> str:
    return " ".join(w[:1].upper() + w[1:] for w in humanize(value).split(" "))


def pluralize(word: str) -> str:
    if not word:
        return word
    if word.endswith("y") and word[-2:-1] not in ("a", "e", "i", "o", "u"):
        return word[:-1] + "ies"
    if word.endswith(("s", "x", "ch", "sh")):
        return word + "es"
    return word + "s"


def singularize(word: str) -> str:
    if word.endswith("ies"):
        return word[:-3] + "y"
    if word.endswith(("ses", "xes", "ches", "shes")):
        return word[:-2]
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


class Translator:
    def __init__(self, strings: Optional[dict[str, Any]] = None) -> None:
        self._strings = strings or {}

    @classmethod
    def from_file(cls, path: str) -> "Translator":
        if not path:
            return cls()
        try:
            return cls(json.loads(Path(path).read_text(encoding="utf-8")))
        except (OSError, ValueError) as exc:
            logger.warning("Locale file %s could not be loaded: %s", path, exc)
            return cls()

    def t(self, key: str, scope: Optional[str] = None, default: Optional[str] = None,
          **interpolations: Any) -> str:
        path = f"{scope}.{key}" if scope else key
        node: Any = self._strings
        for part in path.split("."):
            if not isinstance(node, dict) or part not in node:
                node = None
                break
            node = node[part]
        text = node if isinstance(node, str) else (default if default is not None else path)
        return text % interpolations if interpolations and "%(" in text else text

"""Report strings in English and Spanish.

Entries live in ``reportnow/data/report_i18n.json`` as
``{"KEY": {"en": "...", "es": "..."}}``. Templates use ``str.format``
placeholders; a template whose placeholders are not supplied is returned
unformatted rather than raising.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from functools import lru_cache, partial
from pathlib import Path
from typing import Any

_DATA_FILE = Path(__file__).resolve().parent / "data" / "report_i18n.json"

SUPPORTED_LANGS: tuple[str, ...] = ("en", "es")
DEFAULT_LANG = SUPPORTED_LANGS[0]


@lru_cache(maxsize=1)
def _catalog() -> dict[str, dict[str, str]]:
    try:
        raw = json.loads(_DATA_FILE.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise RuntimeError(f"Missing translation file: {_DATA_FILE}") from exc
    except json.JSONDecodeError as exc:
        raise RuntimeError(f"Invalid translation file: {_DATA_FILE}") from exc
    bad = sorted(key for key, entry in raw.items() if not isinstance(entry, dict))
    if bad:
        raise RuntimeError(f"Translation entries must be objects: {', '.join(bad)}")
    return raw


def normalize_lang(lang: object) -> str:
    """Map ``es``, ``es-MX``, ``ES_ar`` and the like to a supported code."""
    if not isinstance(lang, str):
        return DEFAULT_LANG
    primary = lang.strip().lower().replace("_", "-").split("-", 1)[0]
    return primary if primary in SUPPORTED_LANGS else DEFAULT_LANG


def tr(lang: object, key: str, **kwargs: Any) -> str:
    entry = _catalog().get(key)
    if entry is None:
        template = key
    else:
        template = entry.get(normalize_lang(lang)) or entry.get(DEFAULT_LANG) or key
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError):
        return template


def translator(lang: object) -> Callable[..., str]:
    """``tr`` bound to one language, for renderers that take a ``tr`` callable."""
    return partial(tr, normalize_lang(lang))

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .errors import ParseError

logger = logging.getLogger(__name__)

INDENT = "\t"


def is_blank(raw: str) -> bool:
    """Empty or whitespace-only content means "no value yet"."""
    return not raw.strip()


def read_json(raw: str, path: Path | str) -> Any | None:
    """
    Parse JSON document text read from `path`.

    Returns None for blank text. Callers that must tell blank content apart from
    a literal `null` check `is_blank` first.
    Raises ParseError naming the path for anything that is not valid JSON.
    """
    if is_blank(raw):
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error("JSON READ: failed to parse %s: %s", path, e)
        raise ParseError(path, str(e)) from e


def dump_json(payload: Any, *, indent: str | int = INDENT) -> str:
    """
    Serialize a document the way it is persisted: tab-indented, key order kept.
    """
    return json.dumps(payload, indent=indent, ensure_ascii=False) + "\n"

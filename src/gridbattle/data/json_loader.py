"""Low-level JSON helpers for repositories."""
from __future__ import annotations

import json
import logging
from pathlib import Path

from .errors import DataLoadError, DataValidationError

logger = logging.getLogger(__name__)


def load_json(path: Path) -> object:
    """Load JSON from disk and raise DataLoadError on failure."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError("Definition file not found", source=path) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise DataLoadError(f"Unable to read definition file: {exc}", source=path) from exc

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Invalid JSON at line {exc.lineno}: {exc.msg}", source=path) from exc
    logger.debug("Loaded definitions from %s", path)
    return payload


def load_json_object(path: Path) -> dict[str, object]:
    """Like load_json, but the document must be a JSON object."""
    payload = load_json(path)
    if not isinstance(payload, dict):
        raise DataValidationError("Expected a top-level object", source=path)
    return payload

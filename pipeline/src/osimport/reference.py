"""Static reference data bundled with the importer."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib.resources.abc import Traversable

from osimport.config import feature_codes_config_path
from osimport.errors import ConfigurationError

FEATURE_CODE_MAX_LEN = 3
FEATURE_DESCRIPTION_MAX_LEN = 50


def _load_json_config(path: Traversable) -> dict[str, object]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Reference data file does not exist: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON reference data: {path}") from exc
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Reference data root must be an object: {path}")
    return payload


@lru_cache(maxsize=1)
def feature_codes() -> tuple[tuple[str, str], ...]:
    """Return the gazetteer feature codes and descriptions, sorted by code."""

    config = _load_json_config(feature_codes_config_path())
    raw_codes = config.get("feature_codes")
    if not isinstance(raw_codes, dict) or not raw_codes:
        raise ConfigurationError("feature_codes must be a non-empty object")

    output: list[tuple[str, str]] = []
    for code, description in raw_codes.items():
        if not isinstance(description, str) or not description.strip():
            raise ConfigurationError(f"Feature code {code} must have a description")
        if len(code) > FEATURE_CODE_MAX_LEN or len(description) > FEATURE_DESCRIPTION_MAX_LEN:
            raise ConfigurationError(f"Feature code {code} exceeds column width")
        output.append((code, description.strip()))
    return tuple(sorted(output))

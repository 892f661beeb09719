from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema

from ..errors import ExecFailureError


def _schema_path() -> Path:
    # monorepo_setup/validate/settings_json.py -> monorepo_setup/schemas/
    return Path(__file__).resolve().parents[1] / "schemas" / "settings.schema.json"


@lru_cache(maxsize=1)
def _load_schema() -> dict[str, Any]:
    path = _schema_path()
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ExecFailureError(f"Failed to read JSON schema: {str(path)!r}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ExecFailureError(f"Invalid JSON schema: {str(path)!r}: {exc}") from exc

    if not isinstance(data, dict):
        raise ExecFailureError(
            f"Invalid JSON schema: {str(path)!r}: root must be object"
        )
    return data


def _format_path(error: jsonschema.ValidationError) -> str:
    if not error.path:
        return "$"
    parts = []
    for p in error.path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append("." + str(p))
    return "$" + "".join(parts)


def validate_settings_json(payload: object, *, source: str = "settings.json") -> None:
    """Validate a settings payload; raise ExecFailureError on violations."""

    schema = _load_schema()
    try:
        validator_cls = jsonschema.validators.validator_for(schema)
        validator_cls.check_schema(schema)
        validator = validator_cls(schema)
    except jsonschema.SchemaError as exc:
        raise ExecFailureError(f"Invalid JSON schema: {_schema_path()}: {exc}") from exc

    errors = sorted(validator.iter_errors(payload), key=lambda e: list(e.path))
    if errors:
        rendered = "; ".join(f"{_format_path(e)}: {e.message}" for e in errors[:8])
        more = "" if len(errors) <= 8 else f" (+{len(errors) - 8} more)"
        raise ExecFailureError(f"Invalid {source}: {rendered}{more}")

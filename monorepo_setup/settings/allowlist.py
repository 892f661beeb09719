"""Permission allow-list for the external tool (`.claude/settings.json`).

Shape: `{"permissions": {"additionalDirectories": [str, ...]}}`.
"""

from __future__ import annotations

import copy
import json
import os
from typing import Any

from ..artifacts import atomic_write_json
from ..errors import ExecFailureError
from ..validate.settings_json import validate_settings_json

SETTINGS_DIRNAME = ".claude"
SETTINGS_FILENAME = "settings.json"


def settings_path_for(base_dir: str) -> str:
    return os.path.join(base_dir, SETTINGS_DIRNAME, SETTINGS_FILENAME)


def load_settings(path: str) -> dict[str, Any]:
    """Load and validate an existing settings file; `{}` when absent."""

    try:
        with open(path, "r", encoding="utf-8") as fh:
            raw = fh.read()
    except FileNotFoundError:
        return {}
    except (OSError, UnicodeDecodeError) as exc:
        raise ExecFailureError(f"Failed to read settings file: {path!r}") from exc

    if not raw.strip():
        return {}

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ExecFailureError(f"Invalid JSON in settings file {path!r}: {exc}") from exc

    validate_settings_json(data, source=path)
    return data


def merge_allowed_directory(payload: dict[str, Any], directory: str) -> dict[str, Any]:
    """Return a copy of `payload` with `directory` in the allow-list.

    Existing entries keep their order, duplicates are dropped, and the new
    directory is appended when missing. Other keys are left untouched.
    """

    if not directory:
        raise ExecFailureError("directory is required")

    out = copy.deepcopy(payload)
    permissions = out.get("permissions")
    if not isinstance(permissions, dict):
        permissions = {}
        out["permissions"] = permissions

    existing = permissions.get("additionalDirectories")
    items = list(existing) if isinstance(existing, list) else []
    items.append(directory)

    merged: list[str] = []
    seen: set[str] = set()
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        merged.append(item)

    permissions["additionalDirectories"] = merged
    return out


def add_allowed_directory(settings_path: str, directory: str) -> dict[str, Any]:
    """Merge `directory` into the settings file at `settings_path` and write it back."""

    dir_name = os.path.dirname(settings_path) or "."
    try:
        os.makedirs(dir_name, exist_ok=True)
    except OSError as exc:
        raise ExecFailureError(f"Failed to create settings dir: {dir_name}") from exc

    merged = merge_allowed_directory(load_settings(settings_path), directory)
    try:
        atomic_write_json(settings_path, merged)
    except OSError as exc:
        raise ExecFailureError(
            f"Failed to write settings file: {settings_path!r}"
        ) from exc
    return merged

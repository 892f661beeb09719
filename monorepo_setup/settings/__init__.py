"""External tool settings (permission allow-list) and target resolution."""

from .allowlist import (
    add_allowed_directory,
    load_settings,
    merge_allowed_directory,
    settings_path_for,
)
from .target import resolve_target_dir

__all__ = [
    "add_allowed_directory",
    "load_settings",
    "merge_allowed_directory",
    "resolve_target_dir",
    "settings_path_for",
]

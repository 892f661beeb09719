"""Target directory resolution."""

from __future__ import annotations

import os

from ..errors import BlockedError


def resolve_target_dir(path: str, *, cwd: str | None = None) -> str:
    """Return an absolute path for the target directory.

    The parent directory is resolved when it exists; otherwise the path is
    joined onto `cwd` as-is. The target itself does not need to exist.
    """

    raw = (path or "").strip()
    if not raw:
        raise BlockedError("Target directory not specified")

    base = os.getcwd() if cwd is None else cwd
    p = os.path.expanduser(raw)
    if len(p) > 1:
        p = p.rstrip("/") or "/"

    parent = os.path.dirname(p) or "."
    name = os.path.basename(p)
    if not os.path.isabs(parent):
        parent = os.path.join(base, parent)

    if name and os.path.isdir(parent):
        return os.path.normpath(os.path.join(os.path.abspath(parent), name))

    return os.path.normpath(os.path.join(base, p))

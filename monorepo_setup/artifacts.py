"""Artifacts writer.

Run records are written under `./.monorepo-setup/`.
"""

from __future__ import annotations

import json
import os
import stat
import tempfile
from datetime import datetime, timezone


ARTIFACTS_DIRNAME = ".monorepo-setup"


def now_utc_z() -> str:
    return (
        datetime.now(timezone.utc).replace(microsecond=0).strftime("%Y-%m-%dT%H:%M:%SZ")
    )


def ensure_artifacts_dir(base_dir: str) -> str:
    out_dir = os.path.join(base_dir, ARTIFACTS_DIRNAME)
    os.makedirs(out_dir, exist_ok=True)
    return out_dir


def _target_mode(path: str) -> int:
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def atomic_write_json(path: str, payload: object) -> None:
    """Atomically write JSON next to `path` and replace it.

    The parent directory must already exist. An existing file keeps its
    permission bits; a new file gets the default mode for the current umask.
    """

    dir_name = os.path.dirname(path) or "."
    base = os.path.basename(path)

    tmp = ""
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            delete=False,
            dir=dir_name,
            prefix=f".{base}.tmp.",
        ) as fh:
            tmp = fh.name
            fh.write(json.dumps(payload, ensure_ascii=False, indent=2))
            fh.write("\n")

        os.chmod(tmp, _target_mode(path))
        os.replace(tmp, path)
        tmp = ""
    finally:
        if tmp:
            try:
                os.remove(tmp)
            except OSError:
                pass


def write_run_json(out_dir: str, payload: dict[str, object]) -> str:
    path = os.path.join(out_dir, "run.json")
    atomic_write_json(path, payload)
    return path

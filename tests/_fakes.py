from __future__ import annotations

import json
import sys
from pathlib import Path


def write_fake_claude(path: Path, *, exit_code: int = 0, sleep_s: float = 0) -> None:
    """Write a fake `claude` binary that appends its argv to a JSONL log.

    The log lives at `$FAKE_CLAUDE_LOG`, or `fake-claude-calls.jsonl` in the
    working directory. `$FAKE_CLAUDE_EXIT` overrides the exit code.
    """

    path.write_text(
        f"""#!{sys.executable}
import json
import os
import sys
import time

args = sys.argv[1:]
log_path = os.environ.get("FAKE_CLAUDE_LOG") or "fake-claude-calls.jsonl"
with open(log_path, "a", encoding="utf-8") as fh:
    fh.write(json.dumps({{"args": args, "cwd": os.getcwd()}}) + "\\n")

if {sleep_s!r}:
    time.sleep({sleep_s!r})

sys.stdout.write("fake claude: done\\n")
raise SystemExit(int(os.environ.get("FAKE_CLAUDE_EXIT", "{exit_code}")))
""",
        encoding="utf-8",
    )
    path.chmod(0o755)


def read_calls(log_path: Path) -> list[dict[str, object]]:
    if not log_path.is_file():
        return []
    return [
        json.loads(line)
        for line in log_path.read_text(encoding="utf-8").splitlines()
        if line.strip()
    ]


def prompt_of(call: dict[str, object]) -> str:
    args = call["args"]
    assert isinstance(args, list)
    i = args.index("-p")
    return str(args[i + 1])

"""Claude Code runner (headless subprocess).

This module runs `claude -p <prompt>` as a subprocess, one instruction
document at a time. Output goes straight to the terminal; only the exit code
is inspected.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass

from ..errors import BlockedError, ExecFailureError

TIMEOUT_EXIT_CODE = 124

MISSING_BINARY_MESSAGE = (
    "'claude' command not found. Please install Claude Code CLI first"
)


def _claude_bin() -> str:
    return os.environ.get("MONOREPO_SETUP_CLAUDE_BIN", "claude")


def _parse_timeout(raw: str | None) -> int | None:
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        timeout = int(raw)
    except ValueError as exc:
        raise ExecFailureError(
            f"Invalid MONOREPO_SETUP_CLAUDE_TIMEOUT_S: {raw!r} (expected integer seconds)"
        ) from exc
    if timeout <= 0:
        raise ExecFailureError(
            f"Invalid MONOREPO_SETUP_CLAUDE_TIMEOUT_S: {raw!r} (must be >= 1)"
        )
    return timeout


@dataclass(frozen=True)
class ClaudeRunner:
    bin_path: str = "claude"
    timeout_s: int | None = None
    model: str | None = None

    @classmethod
    def from_env(cls) -> "ClaudeRunner":
        model = (os.environ.get("MONOREPO_SETUP_CLAUDE_MODEL") or "").strip() or None
        timeout = _parse_timeout(os.environ.get("MONOREPO_SETUP_CLAUDE_TIMEOUT_S"))
        return cls(bin_path=_claude_bin(), timeout_s=timeout, model=model)

    def build_cmd(self, prompt: str) -> list[str]:
        cmd: list[str] = [
            self.bin_path,
            "--dangerously-skip-permissions",
            "--output-format",
            "text",
        ]
        if self.model:
            cmd.extend(["--model", self.model])
        cmd.extend(["-p", prompt])
        return cmd

    def is_available(self) -> bool:
        if os.sep in self.bin_path or (os.altsep and os.altsep in self.bin_path):
            return os.path.isfile(self.bin_path) and os.access(self.bin_path, os.X_OK)
        return shutil.which(self.bin_path) is not None

    def ensure_available(self) -> None:
        if not self.is_available():
            raise BlockedError(MISSING_BINARY_MESSAGE)

    def run_prompt(self, prompt: str, *, cwd: str) -> int:
        """Run the external tool with `prompt` and return its exit code.

        A timeout is reported as exit code 124, like coreutils `timeout`.
        """

        if not prompt:
            raise ExecFailureError("prompt is required")
        if not os.path.isdir(cwd):
            raise ExecFailureError(f"Working directory does not exist: {cwd}")

        try:
            p = subprocess.run(
                self.build_cmd(prompt),
                cwd=cwd,
                check=False,
                timeout=self.timeout_s,
            )
        except FileNotFoundError as exc:
            raise BlockedError(MISSING_BINARY_MESSAGE) from exc
        except subprocess.TimeoutExpired:
            return TIMEOUT_EXIT_CODE
        except OSError as exc:
            raise ExecFailureError(
                f"Claude subprocess failed: {type(exc).__name__}: {exc}"
            ) from exc

        return p.returncode

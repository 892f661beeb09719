from __future__ import annotations

import os

from .. import console
from ..errors import ExecFailureError
from .catalog import Step

SETUP_INSTRUCTIONS_FILENAME = "SETUP_INSTRUCTIONS.md"
PATTERNS_DIRNAME = "patterns"

_SEPARATOR = "\n\n---\n\n"

_SETUP_TEMPLATE = """\
Please read @{document} and execute all the instructions in it. Add tasks to the todo list and complete them one by one.

IMPORTANT: Create all files in the target directory: {target_dir}

If the directory doesn't exist yet, create it first. Make sure to build any packages that changed."""

_PATTERN_TEMPLATE = """\
Please read @{patterns_dir}/{document} and implement all the patterns described in it. Add tasks to the todo list and complete them one by one.

IMPORTANT: Work in the current directory structure:
- packages/shared/ for shared code patterns
- packages/backend/ for Express patterns
- packages/backend/prisma/ for Prisma patterns
- Docker files in the project root

Read one section at a time to avoid context overload. After major changes, run builds to catch errors early."""


def load_setup_instructions(template_dir: str) -> str:
    """Return shared instructions from `SETUP_INSTRUCTIONS.md`, or "" if absent."""

    path = os.path.join(template_dir, SETUP_INSTRUCTIONS_FILENAME)
    if not os.path.isfile(path):
        console.info(
            f"No {SETUP_INSTRUCTIONS_FILENAME} found, proceeding without additional instructions"
        )
        console.say()
        return ""

    console.info(f"Loading setup instructions from {SETUP_INSTRUCTIONS_FILENAME}")
    console.say()
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ExecFailureError(f"Failed to read setup instructions: {path!r}") from exc


def render_setup_prompt(step: Step, *, target_dir: str, instructions: str = "") -> str:
    body = _SETUP_TEMPLATE.format(document=step.document, target_dir=target_dir)
    # Trailing newlines of the shared instructions are dropped.
    shared = (instructions or "").rstrip("\n")
    if not shared:
        return body
    return shared + _SEPARATOR + body


def render_pattern_prompt(step: Step) -> str:
    return _PATTERN_TEMPLATE.format(
        patterns_dir=PATTERNS_DIRNAME, document=step.document
    )

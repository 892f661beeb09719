from __future__ import annotations

import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Callable, Protocol

from .. import console
from ..errors import AbortedError, ExecFailureError
from ..interact import Operator
from .catalog import Step

BUILD_SKIPPED = "skipped"
BUILD_OK = "ok"
BUILD_FAILED = "failed"


class PromptRunner(Protocol):
    def run_prompt(self, prompt: str, *, cwd: str) -> int: ...


@dataclass(frozen=True)
class StepOutcome:
    number: int
    document: str
    exit_code: int | None
    continued_after_failure: bool
    build_status: str

    def to_json(self) -> dict[str, object]:
        return {
            "step": self.number,
            "document": self.document,
            "exit_code": self.exit_code,
            "continued_after_failure": self.continued_after_failure,
            "build_status": self.build_status,
        }


def run_build(cmd: str, *, cwd: str) -> bool:
    """Run a build command (no shell) and report success."""

    try:
        argv = shlex.split(cmd)
    except ValueError as exc:
        raise ExecFailureError(f"Invalid build command: {cmd!r}: {exc}") from exc
    if not argv:
        raise ExecFailureError("Build command is empty")

    try:
        p = subprocess.run(argv, cwd=cwd, check=False)
    except OSError as exc:
        console.failure(f"Build could not start: {type(exc).__name__}: {exc}")
        return False
    return p.returncode == 0


def run_steps(
    steps: tuple[Step, ...],
    *,
    runner: PromptRunner | None,
    render: Callable[[Step], str],
    operator: Operator,
    cwd: str,
    build_cwd: str | None = None,
    title: Callable[[Step], str] | None = None,
) -> list[StepOutcome]:
    """Run `steps` strictly in order, one external tool invocation each.

    `runner=None` is a dry run: prompts are printed, nothing is executed.
    Raises AbortedError when the operator declines to continue after a
    failed step.
    """

    outcomes: list[StepOutcome] = []
    for step in steps:
        heading = title(step) if title is not None else step.document
        console.banner(f"STEP {step.number}: {heading}")

        prompt = render(step)
        if runner is None:
            console.info("Dry run, prompt:")
            console.say()
            console.say(prompt)
            console.say()
            outcomes.append(
                StepOutcome(
                    number=step.number,
                    document=step.document,
                    exit_code=None,
                    continued_after_failure=False,
                    build_status=BUILD_SKIPPED,
                )
            )
            continue

        console.info("Running Claude Code...")
        console.say()
        exit_code = runner.run_prompt(prompt, cwd=cwd)
        console.say()

        continued = False
        if exit_code != 0:
            console.failure(f"Claude exited with error code {exit_code}")
            if not operator.confirm("Continue anyway?"):
                raise AbortedError(
                    f"Step {step.number} ({step.document}) failed with exit code {exit_code}"
                )
            continued = True

        build_status = BUILD_SKIPPED
        if step.build_cmd:
            target = build_cwd or cwd
            console.info(f"Running build: {step.build_cmd}")
            if not os.path.isdir(target):
                console.failure(f"Build directory does not exist: {target}")
                ok = False
            else:
                ok = run_build(step.build_cmd, cwd=target)
            if ok:
                build_status = BUILD_OK
                console.success("Build successful")
            else:
                build_status = BUILD_FAILED
                console.failure("Build failed")
                operator.pause(
                    "Fix issues and press ENTER to continue, or Ctrl+C to exit..."
                )
            console.say()

        console.success(f"Step {step.number} complete")
        console.say()
        outcomes.append(
            StepOutcome(
                number=step.number,
                document=step.document,
                exit_code=exit_code,
                continued_after_failure=continued,
                build_status=build_status,
            )
        )
    return outcomes

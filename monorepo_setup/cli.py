"""CLI entrypoint for monorepo-setup."""

from __future__ import annotations

import argparse
import os
import sys
import time
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, NoReturn

from . import console
from .artifacts import ensure_artifacts_dir, now_utc_z, write_run_json
from .errors import AbortedError, BlockedError, ExecFailureError, ExitCode
from .interact import ConsoleOperator
from .llm.claude_runner import ClaudeRunner
from .settings import add_allowed_directory, resolve_target_dir, settings_path_for
from .steps import (
    PATTERN_STEPS,
    SETUP_STEPS,
    load_setup_instructions,
    render_pattern_prompt,
    render_setup_prompt,
    run_steps,
    with_build_cmd,
)

PROG = "monorepo-setup"


@dataclass(frozen=True)
class ParserExit(Exception):
    code: int
    message: str = ""


class ThrowingArgumentParser(argparse.ArgumentParser):
    def exit(self, status: int = 0, message: str | None = None) -> NoReturn:  # type: ignore[override]
        if message:
            self._print_message(message, sys.stderr if status else sys.stdout)
        raise ParserExit(status, message or "")

    def error(self, message: str) -> NoReturn:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self._print_message(f"{self.prog}: error: {message}\n", sys.stderr)
        raise ParserExit(2, f"{self.prog}: error: {message}\n")


def parse_existing_dir(value: str) -> str:
    v = os.path.abspath(os.path.expanduser(value.strip()))
    if not os.path.isdir(v):
        raise argparse.ArgumentTypeError(f"not a directory: {value}")
    return v


SETUP_EPILOG = """\
example:
  monorepo-setup setup /Users/john/my-new-project
  monorepo-setup setup ../my-new-project
"""


def build_parser() -> ThrowingArgumentParser:
    parser = ThrowingArgumentParser(prog=PROG)
    sub = parser.add_subparsers(dest="command", required=True)

    setup = sub.add_parser(
        "setup",
        help="Generate a monorepo into a target directory (steps 1-5)",
        epilog=SETUP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    setup.add_argument("target", help="Target directory for the generated project")
    setup.add_argument(
        "--template-dir",
        type=parse_existing_dir,
        default=None,
        help="Directory holding the SETUP-*.md documents (default: cwd)",
    )
    setup.add_argument(
        "--build-cmd",
        default=None,
        help="Command to run in the target directory after each step",
    )
    setup.add_argument("--yes", "-y", action="store_true", help="Answer yes to prompts")
    setup.add_argument(
        "--dry-run", action="store_true", help="Print prompts instead of running"
    )
    setup.set_defaults(_handler=handle_setup)

    patterns = sub.add_parser(
        "patterns", help="Install pattern guides into a generated project (steps 1-4)"
    )
    patterns.add_argument(
        "--project-dir",
        type=parse_existing_dir,
        default=None,
        help="Root of the generated project (default: cwd)",
    )
    patterns.add_argument(
        "--yes", "-y", action="store_true", help="Answer yes to prompts"
    )
    patterns.add_argument(
        "--dry-run", action="store_true", help="Print prompts instead of running"
    )
    patterns.set_defaults(_handler=handle_patterns)

    return parser


def _runner_for(args: argparse.Namespace) -> ClaudeRunner | None:
    runner = ClaudeRunner.from_env()
    if args.dry_run:
        return None
    runner.ensure_available()
    return runner


def handle_setup(args: argparse.Namespace) -> dict[str, Any]:
    console.title("Monorepo Setup - Automated")

    template_dir = args.template_dir or os.getcwd()
    target_dir = resolve_target_dir(args.target)
    operator = ConsoleOperator(assume_yes=args.yes)

    console.info(f"Target directory: {target_dir}")
    console.say()

    if os.path.isdir(target_dir):
        console.info("Warning: Directory already exists")
        if not operator.confirm("Continue and use existing directory?"):
            raise AbortedError(f"Target directory already exists: {target_dir}")
    else:
        console.info(f"Will create directory: {target_dir}")
        console.say()

    runner = _runner_for(args)
    instructions = load_setup_instructions(template_dir)

    settings_path = settings_path_for(template_dir)
    if args.dry_run:
        console.info(
            f"Dry run, would add {target_dir} to Claude Code's allowed directories in {settings_path}"
        )
    else:
        console.info("Configuring Claude Code permissions for target directory...")
        add_allowed_directory(settings_path, target_dir)
        console.success(f"Added {target_dir} to Claude Code's allowed directories")
    console.say()

    steps = with_build_cmd(SETUP_STEPS, args.build_cmd)
    outcomes = run_steps(
        steps,
        runner=runner,
        render=lambda s: render_setup_prompt(
            s, target_dir=target_dir, instructions=instructions
        ),
        operator=operator,
        cwd=template_dir,
        build_cwd=target_dir,
    )

    console.banner("✓ All steps complete!")
    console.say("Your monorepo setup is complete!")
    console.say()
    console.say("Next steps:")
    console.say("1. Review the generated code")
    console.say("2. Set up your .env file in packages/backend/")
    console.say("3. Run 'npm run dev' to start development")
    console.say()

    return {
        "action": "setup",
        "target_dir": target_dir,
        "template_dir": template_dir,
        "settings_path": settings_path,
        "dry_run": bool(args.dry_run),
        "steps": [o.to_json() for o in outcomes],
    }


def handle_patterns(args: argparse.Namespace) -> dict[str, Any]:
    console.title("Pattern Installation - Automated")

    project_dir = args.project_dir or os.getcwd()
    operator = ConsoleOperator(assume_yes=args.yes)

    runner = _runner_for(args)

    if not os.path.isdir(os.path.join(project_dir, "packages")):
        raise BlockedError(
            "'packages' directory not found. Run this from the root of your "
            "generated project, not from the template repository."
        )
    if not os.path.isdir(os.path.join(project_dir, "patterns")):
        raise BlockedError(
            "'patterns' directory not found. Make sure the patterns directory was "
            "copied to your project during the setup process (SETUP-5-FINAL.md)."
        )

    console.info(f"Working directory: {project_dir}")
    console.say()

    if not operator.confirm(
        "Ready to install patterns? This will modify your codebase. Continue?"
    ):
        return {"action": "patterns", "project_dir": project_dir, "cancelled": True}
    console.say()

    outcomes = run_steps(
        PATTERN_STEPS,
        runner=runner,
        render=render_pattern_prompt,
        operator=operator,
        cwd=project_dir,
        title=lambda s: s.description,
    )

    console.banner("✓ All patterns installed!")
    console.success("Pattern installation complete!")
    console.say()
    console.info("Next steps:")
    console.say("1. Review the implemented patterns in your codebase")
    console.say("2. Run 'npm run build' to ensure everything compiles")
    console.say("3. Test the application with 'npm run dev'")
    console.say(
        "4. Set up Docker with 'docker compose up -d --build' "
        "(if you installed Docker patterns)"
    )
    console.say()

    return {
        "action": "patterns",
        "project_dir": project_dir,
        "dry_run": bool(args.dry_run),
        "cancelled": False,
        "steps": [o.to_json() for o in outcomes],
    }


def main(argv: Iterable[str] | None = None) -> int:
    argv_list = list(argv) if argv is not None else sys.argv[1:]
    started_at = now_utc_z()
    t0 = time.monotonic()

    exit_code: int = int(ExitCode.EXEC_FAILURE)
    status = "unknown"
    result: dict[str, Any] = {}
    error: dict[str, Any] | None = None

    try:
        parser = build_parser()
        args = parser.parse_args(argv_list)
        handler = getattr(args, "_handler", None)
        if handler is None:
            raise BlockedError("No handler configured for this command")
        result = handler(args)
        status = "cancelled" if result.get("cancelled") else "ok"
        exit_code = int(ExitCode.SUCCESS)
    except ParserExit as exc:
        # argparse already printed usage/help.
        status = "help" if exc.code == 0 else "invalid_args"
        exit_code = int(ExitCode.SUCCESS if exc.code == 0 else ExitCode.BLOCKED)
        if exc.message:
            error = {"message": exc.message.strip("\n")}
    except AbortedError as exc:
        status = "aborted"
        exit_code = int(ExitCode.BLOCKED)
        error = {"message": str(exc)}
        console.error(str(exc), label="ABORTED")
    except BlockedError as exc:
        status = "blocked"
        exit_code = int(ExitCode.BLOCKED)
        error = {"message": str(exc)}
        console.error(str(exc), label="BLOCKED")
    except ExecFailureError as exc:
        status = "exec_failure"
        exit_code = int(ExitCode.EXEC_FAILURE)
        error = {"message": str(exc)}
        console.error(str(exc))
    except KeyboardInterrupt:
        status = "interrupted"
        exit_code = int(ExitCode.INTERRUPTED)
        error = {"message": "Interrupted"}
        print(file=sys.stderr)
        console.error("Interrupted", label="ABORTED")
    except Exception as exc:  # noqa: BLE001
        status = "exec_failure"
        exit_code = int(ExitCode.EXEC_FAILURE)
        error = {"type": type(exc).__name__, "message": str(exc)}
        console.error(f"{type(exc).__name__}: {exc}")

    ended_at = now_utc_z()
    duration_ms = int((time.monotonic() - t0) * 1000)

    payload: dict[str, Any] = {
        "schema_version": 1,
        "started_at": started_at,
        "ended_at": ended_at,
        "duration_ms": duration_ms,
        "argv": argv_list,
        "cwd": os.getcwd(),
        "status": status,
        "exit_code": exit_code,
        "result": result,
    }
    if error is not None:
        payload["error"] = error

    try:
        out_dir = ensure_artifacts_dir(os.getcwd())
        write_run_json(out_dir, payload)
    except OSError as exc:
        # If we can't write artifacts, treat as execution failure.
        console.error(f"failed to write artifacts: {exc}")
        return int(ExitCode.EXEC_FAILURE)

    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())

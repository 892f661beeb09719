"""Fixed, ordered step lists for the setup and pattern runs."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Step:
    number: int
    document: str
    description: str
    build_cmd: str | None = None


SETUP_STEPS: tuple[Step, ...] = (
    Step(1, "SETUP-1-ROOT.md", "Root Setup"),
    Step(2, "SETUP-2-SHARED.md", "Shared Package"),
    Step(3, "SETUP-3-FRONTEND.md", "Frontend"),
    Step(4, "SETUP-4-BACKEND.md", "Backend"),
    Step(5, "SETUP-5-FINAL.md", "Final Setup"),
)

# Documents live under `patterns/` in the generated project.
PATTERN_STEPS: tuple[Step, ...] = (
    Step(1, "INSTALL_SHARED_PATTERNS.md", "Shared Package Patterns"),
    Step(2, "INSTALL_EXPRESS_PATTERNS.md", "Express Backend Patterns"),
    Step(3, "PRISMA_PATTERNS.md", "Prisma Migration Patterns"),
    Step(4, "DOCKER_PATTERNS.md", "Docker Setup"),
)


def with_build_cmd(steps: tuple[Step, ...], build_cmd: str | None) -> tuple[Step, ...]:
    cmd = (build_cmd or "").strip()
    if not cmd:
        return steps
    return tuple(replace(s, build_cmd=cmd) for s in steps)

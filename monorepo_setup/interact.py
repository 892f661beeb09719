"""Operator interaction (confirmations and pauses)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from .errors import AbortedError


class Operator(Protocol):
    def confirm(self, question: str) -> bool: ...

    def pause(self, message: str) -> None: ...


def _is_yes(answer: str) -> bool:
    return answer.strip()[:1] in ("y", "Y")


@dataclass(frozen=True)
class ConsoleOperator:
    """Ask the human at the terminal.

    `assume_yes` answers every confirmation with yes and never pauses.
    """

    assume_yes: bool = False
    read_line: Callable[[str], str] = input

    def confirm(self, question: str) -> bool:
        if self.assume_yes:
            print(f"{question} (y/N) y", flush=True)
            return True
        try:
            answer = self.read_line(f"{question} (y/N) ")
        except EOFError:
            print(flush=True)
            return False
        return _is_yes(answer)

    def pause(self, message: str) -> None:
        if self.assume_yes:
            return
        try:
            self.read_line(message)
        except EOFError as exc:
            raise AbortedError("Stopped while waiting for the operator") from exc

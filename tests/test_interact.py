from __future__ import annotations

import unittest

from monorepo_setup.errors import AbortedError
from monorepo_setup.interact import ConsoleOperator


def _eof(_: str) -> str:
    raise EOFError


class TestConsoleOperator(unittest.TestCase):
    def test_confirm_answers(self) -> None:
        cases = {"y": True, "Y": True, "yes": True, "n": False, "": False, "x": False}
        for answer, expected in cases.items():
            with self.subTest(answer=answer):
                op = ConsoleOperator(read_line=lambda _q, a=answer: a)
                self.assertEqual(op.confirm("Continue?"), expected)

    def test_confirm_eof_is_no(self) -> None:
        self.assertFalse(ConsoleOperator(read_line=_eof).confirm("Continue?"))

    def test_assume_yes_never_reads(self) -> None:
        op = ConsoleOperator(assume_yes=True, read_line=_eof)
        self.assertTrue(op.confirm("Continue?"))
        op.pause("press ENTER")

    def test_pause_reads_one_line(self) -> None:
        seen: list[str] = []
        op = ConsoleOperator(read_line=lambda q: seen.append(q) or "")
        op.pause("press ENTER")
        self.assertEqual(seen, ["press ENTER"])

    def test_pause_eof_aborts(self) -> None:
        with self.assertRaises(AbortedError):
            ConsoleOperator(read_line=_eof).pause("press ENTER")


if __name__ == "__main__":
    unittest.main()

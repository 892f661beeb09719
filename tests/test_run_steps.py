from __future__ import annotations

import shlex
import sys
import tempfile
import unittest
from dataclasses import dataclass, field
from pathlib import Path

from monorepo_setup.errors import AbortedError
from monorepo_setup.steps import SETUP_STEPS, Step, run_steps, with_build_cmd


@dataclass
class RecordingRunner:
    exit_codes: dict[int, int] = field(default_factory=dict)
    prompts: list[str] = field(default_factory=list)
    cwds: list[str] = field(default_factory=list)

    def run_prompt(self, prompt: str, *, cwd: str) -> int:
        self.prompts.append(prompt)
        self.cwds.append(cwd)
        return self.exit_codes.get(len(self.prompts), 0)


@dataclass
class ScriptedOperator:
    answers: list[bool] = field(default_factory=list)
    questions: list[str] = field(default_factory=list)
    pauses: list[str] = field(default_factory=list)

    def confirm(self, question: str) -> bool:
        self.questions.append(question)
        return self.answers.pop(0) if self.answers else False

    def pause(self, message: str) -> None:
        self.pauses.append(message)


def _render(step: Step) -> str:
    return f"prompt:{step.document}"


def _py(code: str) -> str:
    return shlex.join([sys.executable, "-c", code])


class TestRunSteps(unittest.TestCase):
    def test_runs_all_steps_in_order(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            runner = RecordingRunner()
            operator = ScriptedOperator()

            outcomes = run_steps(
                SETUP_STEPS, runner=runner, render=_render, operator=operator, cwd=td
            )

            self.assertEqual(
                runner.prompts, [f"prompt:{s.document}" for s in SETUP_STEPS]
            )
            self.assertEqual(runner.cwds, [td] * 5)
            self.assertEqual([o.number for o in outcomes], [1, 2, 3, 4, 5])
            self.assertTrue(all(o.exit_code == 0 for o in outcomes))
            self.assertTrue(all(o.build_status == "skipped" for o in outcomes))
            self.assertEqual(operator.questions, [])

    def test_failure_declined_stops_run(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            runner = RecordingRunner(exit_codes={2: 1})
            operator = ScriptedOperator(answers=[False])

            with self.assertRaises(AbortedError):
                run_steps(
                    SETUP_STEPS,
                    runner=runner,
                    render=_render,
                    operator=operator,
                    cwd=td,
                )

            self.assertEqual(len(runner.prompts), 2)
            self.assertEqual(operator.questions, ["Continue anyway?"])

    def test_failure_accepted_continues(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            runner = RecordingRunner(exit_codes={1: 7})
            operator = ScriptedOperator(answers=[True])

            outcomes = run_steps(
                SETUP_STEPS, runner=runner, render=_render, operator=operator, cwd=td
            )

            self.assertEqual(len(outcomes), 5)
            self.assertEqual(outcomes[0].exit_code, 7)
            self.assertTrue(outcomes[0].continued_after_failure)
            self.assertFalse(outcomes[1].continued_after_failure)

    def test_build_success(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            steps = with_build_cmd(SETUP_STEPS[:2], _py("raise SystemExit(0)"))
            operator = ScriptedOperator()

            outcomes = run_steps(
                steps,
                runner=RecordingRunner(),
                render=_render,
                operator=operator,
                cwd=td,
                build_cwd=td,
            )

            self.assertEqual([o.build_status for o in outcomes], ["ok", "ok"])
            self.assertEqual(operator.pauses, [])

    def test_build_runs_in_build_cwd(self) -> None:
        with tempfile.TemporaryDirectory() as td, tempfile.TemporaryDirectory() as bd:
            code = "import pathlib; pathlib.Path('built.txt').write_text('x')"
            steps = with_build_cmd(SETUP_STEPS[:1], _py(code))

            run_steps(
                steps,
                runner=RecordingRunner(),
                render=_render,
                operator=ScriptedOperator(),
                cwd=td,
                build_cwd=bd,
            )

            self.assertTrue((Path(bd) / "built.txt").is_file())

    def test_build_failure_pauses_and_continues(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            steps = with_build_cmd(SETUP_STEPS[:3], _py("raise SystemExit(1)"))
            operator = ScriptedOperator()

            outcomes = run_steps(
                steps,
                runner=RecordingRunner(),
                render=_render,
                operator=operator,
                cwd=td,
            )

            self.assertEqual([o.build_status for o in outcomes], ["failed"] * 3)
            self.assertEqual(len(operator.pauses), 3)
            self.assertIn("press ENTER", operator.pauses[0])

    def test_build_missing_directory_counts_as_failure(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            steps = with_build_cmd(SETUP_STEPS[:1], _py("pass"))
            operator = ScriptedOperator()

            outcomes = run_steps(
                steps,
                runner=RecordingRunner(),
                render=_render,
                operator=operator,
                cwd=td,
                build_cwd=td + "/not-created-yet",
            )

            self.assertEqual(outcomes[0].build_status, "failed")
            self.assertEqual(len(operator.pauses), 1)

    def test_dry_run_does_not_execute(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            steps = with_build_cmd(SETUP_STEPS, _py("raise SystemExit(1)"))
            operator = ScriptedOperator()

            outcomes = run_steps(
                steps, runner=None, render=_render, operator=operator, cwd=td
            )

            self.assertEqual(len(outcomes), 5)
            self.assertTrue(all(o.exit_code is None for o in outcomes))
            self.assertEqual(operator.pauses, [])


if __name__ == "__main__":
    unittest.main()

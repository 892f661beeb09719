"""Step runners.

A "step" is one instruction document handed to the external tool in a fresh
session.
"""

from .catalog import PATTERN_STEPS, SETUP_STEPS, Step, with_build_cmd
from .prompt import load_setup_instructions, render_pattern_prompt, render_setup_prompt
from .run import StepOutcome, run_steps

__all__ = [
    "PATTERN_STEPS",
    "SETUP_STEPS",
    "Step",
    "StepOutcome",
    "load_setup_instructions",
    "render_pattern_prompt",
    "render_setup_prompt",
    "run_steps",
    "with_build_cmd",
]

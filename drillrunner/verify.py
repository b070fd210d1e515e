"""Checking exercises in order and prompting the learner to move on."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.status import Status
from rich.text import Text

from drillrunner.exercise import CompileError, CompiledExercise, Exercise, Mode
from drillrunner.ui import no_emoji, success, warn

BAR_WIDTH = 60
SEPARATOR = "===================="


class ExerciseFailed(Exception):
    """Raised when an exercise fails to build, fails to run or is still pending."""

    def __init__(self, exercise: Exercise) -> None:
        super().__init__(str(exercise))
        self.exercise = exercise


class _RunMode(enum.Enum):
    INTERACTIVE = enum.auto()
    NON_INTERACTIVE = enum.auto()


def _console() -> Console:
    return Console(highlight=False, soft_wrap=True)


@contextmanager
def _spinner(message: str) -> Iterator[Status]:
    with _console().status(message) as status:
        yield status


def _progress_line(position: int, total: int) -> Text:
    fraction = 1.0 if total <= 0 else min(max(position / total, 0.0), 1.0)
    filled = int(fraction * BAR_WIDTH)
    if filled < BAR_WIDTH:
        done_part = "#" * filled + ">"
        rest = "-" * (BAR_WIDTH - filled - 1)
    else:
        done_part, rest = "#" * BAR_WIDTH, ""
    return Text.assemble(
        "Progress: [", (done_part, "green"), (rest, "red"), f"] {position}/{total}"
    )


def _compile(exercise: Exercise, status: Status) -> CompiledExercise:
    try:
        return exercise.compile()
    except CompileError as err:
        status.stop()
        warn(f"Compiling of {exercise} failed! Please try again. Here's the output:")
        print(err.output.stderr)
        raise ExerciseFailed(exercise) from err


def _compile_only(exercise: Exercise) -> bool:
    with _spinner(f"Compiling {exercise}...") as status:
        with _compile(exercise, status):
            pass
    return prompt_for_completion(exercise, None)


def _compile_and_run_interactively(exercise: Exercise) -> bool:
    with _spinner(f"Compiling {exercise}...") as status:
        with _compile(exercise, status) as compiled:
            status.update(f"Running {exercise}...")
            output = compiled.run()
    if not output.success:
        warn(f"Ran {exercise} with errors")
        print(output.stdout)
        print(output.stderr)
        raise ExerciseFailed(exercise)
    return prompt_for_completion(exercise, output.stdout)


def _compile_and_test(exercise: Exercise, run_mode: _RunMode, verbose: bool) -> bool:
    with _spinner(f"Testing {exercise}...") as status:
        with _compile(exercise, status) as compiled:
            output = compiled.run()
    if not output.success:
        warn(f"Testing of {exercise} failed! Please try again. Here's the output:")
        print(output.stdout)
        raise ExerciseFailed(exercise)
    if verbose:
        print(output.stdout)
    if run_mode is _RunMode.INTERACTIVE:
        return prompt_for_completion(exercise, None)
    return True


def verify(
    exercises: Iterable[Exercise], progress: tuple[int, int], verbose: bool = False
) -> None:
    """Check each exercise in turn; raise ExerciseFailed at the first one not finished."""
    position, total = progress
    console = _console()
    console.print(_progress_line(position, total))
    for exercise in exercises:
        match exercise.mode:
            case Mode.TEST:
                passed = _compile_and_test(exercise, _RunMode.INTERACTIVE, verbose)
            case Mode.COMPILE:
                passed = _compile_and_run_interactively(exercise)
            case Mode.CLIPPY:
                passed = _compile_only(exercise)
        if not passed:
            raise ExerciseFailed(exercise)
        position += 1
        console.print(_progress_line(position, total))


def test(exercise: Exercise, verbose: bool = False) -> None:
    """Build and run an exercise's test harness without prompting."""
    _compile_and_test(exercise, _RunMode.NON_INTERACTIVE, verbose)


def prompt_for_completion(exercise: Exercise, prompt_output: str | None) -> bool:
    """Return True if the exercise is done; otherwise show where the marker is and return False."""
    state = exercise.state()
    if state.done():
        return True

    match exercise.mode:
        case Mode.COMPILE:
            success(f"Successfully ran {exercise}!")
        case Mode.TEST:
            success(f"Successfully tested {exercise}!")
        case Mode.CLIPPY:
            success(f"Successfully compiled {exercise}!")

    plain = no_emoji()
    clippy_msg = (
        "The code is compiling, and Clippy is happy!"
        if plain
        else "The code is compiling, and 📎 Clippy 📎 is happy!"
    )
    success_msg = {
        Mode.COMPILE: "The code is compiling!",
        Mode.TEST: "The code is compiling, and the tests pass!",
        Mode.CLIPPY: clippy_msg,
    }[exercise.mode]

    console = _console()
    print()
    print(f"~*~ {success_msg} ~*~" if plain else f"🎉 🎉  {success_msg} 🎉 🎉")
    print()

    if prompt_output is not None:
        print("Output:")
        console.print(Text(SEPARATOR, style="bold"))
        print(prompt_output)
        console.print(Text(SEPARATOR, style="bold"))
        print()

    print("You can keep working on this exercise,")
    console.print(
        Text.assemble(
            "or jump into the next one by removing the ",
            ("`I AM NOT DONE`", "bold"),
            " comment:",
        )
    )
    print()
    for context_line in state.context:
        line = (context_line.line, "bold") if context_line.important else context_line.line
        console.print(
            Text.assemble(
                (f"{context_line.number:>2}", "bold blue"), " ", ("|", "blue"), "  ", line
            )
        )
    return False
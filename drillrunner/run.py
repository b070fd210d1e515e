"""Running a single exercise and resetting it."""

from __future__ import annotations

import subprocess

from rich.console import Console

from drillrunner.exercise import CompileError, Exercise, Mode
from drillrunner.ui import success, warn
from drillrunner.verify import ExerciseFailed, test


def run(exercise: Exercise, verbose: bool = False) -> None:
    """Build and run one exercise; raise ExerciseFailed if that does not succeed."""
    if exercise.mode is Mode.TEST:
        test(exercise, verbose)
    else:
        _compile_and_run(exercise)


def reset(exercise: Exercise) -> subprocess.Popen:
    """Stash the learner's changes to the exercise with git."""
    try:
        return subprocess.Popen(["git", "stash", "--", str(exercise.path)])
    except OSError as err:
        raise ExerciseFailed(exercise) from err


def _compile_and_run(exercise: Exercise) -> None:
    console = Console(highlight=False, soft_wrap=True)
    with console.status(f"Compiling {exercise}...") as status:
        try:
            compiled = exercise.compile()
        except CompileError as err:
            status.stop()
            warn(f"Compilation of {exercise} failed!, Compiler error message:\n")
            print(err.output.stderr)
            raise ExerciseFailed(exercise) from err
        with compiled:
            status.update(f"Running {exercise}...")
            output = compiled.run()

    if output.success:
        print(output.stdout)
        success(f"Successfully ran {exercise}")
        return
    print(output.stdout)
    print(output.stderr)
    warn(f"Ran {exercise} with errors")
    raise ExerciseFailed(exercise)
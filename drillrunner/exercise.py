"""Exercises: loading, compiling, running and checking their state."""

from __future__ import annotations

import enum
import os
import re
import subprocess
import threading
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from drillrunner.ui import no_emoji

RUSTC_COLOR_ARGS = ("--color", "always")
I_AM_DONE_PATTERN = re.compile(r"^\s*///?\s*I\s+AM\s+NOT\s+DONE", re.MULTILINE)
CONTEXT = 2
CLIPPY_CARGO_TOML_PATH = "./exercises/clippy/Cargo.toml"


def temp_file() -> str:
    """Return a per-process, per-thread scratch file name for compiled binaries."""
    thread_id = "".join(ch for ch in str(threading.get_ident()) if ch.isalnum())
    return f"./temp_{os.getpid()}_{thread_id}"


def clean() -> None:
    """Remove the scratch binary, ignoring a missing file."""
    try:
        os.remove(temp_file())
    except OSError:
        pass


class Mode(enum.Enum):
    """How an exercise is built and checked."""

    COMPILE = "compile"
    TEST = "test"
    CLIPPY = "clippy"


@dataclass(frozen=True)
class ContextLine:
    """A source line shown around the pending marker."""

    line: str
    number: int
    important: bool


@dataclass(frozen=True)
class State:
    """Completion state; an empty context means the exercise is done."""

    context: tuple[ContextLine, ...] = ()

    def done(self) -> bool:
        return not self.context


@dataclass
class ExerciseOutput:
    """Captured output of a finished process."""

    stdout: str
    stderr: str
    success: bool = True


class CompileError(Exception):
    """Raised when an exercise fails to compile."""

    def __init__(self, output: ExerciseOutput) -> None:
        super().__init__(output.stderr)
        self.output = output


def _output(result: subprocess.CompletedProcess) -> ExerciseOutput:
    return ExerciseOutput(
        stdout=(result.stdout or b"").decode("utf-8", errors="replace"),
        stderr=(result.stderr or b"").decode("utf-8", errors="replace"),
        success=result.returncode == 0,
    )


def _lines(source: str) -> list[str]:
    parts = source.split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    return [part.removesuffix("\r") for part in parts]


@dataclass
class Exercise:
    """One exercise as described in info.toml."""

    name: str
    path: Path
    mode: Mode
    hint: str = ""

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        self.mode = Mode(self.mode)

    def __str__(self) -> str:
        return str(self.path)

    def _clippy_build(self, target: str) -> subprocess.CompletedProcess:
        manifest = (
            "[package]\n"
            f'name = "{self.name}"\n'
            'version = "0.0.1"\n'
            'edition = "2021"\n'
            "[[bin]]\n"
            f'name = "{self.name}"\n'
            f'path = "{self.name}.rs"'
        )
        try:
            Path(CLIPPY_CARGO_TOML_PATH).write_text(manifest, encoding="utf-8")
        except OSError as err:
            message = (
                "Failed to write Clippy Cargo.toml file."
                if no_emoji()
                else "Failed to write 📎 Clippy 📎 Cargo.toml file."
            )
            raise RuntimeError(message) from err
        # The binary is built so the exercise can be run; a failure here
        # shows up again when clippy compiles it.
        subprocess.run(
            ["rustc", str(self.path), "-o", target, *RUSTC_COLOR_ARGS],
            capture_output=True,
        )
        # A clean build is needed for clippy to report every lint.
        subprocess.run(
            ["cargo", "clean", "--manifest-path", CLIPPY_CARGO_TOML_PATH, *RUSTC_COLOR_ARGS],
            capture_output=True,
        )
        return subprocess.run(
            [
                "cargo", "clippy", "--manifest-path", CLIPPY_CARGO_TOML_PATH,
                *RUSTC_COLOR_ARGS,
                "--", "-D", "warnings", "-D", "clippy::float_cmp",
            ],
            capture_output=True,
        )

    def compile(self) -> CompiledExercise:
        """Build the exercise; raise CompileError with the compiler output on failure."""
        target = temp_file()
        source = str(self.path)
        match self.mode:
            case Mode.COMPILE:
                result = subprocess.run(
                    ["rustc", source, "-o", target, *RUSTC_COLOR_ARGS],
                    capture_output=True,
                )
            case Mode.TEST:
                result = subprocess.run(
                    ["rustc", "--test", source, "-o", target, *RUSTC_COLOR_ARGS],
                    capture_output=True,
                )
            case Mode.CLIPPY:
                result = self._clippy_build(target)
        if result.returncode == 0:
            return CompiledExercise(self)
        clean()
        raise CompileError(_output(result))

    def state(self) -> State:
        """Find the pending marker and return it with surrounding lines."""
        source = self.path.read_text(encoding="utf-8")
        if not I_AM_DONE_PATTERN.search(source):
            return State()
        lines = _lines(source)
        matched = next(
            (index for index, line in enumerate(lines) if I_AM_DONE_PATTERN.search(line)),
            None,
        )
        if matched is None:
            raise ValueError(f"pending marker in {self.path} spans several lines")
        first = max(matched - CONTEXT, 0)
        last = matched + CONTEXT
        return State(
            tuple(
                ContextLine(line=line, number=index + 1, important=index == matched)
                for index, line in enumerate(lines)
                if first <= index <= last
            )
        )

    def looks_done(self) -> bool:
        """Whether the pending marker has been removed from the file."""
        return self.state().done()


@dataclass
class CompiledExercise:
    """A built exercise; closing it removes the scratch binary."""

    exercise: Exercise
    _closed: bool = field(default=False, repr=False)

    def run(self) -> ExerciseOutput:
        """Run the built binary and capture its output."""
        args = [temp_file()]
        if self.exercise.mode is Mode.TEST:
            args.append("--show-output")
        return _output(subprocess.run(args, capture_output=True))

    def close(self) -> None:
        if not self._closed:
            clean()
            self._closed = True

    def __enter__(self) -> CompiledExercise:
        return self

    def __exit__(self, *args) -> None:
        self.close()


def load_exercises(path: str | Path = "info.toml") -> list[Exercise]:
    """Read the exercise list from an info.toml file."""
    with open(path, "rb") as handle:
        data = tomllib.load(handle)
    return [
        Exercise(
            name=entry["name"],
            path=Path(entry["path"]),
            mode=Mode(entry["mode"]),
            hint=entry["hint"],
        )
        for entry in data["exercises"]
    ]
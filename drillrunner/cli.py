"""Command line entry point: list, run, verify and watch exercises."""

from __future__ import annotations

import argparse
import enum
import os
import queue
import subprocess
import sys
import threading
from collections.abc import Iterator, Sequence
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from drillrunner.exercise import Exercise, load_exercises
from drillrunner.project import RustAnalyzerProject
from drillrunner.run import reset, run
from drillrunner.ui import no_emoji
from drillrunner.verify import ExerciseFailed, verify

VERSION = "5.2.1"
INFO_FILE = "info.toml"
EXERCISES_DIR = "./exercises"

WELCOME = """       welcome to...
      _      _ _ _
   __| |_ __(_) | |  _ __ _   _ _ __  _ __   ___ _ __
  / _` | '__| | | | | '__| | | | '_ \\| '_ \\ / _ \\ '__|
 | (_| | |  | | | | | |  | |_| | | | | | | |  __/ |
  \\__,_|_|  |_|_|_| |_|   \\__,_|_| |_|_| |_|\\___|_|"""

DEFAULT_OUT = """Thanks for installing the exercises!

Is this your first time? Don't worry, these exercises are made for beginners!
Before you get started, here are a couple of notes about how things work:

1. The central concept is that you solve exercises. These exercises usually
   have some sort of syntax error in them, which will cause them to fail
   compilation or testing. Sometimes there's a logic error instead of a syntax
   error. No matter what error, it's your job to find it and fix it! You'll
   know when you fixed it because then the exercise will compile and the
   runner will be able to move on to the next exercise.
2. If you run in watch mode (which we recommend), it'll automatically start
   with the first exercise. Don't get confused by an error message popping up
   as soon as you start! This is part of the exercise that you're supposed to
   solve, so open the exercise file in an editor and start your detective work!
3. If you're stuck on an exercise, there is a helpful hint you can view by
   typing 'hint' (in watch mode), or by running the `hint` command with the
   exercise name.
4. If an exercise doesn't make sense to you, feel free to open an issue!
   We look at every issue, and sometimes other learners do too, so you can
   help each other out!
5. If you want editor support such as autocompletion for the exercises,
   run the `lsp` command.

Got all that? Great! To get started, run the `watch` command in order to get
the first exercise. Make sure to have your editor open!"""

FINISH_LINE = """+----------------------------------------------------+
|          You made it to the finish line!           |
+----------------------------------------------------+

We hope you enjoyed learning about the various aspects of the language!
If you noticed any issues, please don't hesitate to report them.
You can also contribute your own exercises to help the greater community!"""

WATCH_HELP = """Commands available to you in watch mode:
  hint  - prints the current exercise's hint
  clear - clears the screen
  quit  - quits watch mode
  help  - displays this help message

Watch mode automatically re-evaluates the current exercise
when you edit a file's contents."""


class WatchStatus(enum.Enum):
    """How watch mode ended."""

    FINISHED = enum.auto()
    UNFINISHED = enum.auto()


class ExerciseNotFound(LookupError):
    """Raised when no exercise matches the requested name."""


def rustc_exists() -> bool:
    """Whether `rustc --version` can be started and succeeds."""
    try:
        result = subprocess.run(["rustc", "--version"], stdout=subprocess.DEVNULL)
    except OSError:
        return False
    return result.returncode == 0


def find_exercise(name: str, exercises: Sequence[Exercise]) -> Exercise:
    """Find an exercise by name; "next" means the first one not yet done."""
    if name == "next":
        found = next((e for e in exercises if not e.looks_done()), None)
        if found is None:
            raise ExerciseNotFound(
                "🎉 Congratulations! You have done all the exercises!\n"
                "🔚 There are no more exercises to do next!"
            )
        return found
    found = next((e for e in exercises if e.name == name), None)
    if found is None:
        raise ExerciseNotFound(f"No exercise found for '{name}'!")
    return found


def list_exercises(
    exercises: Sequence[Exercise],
    paths: bool = False,
    names: bool = False,
    filter: str | None = None,
    unsolved: bool = False,
    solved: bool = False,
) -> Iterator[str]:
    """Yield the lines of the exercise listing, ending with a progress summary."""
    if not paths and not names:
        yield f"{'Name':<17}\t{'Path':<46}\t{'Status':<7}"
    filters = [f for f in (filter or "").lower().split(",") if f.strip()]
    done_count = 0
    for exercise in exercises:
        fname = str(exercise.path)
        matches_filter = any(f in exercise.name or f in fname for f in filters)
        done = exercise.looks_done()
        if done:
            done_count += 1
        status = "Done" if done else "Pending"
        wanted = (done and solved) or (not done and unsolved) or (not solved and not unsolved)
        if wanted and (matches_filter or filter is None):
            if paths:
                yield fname
            elif names:
                yield exercise.name
            else:
                yield f"{exercise.name:<17}\t{fname:<46}\t{status:<7}"
    total = len(exercises)
    percentage = done_count / total * 100.0 if total else float("nan")
    yield f"Progress: You completed {done_count} / {total} exercises ({percentage:.2f} %)."


def _clear_screen() -> None:
    print("\x1bc")


def _ends_with(path: Path, tail: Path) -> bool:
    parts = tail.parts
    return len(parts) <= len(path.parts) and path.parts[len(path.parts) - len(parts):] == parts


class _QueueHandler(FileSystemEventHandler):
    def __init__(self, events: queue.Queue[str]) -> None:
        super().__init__()
        self._events = events

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in ("created", "modified"):
            return
        self._events.put(os.fsdecode(event.src_path))


class _WatchShell:
    """Reads commands from stdin while watch mode is running."""

    def __init__(self, hint: str) -> None:
        self._hint = hint
        self._lock = threading.Lock()
        self.should_quit = threading.Event()

    @property
    def hint(self) -> str:
        with self._lock:
            return self._hint

    @hint.setter
    def hint(self, value: str) -> None:
        with self._lock:
            self._hint = value

    def start(self) -> None:
        print(
            "Welcome to watch mode! You can type 'help' to get an overview "
            "of the commands you can use here."
        )
        threading.Thread(target=self._loop, daemon=True).start()

    def _loop(self) -> None:
        while not self.should_quit.is_set():
            try:
                line = sys.stdin.readline()
            except (OSError, ValueError) as err:
                print(f"error reading command: {err}")
                return
            if not line:
                return
            self.handle(line.strip())

    def handle(self, command: str) -> None:
        match command:
            case "hint":
                print(self.hint)
            case "clear":
                print("\x1b[2J\x1b[1;1H")
            case "quit":
                self.should_quit.set()
                print("Bye!")
            case "help":
                print(WATCH_HELP)
            case _:
                print(f"unknown command: {command}")


def _watch_loop(
    exercises: Sequence[Exercise], verbose: bool, events: queue.Queue[str]
) -> WatchStatus:
    _clear_screen()
    try:
        verify(exercises, (0, len(exercises)), verbose)
        return WatchStatus.FINISHED
    except ExerciseFailed as failed:
        shell = _WatchShell(failed.exercise.hint)
    shell.start()
    while not shell.should_quit.is_set():
        try:
            changed = Path(events.get(timeout=1))
        except queue.Empty:
            continue
        if changed.suffix != ".rs" or not changed.exists():
            continue
        filepath = changed.resolve()
        current = [e for e in exercises if _ends_with(filepath, e.path)][:1]
        others = [
            e for e in exercises if not _ends_with(filepath, e.path) and not e.looks_done()
        ]
        num_done = sum(1 for e in exercises if e.looks_done())
        _clear_screen()
        try:
            verify(current + others, (num_done, len(exercises)), verbose)
            return WatchStatus.FINISHED
        except ExerciseFailed as failed:
            shell.hint = failed.exercise.hint
    return WatchStatus.UNFINISHED


def watch(exercises: Sequence[Exercise], verbose: bool = False) -> WatchStatus:
    """Verify exercises again whenever a file below the exercises directory changes."""
    events: queue.Queue[str] = queue.Queue()
    observer = Observer()
    observer.schedule(_QueueHandler(events), EXERCISES_DIR, recursive=True)
    observer.start()
    try:
        return _watch_loop(exercises, verbose, events)
    finally:
        observer.stop()
        observer.join()


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        sys.stderr.write(f"{self.prog}: error: {message}\n")
        raise SystemExit(1)


def _build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="drillrunner",
        description="A collection of small exercises to get you used to writing and reading code",
    )
    parser.add_argument("--nocapture", action="store_true", help="show outputs from the test exercises")
    parser.add_argument("-v", "--version", action="store_true", help="show the executable version")
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("verify", help="verifies all exercises according to the recommended order")
    sub.add_parser("watch", help="reruns `verify` when files were edited")
    for name, text in (
        ("run", "runs/tests a single exercise"),
        ("reset", "resets a single exercise using git stash"),
        ("hint", "returns a hint for the given exercise"),
    ):
        command = sub.add_parser(name, help=text)
        command.add_argument("name", help="the name of the exercise")
    listing = sub.add_parser("list", help="lists the exercises available")
    listing.add_argument("-p", "--paths", action="store_true", help="show only the paths of the exercises")
    listing.add_argument("-n", "--names", action="store_true", help="show only the names of the exercises")
    listing.add_argument(
        "-f", "--filter", default=None,
        help="a string to match exercise names; comma separated patterns are acceptable",
    )
    listing.add_argument("-u", "--unsolved", action="store_true", help="display only exercises not yet solved")
    listing.add_argument("-s", "--solved", action="store_true", help="display only exercises that have been solved")
    sub.add_parser("lsp", help="enable rust-analyzer for exercises")
    return parser


def _print_listing(args: argparse.Namespace, exercises: Sequence[Exercise]) -> int:
    lines = list_exercises(
        exercises, args.paths, args.names, args.filter, args.unsolved, args.solved
    )
    try:
        for line in lines:
            sys.stdout.write(line + "\n")
        sys.stdout.flush()
    except BrokenPipeError:
        return 0
    except OSError:
        return 1
    return 0


def _lsp() -> int:
    project = RustAnalyzerProject()
    try:
        project.get_sysroot_src()
    except OSError:
        print("Couldn't find toolchain path, do you have `rustc` installed?")
        return 1
    project.exercises_to_json(EXERCISES_DIR)
    if not project.crates:
        print("Failed find any exercises, make sure you're in the exercises folder")
        return 0
    try:
        project.write_to_disk()
    except OSError:
        print("Failed to write rust-project.json to disk for rust-analyzer")
        return 0
    print("Successfully generated rust-project.json")
    print("rust-analyzer will now parse exercises, restart your language server or editor")
    return 0


def _watch_command(exercises: Sequence[Exercise], verbose: bool) -> int:
    try:
        status = watch(exercises, verbose)
    except OSError as err:
        print(f"Error: Could not watch your progress. Error message was {err!r}.")
        print(
            "Most likely you've run out of disk space or your 'inotify limit' has been reached."
        )
        return 1
    if status is WatchStatus.FINISHED:
        emoji = "★" if no_emoji() else "🎉"
        print(f"{emoji} All exercises completed! {emoji}")
        print(f"\n{FINISH_LINE}\n")
    else:
        print("We hope you're enjoying the exercises!")
        print(
            "If you want to continue working on the exercises at a later point, "
            "you can simply run the `watch` command again"
        )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Parse the command line and carry out the chosen command; return the exit code."""
    args = _build_parser().parse_args(argv)

    if args.version:
        print(f"v{VERSION}")
        return 0

    if args.command is None:
        print(f"\n{WELCOME}\n")

    if not Path(INFO_FILE).exists():
        print(f"{sys.argv[0]} must be run from the exercises directory")
        print(f"Try `cd` into the directory that holds {INFO_FILE}!")
        return 1

    if not rustc_exists():
        print("We cannot find `rustc`.")
        print("Try running `rustc --version` to diagnose your problem.")
        print("For instructions on how to install the compiler, check the README.")
        return 1

    exercises = load_exercises(INFO_FILE)
    verbose = args.nocapture

    match args.command:
        case None:
            print(f"{DEFAULT_OUT}\n")
            return 0
        case "list":
            return _print_listing(args, exercises)
        case "run" | "reset" | "hint":
            try:
                exercise = find_exercise(args.name, exercises)
            except ExerciseNotFound as err:
                print(err)
                return 1
            if args.command == "hint":
                print(exercise.hint)
                return 0
            try:
                if args.command == "run":
                    run(exercise, verbose)
                else:
                    reset(exercise)
            except ExerciseFailed:
                return 1
            return 0
        case "verify":
            try:
                verify(exercises, (0, len(exercises)), verbose)
            except ExerciseFailed:
                return 1
            return 0
        case "lsp":
            return _lsp()
        case "watch":
            return _watch_command(exercises, verbose)
    return 1


if __name__ == "__main__":
    sys.exit(main())
# drillrunner

drillrunner takes you through a course of small exercises. Each exercise is a
source file with something left to fix. drillrunner compiles the file with
`rustc`. It then runs the program or its tests and tells you whether it
worked. An exercise counts as finished once its `I AM NOT DONE` marker comment
is gone.

## Installing

```
pip install .
```

You need `rustc` on your `PATH`. Clippy exercises also need `cargo`. `reset`
needs `git`.

## What you need to bring

This package holds only the runner. It does not ship the exercise files or the
`info.toml` that lists them. You run drillrunner from a course directory that
has both:

- `info.toml`, with an `[[exercises]]` table for each exercise. Each table has
  a `name`, a `path`, a `mode` (`compile`, `test` or `clippy`) and a `hint`.
- an `exercises/` directory, holding the files that `info.toml` points to.

## Usage

```
drillrunner                 # welcome text and first steps
drillrunner watch           # verify again each time a file under exercises/ changes
drillrunner verify          # check all exercises in the order of info.toml
drillrunner run NAME        # compile and run (or test) one exercise
drillrunner run next        # the same, for the first exercise not yet finished
drillrunner hint NAME       # print the hint for an exercise
drillrunner reset NAME      # run `git stash -- <path>` for one exercise
drillrunner list            # table of names, paths and Done/Pending status
drillrunner lsp             # write rust-project.json for rust-analyzer
drillrunner --version       # or -v
```

Put `--nocapture` before the subcommand to see the output of passing test
harnesses.

Options for `list`:

- `-p`, `--paths`: print only the paths
- `-n`, `--names`: print only the names
- `-f`, `--filter PATTERNS`: keep only exercises whose name or path contains
  one of the comma-separated patterns
- `-u`, `--unsolved`: show only pending exercises
- `-s`, `--solved`: show only finished exercises

The listing ends with a progress line.

In watch mode you can type `hint`, `clear`, `quit` or `help`.

The exit status is 1 in these cases:

- `info.toml` is missing from the current directory.
- `rustc` cannot be started.
- The named exercise does not exist.
- An exercise fails to compile or run, or its tests fail.
- `verify` stops at an exercise that is still pending.

Bad arguments also exit with status 1.

If the `NO_EMOJI` environment variable is set, status lines use plain-text
symbols.

## Library use

- `drillrunner.exercise`
  - `load_exercises(path)` reads `info.toml` into a list of `Exercise` objects.
  - `Exercise.compile()` builds an exercise. It returns a `CompiledExercise`, a
    context manager that removes the built binary when it closes. Its `run()`
    returns an `ExerciseOutput` with `stdout`, `stderr` and `success`. A build
    failure raises `CompileError`.
  - `Exercise.state()` returns a `State`. For a pending exercise it holds the
    `ContextLine`s around the marker.
  - `Exercise.looks_done()` returns True once the marker is gone.
- `drillrunner.verify`
  - `verify(exercises, progress, verbose)` checks exercises in turn. It raises
    `ExerciseFailed` at the first one that is not finished.
- `drillrunner.run`
  - `run(exercise, verbose)` builds and runs a single exercise.
  - `reset(exercise)` stashes the changes to a single exercise.
- `drillrunner.project`
  - `RustAnalyzerProject` builds the `rust-project.json` data.
- `drillrunner.cli`
  - `main(argv)` runs the command line and returns the exit code.
  - `find_exercise(name, exercises)` looks up an exercise by name.
  - `list_exercises(...)` yields the lines of the listing.

## Worked solutions

`drillrunner.solutions` holds worked answers to part of the course, written as
plain Python functions and classes:

- `quizzes`
- `hashmaps`
- `errors`
- `basics`
- `iterators`
- `traits`
- `structs`

There are no worked answers for the conversion exercises. The answers only
cover the exercises listed above.
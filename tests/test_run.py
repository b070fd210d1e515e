import subprocess
from unittest.mock import patch

import pytest

from drillrunner.exercise import Exercise, Mode
from drillrunner.run import reset, run
from drillrunner.verify import ExerciseFailed

PENDING = "// I AM NOT DONE\n\n#[test]\nfn it_works() {}\n"
FINISHED = "fn main() {\n}\n"


def _completed(code=0, stdout=b"", stderr=b""):
    return subprocess.CompletedProcess([], code, stdout, stderr)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _exercise(root, name, text, mode):
    path = root / f"{name}.rs"
    path.write_text(text, encoding="utf-8")
    return Exercise(name=name, path=path, mode=mode, hint="")


def test_run_compile_success(workdir, capsys):
    exercise = _exercise(workdir, "compSuccess", FINISHED, Mode.COMPILE)
    with patch("subprocess.run", return_value=_completed(stdout=b"hello there")):
        run(exercise, False)
    out = capsys.readouterr().out
    assert "hello there" in out
    assert f"Successfully ran {exercise}" in out


def test_run_compile_failure(workdir, capsys):
    exercise = _exercise(workdir, "compFailure", FINISHED, Mode.COMPILE)
    with patch("subprocess.run", return_value=_completed(1, stderr=b"expected pattern")):
        with pytest.raises(ExerciseFailed) as info:
            run(exercise, False)
    assert info.value.exercise is exercise
    out = capsys.readouterr().out
    assert "Compilation of" in out
    assert "expected pattern" in out


def test_run_with_runtime_errors(workdir, capsys):
    exercise = _exercise(workdir, "crash", FINISHED, Mode.COMPILE)
    with patch(
        "subprocess.run", side_effect=[_completed(), _completed(101, stderr=b"panicked")]
    ):
        with pytest.raises(ExerciseFailed):
            run(exercise, False)
    out = capsys.readouterr().out
    assert f"Ran {exercise} with errors" in out
    assert "panicked" in out


def test_run_test_with_output(workdir, capsys):
    exercise = _exercise(workdir, "testSuccess", FINISHED, Mode.TEST)
    with patch("subprocess.run", return_value=_completed(stdout=b"THIS TEST TOO SHALL PASS")):
        run(exercise, True)
    assert "THIS TEST TOO SHALL PASS" in capsys.readouterr().out


def test_run_test_without_output(workdir, capsys):
    exercise = _exercise(workdir, "testSuccess", FINISHED, Mode.TEST)
    with patch("subprocess.run", return_value=_completed(stdout=b"THIS TEST TOO SHALL PASS")):
        run(exercise, False)
    assert "THIS TEST TOO SHALL PASS" not in capsys.readouterr().out


def test_run_test_failure(workdir):
    exercise = _exercise(workdir, "testNotPassed", FINISHED, Mode.TEST)
    with patch("subprocess.run", side_effect=[_completed(), _completed(101)]):
        with pytest.raises(ExerciseFailed):
            run(exercise, False)


def test_run_pending_test_exercise_does_not_prompt(workdir, capsys):
    exercise = _exercise(workdir, "pending_test_exercise", PENDING, Mode.TEST)
    with patch("subprocess.run", return_value=_completed()):
        run(exercise, False)
    assert "I AM NOT DONE" not in capsys.readouterr().out


def test_reset_stashes_file(workdir):
    exercise = _exercise(workdir, "intro1", FINISHED, Mode.COMPILE)
    with patch("subprocess.Popen") as popen:
        reset(exercise)
    popen.assert_called_once_with(["git", "stash", "--", str(exercise.path)])


def test_reset_reports_failure(workdir):
    exercise = _exercise(workdir, "intro1", FINISHED, Mode.COMPILE)
    with patch("subprocess.Popen", side_effect=OSError("no git")):
        with pytest.raises(ExerciseFailed) as info:
            reset(exercise)
    assert info.value.exercise is exercise
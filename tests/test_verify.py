import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from drillrunner.exercise import Exercise, Mode, temp_file
from drillrunner.verify import ExerciseFailed, prompt_for_completion, test, verify

PENDING = "// fake_exercise\n\n// I AM NOT DONE\n\nfn main() {\n\n}\n"
FINISHED = "// fake_exercise\n\nfn main() {\n\n}\n"


def _completed(code=0, stdout=b"", stderr=b""):
    return subprocess.CompletedProcess([], code, stdout, stderr)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("NO_EMOJI", raising=False)
    (tmp_path / "exercises" / "clippy").mkdir(parents=True)
    return tmp_path


def _exercise(root: Path, name: str, text: str, mode: Mode) -> Exercise:
    path = root / f"{name}.rs"
    path.write_text(text, encoding="utf-8")
    return Exercise(name=name, path=path, mode=mode, hint="")


def test_verify_empty_shows_progress(workdir, capsys):
    assert verify([], (0, 0)) is None
    assert "Progress: [" in capsys.readouterr().out


def test_verify_done_compile_exercise_passes(workdir, capsys):
    exercise = _exercise(workdir, "done", FINISHED, Mode.COMPILE)
    with patch("subprocess.run", return_value=_completed(stdout=b"out")) as run:
        verify([exercise], (0, 1))
    assert run.call_count == 2
    assert run.call_args_list[0].args[0][0] == "rustc"
    assert run.call_args_list[1].args[0] == [temp_file()]
    assert "1/1" in capsys.readouterr().out


def test_verify_pending_exercise_fails_after_prompt(workdir, capsys):
    exercise = _exercise(workdir, "pending", PENDING, Mode.COMPILE)
    with patch("subprocess.run", return_value=_completed(stdout=b"program output")):
        with pytest.raises(ExerciseFailed) as info:
            verify([exercise], (0, 1))
    assert info.value.exercise is exercise
    out = capsys.readouterr().out
    assert "Successfully ran" in out
    assert "Output:" in out
    assert "program output" in out


def test_verify_stops_at_compile_failure(workdir, capsys):
    first = _exercise(workdir, "first", FINISHED, Mode.COMPILE)
    second = _exercise(workdir, "second", FINISHED, Mode.COMPILE)
    with patch("subprocess.run", return_value=_completed(1, stderr=b"boom")) as run:
        with pytest.raises(ExerciseFailed) as info:
            verify([first, second], (0, 2))
    assert info.value.exercise is first
    assert run.call_count == 1
    out = capsys.readouterr().out
    assert "Compiling of" in out
    assert "boom" in out


def test_verify_failing_tests(workdir, capsys):
    exercise = _exercise(workdir, "tested", FINISHED, Mode.TEST)
    with patch(
        "subprocess.run", side_effect=[_completed(), _completed(101, stdout=b"failures")]
    ) as run:
        with pytest.raises(ExerciseFailed):
            verify([exercise], (0, 1))
    assert run.call_args_list[0].args[0][:2] == ["rustc", "--test"]
    assert run.call_args_list[1].args[0] == [temp_file(), "--show-output"]
    out = capsys.readouterr().out
    assert "Testing of" in out
    assert "failures" in out


def test_verify_clippy_done(workdir):
    exercise = _exercise(workdir, "lint", FINISHED, Mode.CLIPPY)
    with patch("subprocess.run", return_value=_completed()) as run:
        verify([exercise], (0, 1))
    assert [call.args[0][:2] for call in run.call_args_list][-1] == ["cargo", "clippy"]
    manifest = (workdir / "exercises" / "clippy" / "Cargo.toml").read_text()
    assert 'name = "lint"' in manifest


def test_test_does_not_prompt_for_pending(workdir, capsys):
    exercise = _exercise(workdir, "pending_test", PENDING, Mode.TEST)
    with patch("subprocess.run", return_value=_completed(stdout=b"THIS TEST TOO SHALL PASS")):
        test(exercise, False)
    out = capsys.readouterr().out
    assert "I AM NOT DONE" not in out
    assert "THIS TEST TOO SHALL PASS" not in out


def test_test_verbose_shows_output(workdir, capsys):
    exercise = _exercise(workdir, "verbose", FINISHED, Mode.TEST)
    with patch("subprocess.run", return_value=_completed(stdout=b"THIS TEST TOO SHALL PASS")):
        test(exercise, True)
    assert "THIS TEST TOO SHALL PASS" in capsys.readouterr().out


def test_prompt_for_done_exercise(workdir, capsys):
    exercise = _exercise(workdir, "done", FINISHED, Mode.COMPILE)
    assert prompt_for_completion(exercise, "ignored") is True
    assert capsys.readouterr().out == ""


def test_prompt_for_pending_exercise(workdir, capsys):
    exercise = _exercise(workdir, "pending", PENDING, Mode.TEST)
    assert prompt_for_completion(exercise, None) is False
    out = capsys.readouterr().out
    assert "Successfully tested" in out
    assert "The code is compiling, and the tests pass!" in out
    assert " 3 |  // I AM NOT DONE" in out
    assert " 1 |  // fake_exercise" in out
    assert "Output:" not in out


def test_prompt_without_emoji(workdir, capsys, monkeypatch):
    monkeypatch.setenv("NO_EMOJI", "1")
    exercise = _exercise(workdir, "pending", PENDING, Mode.COMPILE)
    assert prompt_for_completion(exercise, "hello") is False
    out = capsys.readouterr().out
    assert "~*~ The code is compiling! ~*~" in out
    assert "====================" in out


def test_exercise_failed_names_path(workdir):
    exercise = _exercise(workdir, "named", FINISHED, Mode.COMPILE)
    assert str(ExerciseFailed(exercise)) == str(exercise.path)
"""Worked answers to the quiz exercises."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

Grade = TypeVar("Grade")


def calculate_price_of_apples(num: int) -> int:
    """Apples cost 2 each, or 1 each when more than 40 are bought."""
    return 2 * num if num < 41 else num


@dataclass(frozen=True)
class Uppercase:
    """Turn the string to upper case."""


@dataclass(frozen=True)
class Trim:
    """Strip whitespace from both ends."""


@dataclass(frozen=True)
class Append:
    """Append "bar" a number of times."""

    count: int


Command = Uppercase | Trim | Append


def transformer(items: list[tuple[str, Command]]) -> list[str]:
    """Apply each command to its string."""
    output = []
    for text, command in items:
        match command:
            case Uppercase():
                output.append(text.upper())
            case Trim():
                output.append(text.strip())
            case Append(count):
                output.append(text + "bar" * count)
            case _:
                raise TypeError(f"unknown command: {command!r}")
    return output


@dataclass
class ReportCard(Generic[Grade]):
    """A report card whose grade may be numeric or alphabetic."""

    grade: Grade
    student_name: str
    student_age: int

    def render(self) -> str:
        return f"{self.student_name} ({self.student_age}) - achieved a grade of {self.grade}"
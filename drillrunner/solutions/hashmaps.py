"""Worked answers to the hash map exercises."""

from __future__ import annotations

import enum
from dataclasses import dataclass

_MAX_GOALS = 255


class Fruit(enum.Enum):
    APPLE = enum.auto()
    BANANA = enum.auto()
    MANGO = enum.auto()
    LYCHEE = enum.auto()
    PINEAPPLE = enum.auto()


def default_fruit_basket() -> dict[str, int]:
    """A basket with at least three kinds and five pieces of fruit."""
    return {"banana": 2, "apples": 2, "oranges": 20, "others": 200}


def fill_fruit_basket(basket: dict[Fruit, int]) -> None:
    """Add bananas and pineapples to the basket."""
    basket[Fruit.BANANA] = 10
    basket[Fruit.PINEAPPLE] = 15


@dataclass
class Team:
    """Goals a team scored and conceded."""

    name: str
    goals_scored: int
    goals_conceded: int


def _parse_goals(text: str) -> int:
    goals = int(text)
    if not 0 <= goals <= _MAX_GOALS:
        raise ValueError(f"goal count out of range: {text!r}")
    return goals


def build_scores_table(results: str) -> dict[str, Team]:
    """Build per-team goal totals from lines of 'team1,team2,goals1,goals2'."""
    scores: dict[str, Team] = {}
    for line in results.splitlines():
        fields = line.split(",")
        team_1, team_2 = fields[0], fields[1]
        score_1, score_2 = _parse_goals(fields[2]), _parse_goals(fields[3])
        for name, scored, conceded in ((team_1, score_1, score_2), (team_2, score_2, score_1)):
            team = scores.setdefault(name, Team(name, 0, 0))
            team.goals_scored += scored
            team.goals_conceded += conceded
    return scores
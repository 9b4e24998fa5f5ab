"""
Trivia Round - Data Models
Enums, dataclasses, and core data structures.
"""

from enum import Enum, auto
from dataclasses import dataclass
from datetime import datetime, timezone


class RoundStatus(Enum):
    IDLE = auto()
    LOADING = auto()
    ACTIVE = auto()
    FINISHED = auto()
    ERROR = auto()


@dataclass(frozen=True)
class Question:
    id: str  # raw question + raw correct answer, stable across re-fetches
    prompt: str
    answers: tuple  # decoded answer strings, shuffled once
    correct_answer: str
    category: str
    difficulty: str

    @property
    def incorrect_answers(self) -> list[str]:
        return [a for a in self.answers if a != self.correct_answer]


@dataclass(frozen=True)
class AnswerRecord:
    selected: str
    correct: bool
    score_delta: int


@dataclass(frozen=True)
class LeaderboardEntry:
    name: str
    score: int
    achieved_at: str  # ISO-8601

    @classmethod
    def create(cls, name: str, score: int) -> "LeaderboardEntry":
        """Build an entry stamped with the current UTC time."""
        now = datetime.now(timezone.utc)
        return cls(name=name, score=score, achieved_at=now.isoformat())

    def to_dict(self) -> dict:
        return {"name": self.name, "score": self.score, "achieved_at": self.achieved_at}

    @classmethod
    def from_dict(cls, data: dict) -> "LeaderboardEntry":
        """
        Parse a stored or remote row. Accepts `achievedAt` as an alias.
        Raises ValueError/TypeError/KeyError on malformed rows.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Leaderboard row is not an object: {data!r}")
        achieved_at = data.get("achieved_at", data.get("achievedAt"))
        if not isinstance(data["name"], str) or not isinstance(achieved_at, str):
            raise ValueError(f"Malformed leaderboard row: {data!r}")
        score = data["score"]
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise ValueError(f"Malformed leaderboard score: {score!r}")
        return cls(name=data["name"], score=int(score), achieved_at=achieved_at)

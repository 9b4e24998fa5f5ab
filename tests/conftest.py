import random

import pytest
import requests

from trivia.db import QuizStorage
from trivia.leaderboard import LeaderboardLedger
from trivia.logic import QuizRound
from trivia.models import LeaderboardEntry
from trivia.player import PlayerProfile
from trivia.preferences import PreferenceStore
from trivia.provider import ProviderError
from trivia.remote import RemoteLeaderboardError


def make_raw_question(n: int, difficulty: str = "easy", incorrect=None) -> dict:
    return {
        "question": f"Question {n} &amp; friends?",
        "correct_answer": f"Right {n}",
        "incorrect_answers": incorrect if incorrect is not None else [
            f"Wrong {n}a", f"Wrong {n}b", f"Wrong {n}c",
        ],
        "category": "General Knowledge",
        "difficulty": difficulty,
    }


class FakeProvider:
    def __init__(self, results=None, error: str = ""):
        self.results = results if results is not None else [make_raw_question(i) for i in range(10)]
        self.error = error
        self.calls = []

    def fetch(self, category, difficulty):
        self.calls.append((category, difficulty))
        if self.error:
            raise ProviderError(self.error)
        return self.results


class FakeRemote:
    def __init__(self):
        self.rows = {"easy": [], "medium": [], "hard": []}
        self.fail_fetch = False
        self.fail_insert = False
        self.inserted = []

    def fetch_top(self, difficulty, limit=10):
        if self.fail_fetch:
            raise RemoteLeaderboardError("fetch failed")
        return sorted(self.rows[difficulty], key=lambda e: e.score, reverse=True)[:limit]

    def insert(self, entry, difficulty):
        if self.fail_insert:
            raise RemoteLeaderboardError("insert failed")
        self.inserted.append((entry, difficulty))
        self.rows[difficulty].append(entry)


class FakeResponse:
    def __init__(self, payload=None, status_code=200, json_error=False):
        self.payload = payload
        self.status_code = status_code
        self.json_error = json_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self.json_error:
            raise ValueError("not json")
        return self.payload


class FakeSession:
    """Stands in for requests.Session; replays queued responses or exceptions."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def _next(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url, **kwargs):
        return self._next("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, **kwargs)


def entry(name: str, score: int) -> LeaderboardEntry:
    return LeaderboardEntry(name=name, score=score, achieved_at="2024-01-01T00:00:00+00:00")


@pytest.fixture()
def storage(tmp_path):
    store = QuizStorage(str(tmp_path / "trivia.db"))
    yield store
    store.close()


@pytest.fixture()
def provider():
    return FakeProvider()


@pytest.fixture()
def remote():
    return FakeRemote()


@pytest.fixture()
def player():
    p = PlayerProfile()
    p.set_name("Alice")
    return p


@pytest.fixture()
def ledger():
    return LeaderboardLedger()


@pytest.fixture()
def quiz_round(provider, player, ledger):
    return QuizRound(provider, player, ledger, PreferenceStore(), rng=random.Random(7))


@pytest.fixture()
def active_round(quiz_round):
    quiz_round.load_questions()
    return quiz_round

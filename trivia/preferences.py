"""
Trivia Round - Preferences
Selected category and difficulty, persisted together as one JSON record.
"""

import json

from trivia.config import (
    DIFFICULTIES, CATEGORY_OPTIONS, DEFAULT_CATEGORY, DEFAULT_DIFFICULTY, PREFERENCES_KEY,
)
from trivia.db import QuizStorage, PersistenceError


CATEGORY_IDS = frozenset(value for _, value in CATEGORY_OPTIONS)


class PreferenceStore:
    def __init__(self, storage: QuizStorage | None = None):
        self._storage = storage
        self.category, self.difficulty = self._load()

    def _load(self) -> tuple[str, str]:
        if self._storage is None:
            return DEFAULT_CATEGORY, DEFAULT_DIFFICULTY
        try:
            raw = self._storage.get(PREFERENCES_KEY)
        except PersistenceError as e:
            print(f"[Prefs] Load error: {e}")
            return DEFAULT_CATEGORY, DEFAULT_DIFFICULTY
        if not raw:
            return DEFAULT_CATEGORY, DEFAULT_DIFFICULTY

        try:
            data = json.loads(raw)
        except ValueError:
            print("[Prefs] Stored preferences unreadable, using defaults")
            return DEFAULT_CATEGORY, DEFAULT_DIFFICULTY
        if not isinstance(data, dict):
            return DEFAULT_CATEGORY, DEFAULT_DIFFICULTY

        category = data.get("category")
        difficulty = data.get("difficulty")
        if not isinstance(category, str) or category not in CATEGORY_IDS:
            category = DEFAULT_CATEGORY
        if difficulty not in DIFFICULTIES:
            difficulty = DEFAULT_DIFFICULTY
        return category, difficulty

    def _persist(self):
        if self._storage is None:
            return
        payload = json.dumps({"category": self.category, "difficulty": self.difficulty})
        try:
            self._storage.set(PREFERENCES_KEY, payload)
        except PersistenceError as e:
            print(f"[Prefs] Save error: {e}")

    def set_category(self, category_id: str):
        if category_id not in CATEGORY_IDS:
            raise ValueError(f"Unknown category: {category_id!r}")
        self.category = category_id
        self._persist()

    def set_difficulty(self, difficulty: str):
        if difficulty not in DIFFICULTIES:
            raise ValueError(f"Unknown difficulty: {difficulty!r}")
        self.difficulty = difficulty
        self._persist()

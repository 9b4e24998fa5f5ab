from trivia.config import PLAYER_NAME_KEY
from trivia.db import QuizStorage, PersistenceError


class PlayerProfile:
    """The active player's name and running score for the current round."""

    def __init__(self, storage: QuizStorage | None = None):
        self._storage = storage
        self.name = self._load_name()
        self.score = 0

    def _load_name(self) -> str:
        if self._storage is None:
            return ""
        try:
            return self._storage.get(PLAYER_NAME_KEY) or ""
        except PersistenceError as e:
            print(f"[Player] Load error: {e}")
            return ""

    def _persist_name(self):
        if self._storage is None:
            return
        try:
            if self.name:
                self._storage.set(PLAYER_NAME_KEY, self.name)
            else:
                self._storage.remove(PLAYER_NAME_KEY)
        except PersistenceError as e:
            print(f"[Player] Save error: {e}")

    def set_name(self, name: str):
        self.name = name
        self._persist_name()

    def clear_name(self):
        self.name = ""
        self._persist_name()

    def reset_score(self):
        self.score = 0

    def add_score(self, delta: int):
        self.score = max(0, self.score + delta)

    @property
    def has_name(self) -> bool:
        return bool(self.name)

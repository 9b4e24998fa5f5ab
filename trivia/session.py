"""
Trivia Round - Session
Builds and owns the storage, player, preferences, leaderboard, and round for one quiz session.
"""

import sqlite3

from trivia.config import DB_PATH, REMOTE_WAIT_ON_SHUTDOWN
from trivia.db import QuizStorage
from trivia.leaderboard import LeaderboardLedger
from trivia.logic import QuizRound
from trivia.player import PlayerProfile
from trivia.preferences import PreferenceStore
from trivia.provider import QuestionProvider
from trivia.remote import RemoteLeaderboard


def open_storage(db_path: str = DB_PATH) -> QuizStorage | None:
    """Open local storage, or return None so the session runs in memory only."""
    try:
        return QuizStorage(db_path)
    except (sqlite3.Error, OSError) as e:
        print(f"[Session] Local storage unavailable ({e}), running in memory")
        return None


class QuizSession:
    def __init__(self, storage: QuizStorage | None = None,
                 provider: QuestionProvider | None = None,
                 remote: RemoteLeaderboard | None = None,
                 rng=None):
        self.storage = storage
        self.preferences = PreferenceStore(storage)
        self.player = PlayerProfile(storage)
        self.leaderboard = LeaderboardLedger(storage, remote)
        self.round = QuizRound(
            provider or QuestionProvider(),
            self.player,
            self.leaderboard,
            self.preferences,
            rng=rng,
        )
        self._shutdown_done = False

    @classmethod
    def from_config(cls) -> "QuizSession":
        """Wire a session from trivia.config and pull the remote leaderboards once."""
        session = cls(storage=open_storage(), remote=RemoteLeaderboard.from_config())
        if session.leaderboard.has_remote:
            session.leaderboard.refresh_from_remote()
        return session

    def start_quiz(self, name: str) -> bool:
        trimmed = name.strip()
        if not trimmed:
            return False
        self.player.set_name(trimmed)
        self.player.reset_score()
        self.round.reset_quiz_progress()
        print(f"[Session] {trimmed} is ready to play")
        return True

    def begin_round(self):
        self.round.load_questions()

    def update(self, dt: float):
        self.round.update(dt)

    def shutdown(self):
        if self._shutdown_done:
            return
        self._shutdown_done = True
        print("[Session] Shutting down...")
        self.round.reset_quiz_progress()
        if not self.leaderboard.wait_for_remote(REMOTE_WAIT_ON_SHUTDOWN):
            print("[Session] Remote leaderboard push still running, leaving it behind")
        if self.storage is not None:
            self.storage.close()

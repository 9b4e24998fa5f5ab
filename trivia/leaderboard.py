"""
Trivia Round - Leaderboard Ledger
Top-10 lists per difficulty, persisted locally and reconciled with an optional remote mirror.

The local map is authoritative for the session. Remote pushes run on a daemon
thread; when one succeeds the remote view replaces the local map wholesale.
"""

import json
import threading
import time

from trivia.config import DIFFICULTIES, LEADERBOARD_SIZE, LEADERBOARD_KEY
from trivia.db import QuizStorage, PersistenceError
from trivia.models import LeaderboardEntry
from trivia.remote import RemoteLeaderboard, RemoteLeaderboardError


def empty_leaderboards() -> dict[str, list[LeaderboardEntry]]:
    return {tier: [] for tier in DIFFICULTIES}


def rank_entries(entries: list[LeaderboardEntry]) -> list[LeaderboardEntry]:
    # sorted() is stable, so equal scores keep insertion order
    return sorted(entries, key=lambda e: e.score, reverse=True)[:LEADERBOARD_SIZE]


def _parse_bucket(rows) -> list[LeaderboardEntry]:
    if not isinstance(rows, list):
        return []
    entries = []
    for row in rows:
        try:
            entries.append(LeaderboardEntry.from_dict(row))
        except (ValueError, TypeError, KeyError, AttributeError):
            continue
    return rank_entries(entries)


class LeaderboardLedger:
    def __init__(self, storage: QuizStorage | None = None,
                 remote: RemoteLeaderboard | None = None):
        self._storage = storage
        self._remote = remote
        self._lock = threading.Lock()
        self._workers: list[threading.Thread] = []
        self._leaderboards = self._load()

    # ------------------------------------------
    # LOCAL PERSISTENCE
    # ------------------------------------------
    def _load(self) -> dict[str, list[LeaderboardEntry]]:
        if self._storage is None:
            return empty_leaderboards()
        try:
            raw = self._storage.get(LEADERBOARD_KEY)
        except PersistenceError as e:
            print(f"[Leaderboard] Load error: {e}")
            return empty_leaderboards()
        if not raw:
            return empty_leaderboards()

        try:
            data = json.loads(raw)
        except ValueError:
            print("[Leaderboard] Stored leaderboards unreadable, starting empty")
            return empty_leaderboards()
        if not isinstance(data, dict):
            return empty_leaderboards()

        return {tier: _parse_bucket(data.get(tier)) for tier in DIFFICULTIES}

    def _persist(self):
        if self._storage is None:
            return
        # Snapshot and write under one lock: writes land in snapshot order
        with self._lock:
            payload = json.dumps({
                tier: [e.to_dict() for e in entries]
                for tier, entries in self._leaderboards.items()
            })
            try:
                self._storage.set(LEADERBOARD_KEY, payload)
            except PersistenceError as e:
                print(f"[Leaderboard] Save error: {e}")

    # ------------------------------------------
    # LOCAL UPDATES
    # ------------------------------------------
    def apply_local_entry(self, entry: LeaderboardEntry, difficulty: str):
        if difficulty not in DIFFICULTIES:
            raise ValueError(f"Unknown difficulty: {difficulty!r}")
        with self._lock:
            bucket = self._leaderboards[difficulty]
            self._leaderboards[difficulty] = rank_entries([*bucket, entry])
        print(f"[Leaderboard] {entry.name} scored {entry.score} ({difficulty})")
        self._persist()

    def get_top(self, difficulty: str) -> list[LeaderboardEntry]:
        with self._lock:
            return list(self._leaderboards[difficulty])

    @property
    def leaderboards(self) -> dict[str, list[LeaderboardEntry]]:
        with self._lock:
            return {tier: list(entries) for tier, entries in self._leaderboards.items()}

    @property
    def has_remote(self) -> bool:
        return self._remote is not None

    # ------------------------------------------
    # REMOTE RECONCILIATION
    # ------------------------------------------
    def sync_from_remote(self):
        """
        Replace the local map with the remote top lists.
        Raises RemoteLeaderboardError if any tier cannot be fetched.
        """
        if self._remote is None:
            return
        fetched = empty_leaderboards()
        for tier in DIFFICULTIES:
            fetched[tier] = rank_entries(self._remote.fetch_top(tier))
        with self._lock:
            self._leaderboards = fetched
        self._persist()
        print("[Remote] Leaderboards synced")

    def refresh_from_remote(self):
        try:
            self.sync_from_remote()
        except RemoteLeaderboardError as e:
            print(f"[Remote] Sync error: {e}")

    def push_entry_to_remote(self, entry: LeaderboardEntry, difficulty: str):
        if self._remote is None:
            return
        try:
            self._remote.insert(entry, difficulty)
            self.sync_from_remote()
        except RemoteLeaderboardError as e:
            print(f"[Remote] Push error: {e}")

    def push_entry_in_background(self, entry: LeaderboardEntry, difficulty: str):
        if self._remote is None:
            return
        self._workers = [w for w in self._workers if w.is_alive()]
        worker = threading.Thread(
            target=self.push_entry_to_remote, args=(entry, difficulty), daemon=True,
        )
        self._workers.append(worker)
        worker.start()

    def wait_for_remote(self, timeout: float | None = None) -> bool:
        """
        Join every pending remote push, sharing one timeout between them.
        Returns True when nothing is left running.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        for worker in list(self._workers):
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            worker.join(remaining)
        self._workers = [w for w in self._workers if w.is_alive()]
        return not self._workers

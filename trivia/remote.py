"""
Trivia Round - Remote Leaderboard
Optional mirror of the leaderboards in a Supabase table, spoken to over its REST API.
"""

import requests

from trivia.config import (
    SUPABASE_URL, SUPABASE_ANON_KEY, LEADERBOARD_TABLE,
    REMOTE_REQUEST_TIMEOUT, LEADERBOARD_SIZE,
)
from trivia.models import LeaderboardEntry


class RemoteLeaderboardError(Exception):
    """Any failure talking to the remote leaderboard."""


class RemoteLeaderboard:
    def __init__(self, base_url: str, api_key: str, table: str = LEADERBOARD_TABLE,
                 session: requests.Session | None = None,
                 timeout: float = REMOTE_REQUEST_TIMEOUT):
        self._endpoint = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        self._session = session or requests.Session()
        self._timeout = timeout

    @classmethod
    def from_config(cls, base_url: str = SUPABASE_URL, api_key: str = SUPABASE_ANON_KEY,
                    table: str = LEADERBOARD_TABLE):
        """Returns None when the mirror is not configured."""
        if not base_url or not api_key:
            return None
        return cls(base_url, api_key, table)

    def fetch_top(self, difficulty: str, limit: int = LEADERBOARD_SIZE) -> list[LeaderboardEntry]:
        params = {
            "select": "name,score,achieved_at",
            "difficulty": f"eq.{difficulty}",
            "order": "score.desc",
            "limit": limit,
        }
        try:
            resp = self._session.get(
                self._endpoint, params=params, headers=self._headers, timeout=self._timeout,
            )
            resp.raise_for_status()
            rows = resp.json()
            if not isinstance(rows, list):
                raise ValueError(f"expected a list of rows, got {type(rows).__name__}")
            return [LeaderboardEntry.from_dict(row) for row in rows]
        except (requests.RequestException, ValueError, TypeError, KeyError,
                AttributeError) as e:
            raise RemoteLeaderboardError(f"fetch of {difficulty} leaderboard failed: {e}") from e

    def insert(self, entry: LeaderboardEntry, difficulty: str):
        payload = {**entry.to_dict(), "difficulty": difficulty}
        try:
            resp = self._session.post(
                self._endpoint, json=payload, headers=self._headers, timeout=self._timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise RemoteLeaderboardError(f"insert into {difficulty} leaderboard failed: {e}") from e

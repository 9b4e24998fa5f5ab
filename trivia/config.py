"""
Trivia Round - Configuration
All tunable constants for a quiz round.
"""

import os
from pathlib import Path as _Path

# ==========================================
# ROUND
# ==========================================
QUESTIONS_PER_ROUND = 10
AUTO_ADVANCE_DELAY = 1.5  # seconds between an answer and the next question

# ==========================================
# SCORING
# ==========================================
CORRECT_ANSWER_POINTS = 3
WRONG_ANSWER_POINTS = -1
DOUBLE_SCORE_MULT = 2

# ==========================================
# POWER-UPS
# ==========================================
FIFTY_FIFTY_LIMIT = 2       # uses per round
FIFTY_FIFTY_HIDDEN = 2      # incorrect answers hidden per use

# ==========================================
# DIFFICULTY & CATEGORIES
# ==========================================
ANY_CATEGORY = "any"

# (label, value) pairs offered to the player. Values are what the setters accept.
DIFFICULTY_OPTIONS = [
    ("Easy", "easy"),
    ("Medium", "medium"),
    ("Hard", "hard"),
]
DIFFICULTIES = tuple(value for _, value in DIFFICULTY_OPTIONS)

# Category values are Open Trivia DB ids.
CATEGORY_OPTIONS = [
    ("All categories", ANY_CATEGORY),
    ("General knowledge", "9"),
    ("Books", "10"),
    ("Film & TV", "11"),
    ("Science & Nature", "17"),
    ("Technology", "18"),
    ("History", "23"),
    ("Sports", "21"),
]

DEFAULT_CATEGORY = ANY_CATEGORY
DEFAULT_DIFFICULTY = "easy"

# ==========================================
# OPEN TRIVIA DB
# ==========================================
OTDB_BASE_URL = "https://opentdb.com/api.php"
OTDB_QUESTION_TYPE = "multiple"
OTDB_REQUEST_TIMEOUT = 10

# ==========================================
# LEADERBOARD
# ==========================================
LEADERBOARD_SIZE = 10
REMOTE_WAIT_ON_SHUTDOWN = 5.0  # seconds to let a pending remote push finish

# Remote mirror (Supabase REST). Leave the URL or key unset to stay local-only.
SUPABASE_URL = os.environ.get("TRIVIA_SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.environ.get("TRIVIA_SUPABASE_ANON_KEY", "")
LEADERBOARD_TABLE = os.environ.get("TRIVIA_LEADERBOARD_TABLE", "leaderboard")
REMOTE_REQUEST_TIMEOUT = 10

# ==========================================
# DATABASE
# ==========================================
_ROOT = _Path(__file__).resolve().parent.parent

DB_PATH = os.environ.get("TRIVIA_DB_PATH", str(_ROOT / "data" / "trivia_data.db"))

PLAYER_NAME_KEY = "player_name"
LEADERBOARD_KEY = "leaderboards"
PREFERENCES_KEY = "preferences"

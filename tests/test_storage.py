import json

import pytest

from trivia.config import (
    PREFERENCES_KEY, PLAYER_NAME_KEY, DIFFICULTIES, CATEGORY_OPTIONS, DIFFICULTY_OPTIONS,
)
from trivia.db import QuizStorage, PersistenceError
from trivia.player import PlayerProfile
from trivia.preferences import PreferenceStore


# ------------------------------------------
# KEY-VALUE STORE
# ------------------------------------------
def test_get_set_remove(storage):
    assert storage.get("missing") is None
    storage.set("k", "v1")
    storage.set("k", "v2")
    assert storage.get("k") == "v2"
    storage.remove("k")
    assert storage.get("k") is None


def test_corrupted_database_is_backed_up(tmp_path):
    path = tmp_path / "trivia.db"
    path.write_bytes(b"this is definitely not sqlite" * 100)

    store = QuizStorage(str(path))
    store.set("k", "v")
    assert store.get("k") == "v"
    assert (tmp_path / "trivia.db.bak").exists()
    store.close()


def test_closed_storage_raises_persistence_error(tmp_path):
    store = QuizStorage(str(tmp_path / "trivia.db"))
    store.close()
    with pytest.raises(PersistenceError):
        store.get("k")
    with pytest.raises(PersistenceError):
        store.set("k", "v")


# ------------------------------------------
# PREFERENCES
# ------------------------------------------
def test_preferences_default_without_storage():
    prefs = PreferenceStore()
    assert (prefs.category, prefs.difficulty) == ("any", "easy")


def test_preferences_persist_together(storage):
    prefs = PreferenceStore(storage)
    prefs.set_category("17")
    prefs.set_difficulty("hard")
    assert json.loads(storage.get(PREFERENCES_KEY)) == {"category": "17", "difficulty": "hard"}

    reloaded = PreferenceStore(storage)
    assert (reloaded.category, reloaded.difficulty) == ("17", "hard")


@pytest.mark.parametrize("stored, expected", [
    ("{broken", ("any", "easy")),
    (json.dumps([1, 2]), ("any", "easy")),
    (json.dumps({"category": 9, "difficulty": "hard"}), ("any", "hard")),
    (json.dumps({"category": "21", "difficulty": "extreme"}), ("21", "easy")),
    (json.dumps({"category": "999", "difficulty": "medium"}), ("any", "medium")),
    (json.dumps({"category": ["9"], "difficulty": "hard"}), ("any", "hard")),
])
def test_preferences_fall_back_on_bad_data(storage, stored, expected):
    storage.set(PREFERENCES_KEY, stored)
    prefs = PreferenceStore(storage)
    assert (prefs.category, prefs.difficulty) == expected


def test_preferences_reject_unknown_difficulty():
    prefs = PreferenceStore()
    with pytest.raises(ValueError):
        prefs.set_difficulty("impossible")
    assert prefs.difficulty == "easy"


def test_preferences_reject_unknown_category(storage):
    prefs = PreferenceStore(storage)
    with pytest.raises(ValueError):
        prefs.set_category("999")
    assert prefs.category == "any"
    assert storage.get(PREFERENCES_KEY) is None


def test_preferences_survive_closed_storage(tmp_path):
    store = QuizStorage(str(tmp_path / "trivia.db"))
    store.close()
    prefs = PreferenceStore(store)
    prefs.set_category("9")
    assert prefs.category == "9"


# ------------------------------------------
# PLAYER
# ------------------------------------------
def test_score_floors_at_zero():
    player = PlayerProfile()
    player.add_score(3)
    player.add_score(-1)
    assert player.score == 2
    player.add_score(-10)
    assert player.score == 0
    player.add_score(6)
    player.reset_score()
    assert player.score == 0


def test_name_is_persisted_and_cleared(storage):
    player = PlayerProfile(storage)
    assert player.name == ""
    player.set_name("Bea")
    assert storage.get(PLAYER_NAME_KEY) == "Bea"
    assert PlayerProfile(storage).name == "Bea"

    player.clear_name()
    assert not player.has_name
    assert storage.get(PLAYER_NAME_KEY) is None
    assert PlayerProfile(storage).name == ""


def test_player_survives_closed_storage(tmp_path):
    store = QuizStorage(str(tmp_path / "trivia.db"))
    store.close()
    player = PlayerProfile(store)
    player.set_name("Cy")
    assert player.name == "Cy"


def test_option_lists_match_accepted_values():
    assert [value for _, value in DIFFICULTY_OPTIONS] == list(DIFFICULTIES)
    assert CATEGORY_OPTIONS[0] == ("All categories", "any")
    prefs = PreferenceStore()
    for _, value in CATEGORY_OPTIONS:
        prefs.set_category(value)
        assert prefs.category == value

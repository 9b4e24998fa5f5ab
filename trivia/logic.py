"""
Trivia Round - Round Logic
State machine, question loading, scoring, power-ups, and round completion.
"""

import queue
import random
import threading

from trivia.config import (
    AUTO_ADVANCE_DELAY,
    CORRECT_ANSWER_POINTS, WRONG_ANSWER_POINTS, DOUBLE_SCORE_MULT,
    FIFTY_FIFTY_LIMIT, FIFTY_FIFTY_HIDDEN, DIFFICULTIES,
)
from trivia.models import RoundStatus, Question, AnswerRecord, LeaderboardEntry
from trivia.leaderboard import LeaderboardLedger
from trivia.player import PlayerProfile
from trivia.preferences import PreferenceStore
from trivia.provider import (
    QuestionProvider, ProviderError, normalize_question,
    GENERIC_FAILURE_MESSAGE, NO_RESULTS_MESSAGE, INVALID_PARAMS_MESSAGE,
)
from trivia.timer import CallbackTimer
from trivia.utils import shuffle


class QuizRound:
    def __init__(self, provider: QuestionProvider, player: PlayerProfile,
                 leaderboard: LeaderboardLedger,
                 preferences: PreferenceStore | None = None,
                 rng: random.Random | None = None):
        self.provider = provider
        self.player = player
        self.leaderboard = leaderboard
        self.preferences = preferences or PreferenceStore()
        self._rng = rng

        self._auto_advance = CallbackTimer()

        # Background loads report back through this queue; update() applies them
        self._load_results: queue.Queue = queue.Queue()
        self._load_generation = 0
        self._loader: threading.Thread | None = None

        self._clear_round()

    def _clear_round(self):
        self._auto_advance.cancel()
        self.questions: list[Question] = []
        self.answers: dict[int, AnswerRecord] = {}
        self.current_index = 0
        self.status = RoundStatus.IDLE
        self.error_message = ""
        self.difficulty = self.preferences.difficulty

        # Power-ups
        self.fifty_fifty_uses = 0
        self.fifty_fifty_map: dict[int, tuple[str, ...]] = {}
        self.double_score_armed = False
        self.double_score_used = False

    # ------------------------------------------
    # QUESTION LOADING
    # ------------------------------------------
    def _begin_load(self, category: str | None, difficulty: str | None) -> tuple[int, str, str] | None:
        """Returns None when the filters are rejected and the round is already in ERROR."""
        self._load_generation += 1
        self._clear_round()
        category = category if category is not None else self.preferences.category
        difficulty = difficulty if difficulty is not None else self.preferences.difficulty
        self.status = RoundStatus.LOADING
        if difficulty not in DIFFICULTIES:
            print(f"[Round] Unknown difficulty: {difficulty!r}")
            self._fail(INVALID_PARAMS_MESSAGE)
            return None
        self.difficulty = difficulty
        return self._load_generation, category, difficulty

    def load_questions(self, category: str | None = None, difficulty: str | None = None):
        """Fetch a fresh round and block until it is active or failed."""
        load = self._begin_load(category, difficulty)
        if load is None:
            return
        generation, category, difficulty = load
        raw, error = self._fetch_round(category, difficulty)
        self._finish_load(generation, raw, error)

    def start_loading(self, category: str | None = None, difficulty: str | None = None):
        """Fetch a fresh round on a worker thread. update() applies the result."""
        load = self._begin_load(category, difficulty)
        if load is None:
            return
        generation, category, difficulty = load
        self._loader = threading.Thread(
            target=self._load_worker, args=(generation, category, difficulty), daemon=True,
        )
        self._loader.start()

    def wait_for_load(self, timeout: float | None = None) -> bool:
        """Join the latest background load. Its result still needs an update() to land."""
        loader = self._loader
        if loader is None:
            return True
        loader.join(timeout)
        return not loader.is_alive()

    def _load_worker(self, generation: int, category: str, difficulty: str):
        raw, error = self._fetch_round(category, difficulty)
        self._load_results.put((generation, raw, error))

    def _fetch_round(self, category: str, difficulty: str):
        try:
            return self.provider.fetch(category, difficulty), ""
        except ProviderError as e:
            return None, str(e) or GENERIC_FAILURE_MESSAGE

    def _finish_load(self, generation: int, raw, error: str):
        if generation != self._load_generation or self.status != RoundStatus.LOADING:
            print(f"[Round] Dropping stale load #{generation}")
            return
        if error:
            self._fail(error)
            return
        try:
            questions = [normalize_question(item, self._rng) for item in raw]
        except (KeyError, TypeError) as e:
            print(f"[Round] Malformed question record: {e}")
            self._fail(GENERIC_FAILURE_MESSAGE)
            return
        if not questions:
            self._fail(NO_RESULTS_MESSAGE)
            return

        self.questions = questions
        self.current_index = 0
        self.status = RoundStatus.ACTIVE
        print(f"[Round] Round ready: {len(questions)} questions ({self.difficulty})")

    def _fail(self, message: str):
        self.status = RoundStatus.ERROR
        self.error_message = message
        print(f"[Round] Load failed: {message}")

    # ------------------------------------------
    # ANSWERS & PROGRESSION
    # ------------------------------------------
    def submit_answer(self, answer: str):
        if self.status != RoundStatus.ACTIVE:
            return
        if self.current_answer is not None:
            return
        question = self.current_question
        if question is None:
            return

        is_correct = answer == question.correct_answer
        delta = CORRECT_ANSWER_POINTS if is_correct else WRONG_ANSWER_POINTS
        if self.double_score_armed:
            delta *= DOUBLE_SCORE_MULT
            self.double_score_armed = False
            self.double_score_used = True

        self.answers[self.current_index] = AnswerRecord(
            selected=answer, correct=is_correct, score_delta=delta,
        )
        self.player.add_score(delta)
        self._auto_advance.schedule(AUTO_ADVANCE_DELAY, self.go_to_next_question)

    def go_to_next_question(self):
        self._auto_advance.cancel()
        if self.current_answer is None:
            return
        if self.is_last_question:
            self.finish_round()
        else:
            self.current_index += 1

    def finish_round(self):
        if self.status == RoundStatus.FINISHED:
            return
        self.status = RoundStatus.FINISHED
        self._auto_advance.cancel()
        print(f"[Round] Finished with {self.correct_count}/{self.total_questions} correct")

        if not self.player.has_name:
            return

        entry = LeaderboardEntry.create(self.player.name, self.player.score)
        self.leaderboard.apply_local_entry(entry, self.difficulty)
        self.leaderboard.push_entry_in_background(entry, self.difficulty)

    def reset_quiz_progress(self):
        # Bumping the generation makes any in-flight background load stale
        self._load_generation += 1
        self._clear_round()

    # ------------------------------------------
    # POWER-UPS
    # ------------------------------------------
    def use_fifty_fifty(self):
        if self.status != RoundStatus.ACTIVE:
            return
        if self.fifty_fifty_uses >= FIFTY_FIFTY_LIMIT:
            return
        if self.current_index in self.fifty_fifty_map:
            return
        question = self.current_question
        if question is None:
            return

        incorrect = question.incorrect_answers
        if len(incorrect) < FIFTY_FIFTY_HIDDEN:
            return

        hidden = shuffle(incorrect, self._rng)[:FIFTY_FIFTY_HIDDEN]
        self.fifty_fifty_map[self.current_index] = tuple(hidden)
        self.fifty_fifty_uses += 1

    def arm_double_score(self):
        if self.status != RoundStatus.ACTIVE:
            return
        if not self.can_use_double_score:
            return
        self.double_score_armed = True

    # ------------------------------------------
    # TICK
    # ------------------------------------------
    def update(self, dt: float):
        while True:
            try:
                generation, raw, error = self._load_results.get_nowait()
            except queue.Empty:
                break
            self._finish_load(generation, raw, error)
        self._auto_advance.tick(dt)

    # ------------------------------------------
    # ACCESSORS
    # ------------------------------------------
    @property
    def current_question(self) -> Question | None:
        if 0 <= self.current_index < len(self.questions):
            return self.questions[self.current_index]
        return None

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def current_answer(self) -> AnswerRecord | None:
        return self.answers.get(self.current_index)

    @property
    def current_hidden_answers(self) -> tuple[str, ...]:
        return self.fifty_fifty_map.get(self.current_index, ())

    @property
    def fifty_fifty_remaining(self) -> int:
        return max(0, FIFTY_FIFTY_LIMIT - self.fifty_fifty_uses)

    @property
    def can_use_double_score(self) -> bool:
        return not self.double_score_used and not self.double_score_armed

    @property
    def is_last_question(self) -> bool:
        return self.current_index >= len(self.questions) - 1

    @property
    def correct_count(self) -> int:
        return sum(1 for record in self.answers.values() if record.correct)

    @property
    def auto_advance_pending(self) -> bool:
        return self._auto_advance.pending

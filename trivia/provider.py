"""
Trivia Round - Question Provider
Fetches question batches from Open Trivia DB and normalizes them into Questions.
"""

import random

import requests

from trivia.config import (
    OTDB_BASE_URL, OTDB_QUESTION_TYPE, OTDB_REQUEST_TIMEOUT,
    QUESTIONS_PER_ROUND, ANY_CATEGORY,
)
from trivia.models import Question
from trivia.utils import shuffle, decode_text


NO_RESULTS_MESSAGE = "No questions found for these filters."
GENERIC_FAILURE_MESSAGE = "Unable to load questions. Please try again."
INVALID_PARAMS_MESSAGE = "Invalid quiz parameters."

# Open Trivia DB response codes other than 0 (success)
_RESPONSE_CODE_MESSAGES = {
    1: NO_RESULTS_MESSAGE,
    2: INVALID_PARAMS_MESSAGE,
    5: "Too many requests. Please wait a moment and try again.",
}

_REQUIRED_KEYS = ("question", "correct_answer", "incorrect_answers", "category", "difficulty")


class ProviderError(Exception):
    """The question source failed, returned nothing, or returned garbage."""


def normalize_question(raw: dict, rng: random.Random | None = None) -> Question:
    # Identity uses the raw (still encoded) text so identical fetches collide
    question_id = f"{raw['question']}-{raw['correct_answer']}"
    answers = shuffle([raw["correct_answer"], *raw["incorrect_answers"]], rng)
    return Question(
        id=question_id,
        prompt=decode_text(raw["question"]),
        answers=tuple(decode_text(a) for a in answers),
        correct_answer=decode_text(raw["correct_answer"]),
        category=raw["category"],
        difficulty=raw["difficulty"],
    )


def _is_valid_record(item) -> bool:
    if not isinstance(item, dict):
        return False
    if any(key not in item for key in _REQUIRED_KEYS):
        return False
    return isinstance(item["incorrect_answers"], list)


class QuestionProvider:
    def __init__(self, base_url: str = OTDB_BASE_URL,
                 session: requests.Session | None = None,
                 timeout: float = OTDB_REQUEST_TIMEOUT):
        self._base_url = base_url
        self._session = session or requests.Session()
        self._timeout = timeout

    def build_params(self, category: str, difficulty: str) -> dict:
        params = {"amount": QUESTIONS_PER_ROUND, "type": OTDB_QUESTION_TYPE}
        if category and category != ANY_CATEGORY:
            params["category"] = category
        params["difficulty"] = difficulty
        return params

    def fetch(self, category: str, difficulty: str) -> list[dict]:
        """
        Request one round of raw question records.
        Raises ProviderError on network failure, bad payloads, or empty results.
        """
        params = self.build_params(category, difficulty)
        try:
            resp = self._session.get(self._base_url, params=params, timeout=self._timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            print(f"[OTDB] Fetch error: {e}")
            raise ProviderError(GENERIC_FAILURE_MESSAGE) from e

        if not isinstance(data, dict):
            raise ProviderError(GENERIC_FAILURE_MESSAGE)

        code = data.get("response_code", 0)
        if code in _RESPONSE_CODE_MESSAGES:
            print(f"[OTDB] Response code {code} for {params}")
            raise ProviderError(_RESPONSE_CODE_MESSAGES[code])

        results = data.get("results")
        if not isinstance(results, list) or not results:
            raise ProviderError(NO_RESULTS_MESSAGE)
        if not all(_is_valid_record(item) for item in results):
            raise ProviderError(GENERIC_FAILURE_MESSAGE)

        print(f"[OTDB] Fetched {len(results)} questions ({difficulty}, category={category})")
        return results

from __future__ import annotations

import logging
from typing import List, Optional, Set

from db.store import (
    CHAPTER_PREFIX,
    FLASHCARD_HISTORY_KEY,
    PLANS_KEY,
    QUIZ_HISTORY_KEY,
    Store,
    load_list,
    load_one,
)
from models.plan import LearningPlan
from models.quiz import FlashcardAttempt, QuizAttempt
from models.word import Chapter, LastResult, Word

logger = logging.getLogger(__name__)

DEFAULT_POOL_THRESHOLD = 50
DEFAULT_SLOW_ATTEMPT_MS = 15000


class _Pool:
    """Ordered word pool that keeps the first record seen for each id."""

    def __init__(self) -> None:
        self.words: List[Word] = []
        self.ids: Set[str] = set()

    def add(self, word: Word) -> bool:
        if word.id in self.ids:
            return False
        self.ids.add(word.id)
        self.words.append(word)
        return True

    def __len__(self) -> int:
        return len(self.words)


class WeakWordCollector:
    """Aggregates review candidates from the history logs, plans and chapters.

    Sources are read in a fixed priority order; the first source to mention a
    word id decides the review metadata attached to it:

    1. flashcard attempts that were incorrect, skipped or slow
    2. quiz attempts that were incorrect or slow
    3. unknown words recorded on learning plan sets
    4. every not-known chapter word, only while the pool is below the threshold
    """

    def __init__(
        self,
        store: Store,
        pool_threshold: int = DEFAULT_POOL_THRESHOLD,
        slow_attempt_ms: int = DEFAULT_SLOW_ATTEMPT_MS,
    ):
        self.store = store
        self.pool_threshold = pool_threshold
        self.slow_attempt_ms = slow_attempt_ms

    def collect(self) -> List[Word]:
        pool = _Pool()
        self._from_flashcards(pool)
        self._from_quizzes(pool)
        self._from_plans(pool)
        if len(pool) < self.pool_threshold:
            self._from_chapters(pool)
        logger.info("Collected %d weak words", len(pool))
        return pool.words

    def _is_slow(self, time_taken: Optional[int]) -> bool:
        return time_taken is not None and time_taken >= self.slow_attempt_ms

    def _from_flashcards(self, pool: _Pool) -> None:
        for attempt in load_list(self.store, FLASHCARD_HISTORY_KEY, FlashcardAttempt):
            if attempt.word.is_known:
                continue
            weak = attempt.result in (LastResult.INCORRECT, LastResult.SKIPPED)
            if not (weak or self._is_slow(attempt.time_taken)):
                continue
            pool.add(
                attempt.word.model_copy(
                    update={
                        "id": attempt.word_id,
                        "last_attempt_date": attempt.date,
                        "last_result": attempt.result,
                        "time_taken": attempt.time_taken,
                    }
                )
            )

    def _from_quizzes(self, pool: _Pool) -> None:
        for attempt in load_list(self.store, QUIZ_HISTORY_KEY, QuizAttempt):
            if attempt.word.is_known:
                continue
            if attempt.correct and not self._is_slow(attempt.time_taken):
                continue
            pool.add(
                attempt.word.model_copy(
                    update={
                        "id": attempt.word_id,
                        "last_attempt_date": attempt.date,
                        "last_result": LastResult.CORRECT if attempt.correct else LastResult.INCORRECT,
                        "time_taken": attempt.time_taken,
                    }
                )
            )

    def _from_plans(self, pool: _Pool) -> None:
        for plan in load_list(self.store, PLANS_KEY, LearningPlan):
            for plan_set in plan.sets:
                if not plan_set.unknown_word_ids:
                    continue
                unknown = set(plan_set.unknown_word_ids)
                for word in plan_set.words:
                    if word.is_known or word.id not in unknown:
                        continue
                    pool.add(word.model_copy(update={"last_result": LastResult.INCORRECT}))

    def _from_chapters(self, pool: _Pool) -> None:
        for key in self.store.keys(CHAPTER_PREFIX):
            chapter = load_one(self.store, key, Chapter)
            if chapter is None:
                continue
            for word in chapter.words:
                if word.is_known:
                    continue
                pool.add(word)

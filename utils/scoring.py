from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from db.store import Store
from models.quiz import QuizAnswer, QuizAttempt, QuizScore, RawQuizResult, SavedQuizResult
from models.session import RevisionSession, SessionResults
from utils.bookmarks import group_label, plan_title_for, upsert_bookmarks
from utils.clock import Clock, iso_now, utc_now
from utils.errors import PlanNotFound
from utils.history import replace_quiz_attempts, upsert_saved_result
from utils.plans import PlanProgressionEngine
from utils.progress import percent
from utils.sessions import save_session

logger = logging.getLogger(__name__)


def quiz_score(correct: int, incorrect: int) -> int:
    """Percentage of answered questions that were correct; skips don't count."""
    return percent(correct, correct + incorrect)


def _latest_per_word(raw_results: Iterable[RawQuizResult]) -> List[RawQuizResult]:
    latest: Dict[str, RawQuizResult] = {}
    for raw in raw_results:
        latest[raw.word_id] = raw
    return list(latest.values())


def evaluate(session: RevisionSession, raw_results: Sequence[RawQuizResult]) -> Tuple[QuizScore, SessionResults]:
    """Grade raw results against the session's words without touching the store.

    A selection is correct when the chosen option id equals the word's id.
    Results for words that are not in the session are ignored.
    """
    definitions = {word.id: word.definition for word in session.words}
    results = SessionResults()
    answers: List[QuizAnswer] = []
    for raw in _latest_per_word(raw_results):
        word = session.find_word(raw.word_id)
        if word is None:
            logger.warning("Ignoring result for %s: not in session %s", raw.word_id, session.id)
            continue
        if raw.skipped:
            results.skipped.append(word.id)
            answers.append(
                QuizAnswer(
                    word_id=word.id,
                    word=word,
                    correct_answer=word.definition,
                    is_correct=False,
                    skipped=True,
                )
            )
            continue
        is_correct = raw.selected_option_id == word.id
        (results.correct if is_correct else results.incorrect).append(word.id)
        text = raw.selected_option_text or definitions.get(raw.selected_option_id, "")
        answers.append(
            QuizAnswer(
                word_id=word.id,
                word=word,
                selected_answer=raw.selected_option_id,
                selected_answer_text=text,
                correct_answer=word.definition,
                is_correct=is_correct,
            )
        )
    score = quiz_score(len(results.correct), len(results.incorrect))
    return QuizScore(score=score, answers=answers), results


class QuizScorer:
    """Scores a submitted quiz and applies its side effects.

    Side effects are keyed by session (and plan set, when plan-backed) so a
    resubmission replaces the earlier outcome instead of adding to it.
    """

    def __init__(self, store: Store, plans: PlanProgressionEngine, clock: Clock = utc_now):
        self.store = store
        self.plans = plans
        self.clock = clock

    def score(
        self,
        session: RevisionSession,
        raw_results: Sequence[RawQuizResult],
        bookmarked_ids: Optional[Sequence[str]] = None,
    ) -> QuizScore:
        outcome, results = evaluate(session, raw_results)
        session_ids = {word.id for word in session.words}
        if bookmarked_ids is None:
            bookmarked_ids = [word.id for word in session.words if word.is_bookmarked]
        results.bookmarked = [word_id for word_id in dict.fromkeys(bookmarked_ids) if word_id in session_ids]
        now = iso_now(self.clock)
        times = {raw.word_id: raw.time_taken or 0 for raw in raw_results}

        session.completed = True
        session.score = outcome.score
        session.results = results

        with self.store.batch():
            save_session(self.store, session)
            replace_quiz_attempts(
                self.store,
                session.id,
                [
                    QuizAttempt(
                        word_id=answer.word_id,
                        word=answer.word,
                        correct=answer.is_correct,
                        date=now,
                        time_taken=times.get(answer.word_id, 0),
                        source=session.source,
                        session_id=session.id,
                    )
                    for answer in outcome.answers
                    if not answer.skipped
                ],
            )
            if results.bookmarked:
                plan_title = plan_title_for(self.store, session)
                upsert_bookmarks(
                    self.store,
                    [
                        (word, group_label(word, session, plan_title))
                        for word in session.words
                        if word.id in results.bookmarked
                    ],
                )
            if session.learning_plan is not None:
                self._apply_to_plan(session, outcome, results, now)

        logger.info(
            "Scored session %s: %d%% (%d correct, %d incorrect, %d skipped)",
            session.id,
            outcome.score,
            len(results.correct),
            len(results.incorrect),
            len(results.skipped),
        )
        return outcome

    def _apply_to_plan(
        self,
        session: RevisionSession,
        outcome: QuizScore,
        results: SessionResults,
        completed_at: str,
    ) -> None:
        ref = session.learning_plan
        try:
            self.plans.record_quiz_completion(
                ref.plan_id,
                ref.set_index,
                results.correct,
                results.incorrect + results.skipped,
            )
        except PlanNotFound:
            logger.warning("Plan %s no longer exists; quiz result kept on session %s", ref.plan_id, session.id)
            return
        upsert_saved_result(
            self.store,
            SavedQuizResult(
                session_id=session.id,
                plan_id=ref.plan_id,
                set_index=ref.set_index,
                score=outcome.score,
                answers=outcome.answers,
                bookmarked_word_ids=results.bookmarked,
                completed_at=completed_at,
                source=session.source,
            ),
        )

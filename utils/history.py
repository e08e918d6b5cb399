from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from db.store import (
    FLASHCARD_HISTORY_KEY,
    QUIZ_HISTORY_KEY,
    SAVED_RESULTS_KEY,
    Store,
    load_list,
    save_list,
)
from models.quiz import (
    FlashcardAttempt,
    FlashcardOutcome,
    QuizAttempt,
    SavedQuizResult,
)
from models.word import LastResult, Word


def replace_quiz_attempts(store: Store, session_id: str, attempts: Sequence[QuizAttempt]) -> None:
    """Append quiz attempt rows, dropping rows an earlier submission of the session wrote."""
    history = [row for row in load_list(store, QUIZ_HISTORY_KEY, QuizAttempt) if row.session_id != session_id]
    history.extend(attempts)
    save_list(store, QUIZ_HISTORY_KEY, history)


def replace_flashcard_attempts(
    store: Store,
    session_id: Optional[str],
    attempts: Sequence[FlashcardAttempt],
    plan_id: Optional[str] = None,
    set_index: Optional[int] = None,
) -> None:
    """Append flashcard rows, replacing earlier rows of the same session.

    Without a session id, rows of the same plan set are replaced instead.
    """
    history = load_list(store, FLASHCARD_HISTORY_KEY, FlashcardAttempt)
    if session_id:
        history = [row for row in history if row.session_id != session_id]
    elif plan_id is not None:
        history = [row for row in history if not (row.plan_id == plan_id and row.set_index == set_index)]
    history.extend(attempts)
    save_list(store, FLASHCARD_HISTORY_KEY, history)


def flashcard_attempts(
    words: Iterable[Word],
    outcomes: Iterable[FlashcardOutcome],
    date: str,
    session_id: Optional[str] = None,
    plan_id: Optional[str] = None,
    set_index: Optional[int] = None,
) -> List[FlashcardAttempt]:
    by_id = {word.id: word for word in words}
    attempts: List[FlashcardAttempt] = []
    for outcome in outcomes:
        word = by_id.get(outcome.word_id)
        if word is None:
            continue
        attempts.append(
            FlashcardAttempt(
                word_id=word.id,
                word=word,
                result=outcome.result,
                date=date,
                time_taken=outcome.time_taken or 0,
                session_id=session_id,
                plan_id=plan_id,
                set_index=set_index,
            )
        )
    return attempts


def partition_outcomes(
    words: Iterable[Word],
    outcomes: Iterable[FlashcardOutcome],
) -> Tuple[List[str], List[str]]:
    """Split flashcard outcomes into known and unknown word ids.

    Only ids present in ``words`` are kept; a later outcome for the same word
    replaces an earlier one.
    """
    valid_ids = [word.id for word in words]
    latest = {}
    for outcome in outcomes:
        if outcome.word_id in valid_ids:
            latest[outcome.word_id] = outcome.result
    known = [word_id for word_id in valid_ids if latest.get(word_id) == LastResult.CORRECT]
    unknown = [
        word_id
        for word_id in valid_ids
        if latest.get(word_id) in (LastResult.INCORRECT, LastResult.SKIPPED)
    ]
    return known, unknown


def upsert_saved_result(store: Store, result: SavedQuizResult) -> None:
    """Keep exactly one saved result per (plan id, set index)."""
    saved = [
        row
        for row in load_list(store, SAVED_RESULTS_KEY, SavedQuizResult)
        if not (row.plan_id == result.plan_id and row.set_index == result.set_index)
    ]
    saved.append(result)
    save_list(store, SAVED_RESULTS_KEY, saved)


def get_saved_result(store: Store, plan_id: str, set_index: int) -> Optional[SavedQuizResult]:
    for row in load_list(store, SAVED_RESULTS_KEY, SavedQuizResult):
        if row.plan_id == plan_id and row.set_index == set_index:
            return row
    return None

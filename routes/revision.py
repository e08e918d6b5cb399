from typing import List

from fastapi import APIRouter, Depends, HTTPException

from config import load_config
from db.database import get_store
from models.quiz import FlashcardSummary
from models.session import RevisionSession, SessionSource
from models.word import Word
from utils.bookmarks import toggle_session_bookmark
from utils.challenging import ChallengingWordsRegenerator
from utils.clock import iso_now
from utils.errors import RevisionError, status_for
from utils.history import flashcard_attempts, replace_flashcard_attempts
from utils.plans import PlanProgressionEngine
from utils.sessions import SessionBuilder, get_session
from utils.weak_words import WeakWordCollector

router = APIRouter()


def get_builder(store=Depends(get_store)) -> SessionBuilder:
    config = load_config()
    return SessionBuilder(store, cap=config["revision"]["session_cap"])


def get_collector(store=Depends(get_store)) -> WeakWordCollector:
    config = load_config()
    return WeakWordCollector(
        store,
        pool_threshold=config["revision"]["pool_threshold"],
        slow_attempt_ms=config["revision"]["slow_attempt_ms"],
    )


@router.get("/weak-words", response_model=List[Word])
async def weak_words(collector: WeakWordCollector = Depends(get_collector)):
    return collector.collect()


@router.post("/daily", response_model=RevisionSession)
async def start_daily_revision(
    builder: SessionBuilder = Depends(get_builder),
    collector: WeakWordCollector = Depends(get_collector),
):
    """Resume today's daily session or build one from the weak-word pool."""
    existing = builder.todays_daily_session()
    if existing is not None:
        return existing
    session = builder.build(collector.collect(), SessionSource.DAILY_REVISION)
    if session is None:
        raise HTTPException(
            status_code=404,
            detail="There are no words available for revision. Try adding some chapters or completing learning plans.",
        )
    return session


@router.post("/challenging/{session_id}", response_model=RevisionSession)
async def start_challenging_words(
    session_id: str,
    store=Depends(get_store),
    builder: SessionBuilder = Depends(get_builder),
):
    if get_session(store, session_id) is None:
        raise HTTPException(status_code=404, detail="Session not found")
    session = ChallengingWordsRegenerator(store, builder).regenerate(session_id)
    if session is None:
        raise HTTPException(
            status_code=404,
            detail="There are no challenging words to review from this session.",
        )
    return session


@router.get("/sessions/{session_id}", response_model=RevisionSession)
async def read_session(session_id: str, store=Depends(get_store)):
    session = get_session(store, session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.post("/sessions/{session_id}/bookmarks/{word_id}", response_model=RevisionSession)
async def toggle_bookmark(session_id: str, word_id: str, store=Depends(get_store)):
    try:
        session, _ = toggle_session_bookmark(store, session_id, word_id)
    except RevisionError as exc:
        raise HTTPException(status_code=status_for(exc), detail=str(exc)) from exc
    return session


@router.post("/sessions/{session_id}/flashcards")
async def record_flashcards(session_id: str, summary: FlashcardSummary, store=Depends(get_store)):
    """Log flashcard outcomes for a session.

    Plan-backed sessions also complete the flashcard phase of their plan set.
    """
    session = get_session(store, session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    ref = session.learning_plan
    if ref is None:
        attempts = flashcard_attempts(session.words, summary.outcomes, iso_now(), session.id)
        replace_flashcard_attempts(store, session.id, attempts)
        return {"session_id": session.id, "logged": len(attempts)}
    try:
        plan = PlanProgressionEngine(store).record_flashcard_outcomes(
            ref.plan_id, ref.set_index, summary.outcomes, session.id
        )
    except RevisionError as exc:
        raise HTTPException(status_code=status_for(exc), detail=str(exc)) from exc
    plan_set = plan.sets[ref.set_index]
    return {
        "session_id": session.id,
        "logged": len(plan_set.known_word_ids) + len(plan_set.unknown_word_ids),
        "plan_id": plan.id,
        "set_index": ref.set_index,
        "known_word_ids": plan_set.known_word_ids,
        "unknown_word_ids": plan_set.unknown_word_ids,
    }

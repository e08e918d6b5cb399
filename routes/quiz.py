from typing import List

from fastapi import APIRouter, Depends, HTTPException

from config import load_config
from db.database import get_store
from models.quiz import QuizQuestion, QuizScore, QuizSubmission, RangeQuizRequest
from routes.plans import get_engine
from utils.bookmarks import bookmark_to_word, list_bookmarks, select_range
from utils.errors import RevisionError, status_for
from utils.plans import PlanProgressionEngine
from utils.questions import build_questions
from utils.scoring import QuizScorer
from utils.sessions import get_session

router = APIRouter()


@router.get("/sessions/{session_id}/questions", response_model=List[QuizQuestion])
async def session_questions(session_id: str, store=Depends(get_store)):
    session = get_session(store, session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    option_count = load_config()["quiz"]["option_count"]
    return build_questions(session.words, option_count)


@router.post("/sessions/{session_id}/submit", response_model=QuizScore)
async def submit_quiz(
    session_id: str,
    submission: QuizSubmission,
    store=Depends(get_store),
    engine: PlanProgressionEngine = Depends(get_engine),
):
    session = get_session(store, session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    scorer = QuizScorer(store, engine)
    try:
        return scorer.score(session, submission.results, submission.bookmarked)
    except RevisionError as exc:
        raise HTTPException(status_code=status_for(exc), detail=str(exc)) from exc


@router.post("/bookmarks/range", response_model=List[QuizQuestion])
async def bookmark_range_quiz(request: RangeQuizRequest, store=Depends(get_store)):
    """Ad-hoc quiz over a 1-based, inclusive slice of the bookmark list."""
    config = load_config()["quiz"]
    words = [bookmark_to_word(bookmark) for bookmark in list_bookmarks(store)]
    try:
        selected = select_range(words, request.start, request.end, config["min_bookmark_quiz_words"])
    except RevisionError as exc:
        raise HTTPException(status_code=status_for(exc), detail=str(exc)) from exc
    return build_questions(selected, config["option_count"])

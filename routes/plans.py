from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from db.database import get_store
from models.plan import LearningPlan, PlanCreate, PlanProgress, SetEntry
from models.quiz import FlashcardSummary, SavedQuizResult
from models.session import RevisionSession
from routes.revision import get_builder
from utils.errors import RevisionError, status_for
from utils.history import get_saved_result
from utils.plans import PlanProgressionEngine
from utils.sessions import SessionBuilder

router = APIRouter()


def get_engine(store=Depends(get_store)) -> PlanProgressionEngine:
    return PlanProgressionEngine(store)


def _raise_http(exc: RevisionError):
    raise HTTPException(status_code=status_for(exc), detail=str(exc)) from exc


@router.get("/", response_model=List[LearningPlan])
async def list_plans(engine: PlanProgressionEngine = Depends(get_engine)):
    return engine.list_plans()


@router.post("/", response_model=LearningPlan, status_code=status.HTTP_201_CREATED)
async def create_plan(request: PlanCreate, engine: PlanProgressionEngine = Depends(get_engine)):
    try:
        return engine.create_plan(request)
    except RevisionError as exc:
        _raise_http(exc)


@router.get("/{plan_id}", response_model=LearningPlan)
async def read_plan(plan_id: str, engine: PlanProgressionEngine = Depends(get_engine)):
    try:
        return engine.get_plan(plan_id)
    except RevisionError as exc:
        _raise_http(exc)


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_plan(plan_id: str, engine: PlanProgressionEngine = Depends(get_engine)):
    try:
        engine.delete_plan(plan_id)
    except RevisionError as exc:
        _raise_http(exc)


@router.get("/{plan_id}/progress", response_model=PlanProgress)
async def plan_progress(plan_id: str, engine: PlanProgressionEngine = Depends(get_engine)):
    try:
        return engine.progress(plan_id)
    except RevisionError as exc:
        _raise_http(exc)


@router.post("/{plan_id}/sets/{set_index}/start", response_model=SetEntry)
async def start_set(
    plan_id: str,
    set_index: int,
    show_results: bool = Query(default=False),
    engine: PlanProgressionEngine = Depends(get_engine),
    builder: SessionBuilder = Depends(get_builder),
):
    try:
        return engine.start_set(plan_id, set_index, builder, show_results=show_results)
    except RevisionError as exc:
        _raise_http(exc)


@router.post("/{plan_id}/sets/{set_index}/flashcards", response_model=LearningPlan)
async def complete_flashcards(
    plan_id: str,
    set_index: int,
    summary: FlashcardSummary,
    engine: PlanProgressionEngine = Depends(get_engine),
):
    try:
        return engine.record_flashcard_outcomes(plan_id, set_index, summary.outcomes, summary.session_id)
    except RevisionError as exc:
        _raise_http(exc)


@router.post("/{plan_id}/sets/{set_index}/focus-unknown", response_model=RevisionSession)
async def focus_unknown(
    plan_id: str,
    set_index: int,
    engine: PlanProgressionEngine = Depends(get_engine),
    builder: SessionBuilder = Depends(get_builder),
):
    try:
        return engine.focus_unknown(plan_id, set_index, builder)
    except RevisionError as exc:
        _raise_http(exc)


@router.get("/{plan_id}/sets/{set_index}/results", response_model=SavedQuizResult)
async def saved_results(plan_id: str, set_index: int, store=Depends(get_store)):
    result = get_saved_result(store, plan_id, set_index)
    if result is None:
        raise HTTPException(status_code=404, detail="No saved results for this set")
    return result

from pydantic import BaseModel, field_validator
from typing import List, Optional
from enum import Enum

from .word import Word
from .session import RevisionSession

class QuizMode(str, Enum):
    QUIZ_WITH_FLASHCARD = "quiz-with-flashcard"
    ONLY_QUIZ = "only-quiz"

class SetPhase(str, Enum):
    FLASHCARD = "flashcard"
    QUIZ = "quiz"
    RESULTS = "results"

class PlanSet(BaseModel):
    id: str
    words: List[Word]
    is_completed: bool = False
    is_unlocked: bool = False
    flashcard_completed: bool = False
    quiz_completed: bool = False
    date_unlocked: Optional[str] = None
    date_completed: Optional[str] = None
    known_word_ids: List[str] = []
    unknown_word_ids: List[str] = []

class PlanCreate(BaseModel):
    title: str
    description: str = ""
    chapter_id: str
    daily_word_goal: int = 10
    quiz_mode: QuizMode = QuizMode.QUIZ_WITH_FLASHCARD

    @field_validator("title")
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError("Please enter a title for your learning plan")
        return v.strip()

    @field_validator("daily_word_goal")
    def validate_goal(cls, v):
        if v < 1:
            raise ValueError("Daily word goal must be at least 1")
        return v

class LearningPlan(BaseModel):
    id: str
    title: str
    description: str = ""
    chapter_id: str
    chapter_title: str = ""
    daily_word_goal: int
    total_words: int
    total_days: int
    created_at: str
    started_at: str
    current_set_index: int = 0
    is_active: bool = True
    quiz_mode: QuizMode = QuizMode.QUIZ_WITH_FLASHCARD
    sets: List[PlanSet]
    completed_sets: List[str] = []

class PlanProgress(BaseModel):
    plan_id: str
    percent: int
    days_left: int
    completed_sets: int
    total_days: int
    current_set_index: int

class SetEntry(BaseModel):
    """Where a learner lands when opening a plan set."""
    phase: SetPhase
    session: RevisionSession

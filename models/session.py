from pydantic import BaseModel
from typing import List, Optional
from enum import Enum

from .word import Word

class SessionSource(str, Enum):
    DAILY_REVISION = "daily-revision"
    CHALLENGING_WORDS = "challenging-words"
    LEARNING_PLAN = "learning-plan"
    SMART_REVISION = "smart-revision"

class SessionResults(BaseModel):
    correct: List[str] = []
    incorrect: List[str] = []
    skipped: List[str] = []
    bookmarked: List[str] = []

class LearningPlanRef(BaseModel):
    plan_id: str
    set_index: int

class RevisionSession(BaseModel):
    id: str
    date: str  # ISO datetime of creation
    words: List[Word]
    source: SessionSource
    completed: bool = False
    score: Optional[int] = None
    results: Optional[SessionResults] = None
    learning_plan: Optional[LearningPlanRef] = None

    def find_word(self, word_id: str) -> Optional[Word]:
        for word in self.words:
            if word.id == word_id:
                return word
        return None

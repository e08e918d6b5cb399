from pydantic import BaseModel
from typing import List, Optional

from .word import Word, LastResult
from .session import SessionSource

class QuizOption(BaseModel):
    id: str
    definition: str

class QuizQuestion(BaseModel):
    word_id: str
    word: str
    phonetic: Optional[str] = None
    options: List[QuizOption]

class RawQuizResult(BaseModel):
    """One presented word as returned by the quiz client."""
    word_id: str
    selected_option_id: Optional[str] = None
    selected_option_text: Optional[str] = None
    time_taken: Optional[int] = None  # milliseconds

    @property
    def skipped(self) -> bool:
        return not self.selected_option_id

class QuizSubmission(BaseModel):
    results: List[RawQuizResult]
    bookmarked: Optional[List[str]] = None

class QuizAnswer(BaseModel):
    word_id: str
    word: Word
    selected_answer: str = ""
    selected_answer_text: str = ""
    correct_answer: str
    is_correct: bool
    skipped: bool = False

class QuizScore(BaseModel):
    score: int
    answers: List[QuizAnswer]

class SavedQuizResult(BaseModel):
    session_id: str
    plan_id: Optional[str] = None
    set_index: Optional[int] = None
    score: int
    answers: List[QuizAnswer]
    bookmarked_word_ids: List[str] = []
    completed_at: str
    source: SessionSource

class QuizAttempt(BaseModel):
    word_id: str
    word: Word
    correct: bool
    date: str
    time_taken: int = 0
    source: Optional[SessionSource] = None
    session_id: Optional[str] = None

class FlashcardAttempt(BaseModel):
    word_id: str
    word: Word
    result: LastResult
    date: str
    time_taken: int = 0
    session_id: Optional[str] = None
    plan_id: Optional[str] = None
    set_index: Optional[int] = None

class FlashcardOutcome(BaseModel):
    word_id: str
    result: LastResult
    time_taken: Optional[int] = None

class FlashcardSummary(BaseModel):
    session_id: Optional[str] = None
    outcomes: List[FlashcardOutcome]

class RangeQuizRequest(BaseModel):
    start: int
    end: int

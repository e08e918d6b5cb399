from pydantic import BaseModel
from typing import List, Optional
from enum import Enum

class LastResult(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    SKIPPED = "skipped"

class WordBase(BaseModel):
    id: str
    word: str
    definition: str
    phonetic: Optional[str] = None
    example: Optional[str] = None
    notes: Optional[str] = None

class Word(WordBase):
    is_bookmarked: bool = False
    is_known: bool = False
    # Group label carried over from the owning chapter, used for bookmarks
    chapter: Optional[str] = None
    last_attempt_date: Optional[str] = None  # ISO datetime
    last_result: Optional[LastResult] = None
    time_taken: Optional[int] = None  # milliseconds

class Chapter(BaseModel):
    id: str
    title: str
    description: str = ""
    words: List[Word] = []

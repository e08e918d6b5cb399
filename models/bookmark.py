from pydantic import BaseModel
from typing import Optional

class Bookmark(BaseModel):
    id: str
    word: str
    translation: str
    phonetic: Optional[str] = None
    chapter: str

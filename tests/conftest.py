from datetime import datetime, timedelta, timezone

import pytest

from db.store import MemoryStore, chapter_key, save_one
from models.word import Chapter, Word


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def make_words(count: int, prefix: str = "w", **fields):
    return [
        Word(id=f"{prefix}{i}", word=f"word-{prefix}{i}", definition=f"meaning of {prefix}{i}", **fields)
        for i in range(count)
    ]


def add_chapter(store, chapter_id: str, words, title: str = "Chapter") -> Chapter:
    chapter = Chapter(id=chapter_id, title=title, words=list(words))
    save_one(store, chapter_key(chapter_id), chapter)
    return chapter


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 3, 5, 9, 30, tzinfo=timezone.utc))

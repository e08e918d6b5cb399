from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from db.store import BOOKMARKS_KEY, PLANS_KEY, Store, load_list, save_list
from models.bookmark import Bookmark
from models.plan import LearningPlan
from models.session import RevisionSession, SessionSource
from models.word import Word
from utils.errors import EmptyPool, InvalidRange, SessionNotFound
from utils.sessions import get_session, save_session

logger = logging.getLogger(__name__)

SOURCE_LABELS = {
    SessionSource.DAILY_REVISION: "Daily Revision",
    SessionSource.CHALLENGING_WORDS: "Challenging Words",
    SessionSource.LEARNING_PLAN: "Learning Plan",
    SessionSource.SMART_REVISION: "Smart Revision",
}


def plan_title_for(store: Store, session: RevisionSession) -> Optional[str]:
    if session.learning_plan is None:
        return None
    for plan in load_list(store, PLANS_KEY, LearningPlan):
        if plan.id == session.learning_plan.plan_id:
            return plan.title
    return None


def group_label(word: Word, session: RevisionSession, plan_title: Optional[str] = None) -> str:
    """Bookmark group: the word's own chapter, then the plan title, then the source."""
    if word.chapter:
        return word.chapter
    if session.learning_plan is not None and plan_title:
        return plan_title
    return SOURCE_LABELS[session.source]


def list_bookmarks(store: Store) -> List[Bookmark]:
    return load_list(store, BOOKMARKS_KEY, Bookmark)


def upsert_bookmarks(store: Store, entries: Sequence[Tuple[Word, str]]) -> None:
    """Insert or update a bookmark per (word, group label), keyed by word id."""
    bookmarks = list_bookmarks(store)
    positions = {bookmark.id: index for index, bookmark in enumerate(bookmarks)}
    for word, label in entries:
        bookmark = Bookmark(
            id=word.id,
            word=word.word,
            translation=word.definition,
            phonetic=word.phonetic,
            chapter=label,
        )
        if word.id in positions:
            bookmarks[positions[word.id]] = bookmark
        else:
            positions[word.id] = len(bookmarks)
            bookmarks.append(bookmark)
    save_list(store, BOOKMARKS_KEY, bookmarks)


def remove_bookmark(store: Store, word_id: str) -> bool:
    bookmarks = list_bookmarks(store)
    kept = [bookmark for bookmark in bookmarks if bookmark.id != word_id]
    if len(kept) == len(bookmarks):
        return False
    save_list(store, BOOKMARKS_KEY, kept)
    return True


def toggle_session_bookmark(store: Store, session_id: str, word_id: str) -> Tuple[RevisionSession, bool]:
    """Flip a word's bookmark flag inside a session and mirror it in the bookmark list."""
    session = get_session(store, session_id)
    if session is None:
        raise SessionNotFound(f"Session {session_id} not found")
    word = session.find_word(word_id)
    if word is None:
        raise SessionNotFound(f"Word {word_id} is not part of session {session_id}")
    word.is_bookmarked = not word.is_bookmarked
    with store.batch():
        save_session(store, session)
        if word.is_bookmarked:
            upsert_bookmarks(store, [(word, group_label(word, session, plan_title_for(store, session)))])
        else:
            remove_bookmark(store, word_id)
    logger.info(
        "%s %s in session %s",
        "Bookmarked" if word.is_bookmarked else "Unbookmarked",
        word_id,
        session_id,
    )
    return session, word.is_bookmarked


def bookmark_to_word(bookmark: Bookmark) -> Word:
    return Word(
        id=bookmark.id,
        word=bookmark.word,
        definition=bookmark.translation,
        phonetic=bookmark.phonetic,
        is_bookmarked=True,
        chapter=bookmark.chapter,
    )


def select_range(words: Sequence[Word], start: int, end: int, minimum: int = 1) -> List[Word]:
    """Return words ``start``..``end`` (1-based, inclusive)."""
    if not words or len(words) < minimum:
        raise EmptyPool(f"You need at least {minimum} bookmarked words to start a quiz.")
    if start < 1 or end > len(words) or start > end:
        raise InvalidRange(f"Please enter a valid range between 1 and {len(words)}.")
    return list(words[start - 1:end])

from __future__ import annotations

import logging
import random
import secrets
from datetime import datetime
from typing import List, Optional, Sequence, TypeVar

from db.store import SESSIONS_KEY, Store, load_list, save_list
from models.session import LearningPlanRef, RevisionSession, SessionSource
from models.word import Word
from utils.clock import Clock, millis, utc_now

logger = logging.getLogger(__name__)

DEFAULT_SESSION_CAP = 50

T = TypeVar("T")


def shuffle_words(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Fisher-Yates shuffle returning a new list."""
    rng = rng or random
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def _created_on(session: RevisionSession) -> Optional[str]:
    try:
        return datetime.fromisoformat(session.date).date().isoformat()
    except ValueError:
        return None


def load_sessions(store: Store) -> List[RevisionSession]:
    return load_list(store, SESSIONS_KEY, RevisionSession)


def get_session(store: Store, session_id: str) -> Optional[RevisionSession]:
    for session in load_sessions(store):
        if session.id == session_id:
            return session
    return None


def save_session(store: Store, session: RevisionSession) -> None:
    """Insert the session or replace the stored one with the same id."""
    sessions = load_sessions(store)
    for index, existing in enumerate(sessions):
        if existing.id == session.id:
            sessions[index] = session
            break
    else:
        sessions.append(session)
    save_list(store, SESSIONS_KEY, sessions)


class SessionBuilder:
    """Turns a candidate word list into a bounded, shuffled revision session."""

    def __init__(
        self,
        store: Store,
        cap: int = DEFAULT_SESSION_CAP,
        clock: Clock = utc_now,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.cap = cap
        self.clock = clock
        self.rng = rng

    def todays_daily_session(self) -> Optional[RevisionSession]:
        today = self.clock().date().isoformat()
        for session in load_sessions(self.store):
            if session.source == SessionSource.DAILY_REVISION and _created_on(session) == today:
                return session
        return None

    def new_session_id(self, source: SessionSource) -> str:
        return f"{source.value}-{millis(self.clock)}-{secrets.token_hex(3)}"

    def build(
        self,
        words: Sequence[Word],
        source: SessionSource,
        cap: Optional[int] = None,
        *,
        shuffle: bool = True,
        learning_plan: Optional[LearningPlanRef] = None,
    ) -> Optional[RevisionSession]:
        """Build and persist a session, or return None when no words would be in it.

        ``cap`` defaults to the builder's cap.
        A daily-revision session already created today is returned unchanged.
        """
        if source == SessionSource.DAILY_REVISION:
            existing = self.todays_daily_session()
            if existing is not None:
                logger.info("Reusing daily revision session %s", existing.id)
                return existing
        if not words:
            return None
        limit = self.cap if cap is None else cap
        selected = shuffle_words(words, self.rng) if shuffle else list(words)
        selected = selected[: max(limit, 0)]
        if not selected:
            logger.warning("Session cap %d leaves no words; no %s session built", limit, source.value)
            return None
        session = RevisionSession(
            id=self.new_session_id(source),
            date=self.clock().isoformat(),
            words=selected,
            source=source,
            completed=False,
            learning_plan=learning_plan,
        )
        save_session(self.store, session)
        logger.info("Built %s session %s with %d words", source.value, session.id, len(selected))
        return session

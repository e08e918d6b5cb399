from __future__ import annotations

import logging
from typing import List, Optional

from db.store import Store
from models.session import RevisionSession, SessionSource
from models.word import Word
from utils.sessions import SessionBuilder, get_session

logger = logging.getLogger(__name__)


def challenging_word_ids(session: RevisionSession) -> List[str]:
    """Incorrect, skipped and bookmarked ids of a scored session, deduplicated in that order."""
    if session.results is None:
        return []
    results = session.results
    return list(dict.fromkeys(results.incorrect + results.skipped + results.bookmarked))


class ChallengingWordsRegenerator:
    """Derives a follow-up session from the words a learner struggled with."""

    def __init__(self, store: Store, builder: SessionBuilder):
        self.store = store
        self.builder = builder

    def regenerate(self, session_id: str) -> Optional[RevisionSession]:
        source = get_session(self.store, session_id)
        if source is None or source.results is None:
            return None
        words: List[Word] = []
        for word_id in challenging_word_ids(source):
            word = source.find_word(word_id)
            if word is not None:
                words.append(word)
        if not words:
            logger.info("No challenging words in session %s", session_id)
            return None
        return self.builder.build(words, SessionSource.CHALLENGING_WORDS, shuffle=False)

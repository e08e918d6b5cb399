from __future__ import annotations

import logging
import secrets
from typing import List, Optional, Sequence, Tuple

from db.store import PLANS_KEY, Store, chapter_key, load_list, load_one, save_list
from models.plan import (
    LearningPlan,
    PlanCreate,
    PlanProgress,
    PlanSet,
    QuizMode,
    SetEntry,
    SetPhase,
)
from models.quiz import FlashcardOutcome
from models.session import LearningPlanRef, RevisionSession, SessionSource
from models.word import Chapter, Word
from utils.clock import Clock, iso_now, millis, utc_now
from utils.errors import (
    ChapterNotFound,
    EmptyPool,
    EmptySet,
    InvalidRange,
    LockedSet,
    PlanNotFound,
    SavedResultNotFound,
)
from utils.history import (
    flashcard_attempts,
    get_saved_result,
    partition_outcomes,
    replace_flashcard_attempts,
)
from utils.progress import plan_progress
from utils.sessions import SessionBuilder

logger = logging.getLogger(__name__)


def partition_into_sets(words: Sequence[Word], daily_goal: int, unlocked_at: Optional[str] = None) -> List[PlanSet]:
    """Chunk words into goal-sized sets; only the first starts unlocked."""
    if daily_goal < 1:
        raise ValueError("Daily word goal must be at least 1")
    sets: List[PlanSet] = []
    for index, start in enumerate(range(0, len(words), daily_goal)):
        first = index == 0
        sets.append(
            PlanSet(
                id=f"set_{index}",
                words=list(words[start:start + daily_goal]),
                is_unlocked=first,
                date_unlocked=unlocked_at if first else None,
            )
        )
    return sets


def set_is_complete(plan: LearningPlan, plan_set: PlanSet) -> bool:
    """Completion condition for a set under the plan's quiz mode.

    In only-quiz mode either phase completes the set; otherwise both are
    required.
    """
    if plan.quiz_mode == QuizMode.ONLY_QUIZ:
        return plan_set.flashcard_completed or plan_set.quiz_completed
    return plan_set.flashcard_completed and plan_set.quiz_completed


def entry_phase(plan: LearningPlan, plan_set: PlanSet) -> SetPhase:
    if plan.quiz_mode == QuizMode.ONLY_QUIZ:
        return SetPhase.QUIZ
    if plan_set.flashcard_completed and not plan_set.quiz_completed:
        return SetPhase.QUIZ
    return SetPhase.FLASHCARD


class PlanProgressionEngine:
    """Owns learning plan records and the per-set unlock/completion state machine.

    Every mutating operation reads the latest plan list, applies the whole
    change in memory and writes the list back in a single record write.
    """

    def __init__(self, store: Store, clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    def list_plans(self) -> List[LearningPlan]:
        return load_list(self.store, PLANS_KEY, LearningPlan)

    def get_plan(self, plan_id: str) -> LearningPlan:
        for plan in self.list_plans():
            if plan.id == plan_id:
                return plan
        raise PlanNotFound(f"Learning plan {plan_id} not found")

    def _load_for_update(self, plan_id: str) -> Tuple[List[LearningPlan], int]:
        plans = self.list_plans()
        for index, plan in enumerate(plans):
            if plan.id == plan_id:
                return plans, index
        raise PlanNotFound(f"Learning plan {plan_id} not found")

    def new_plan_id(self) -> str:
        return f"plan_{millis(self.clock)}-{secrets.token_hex(3)}"

    def create_plan(self, request: PlanCreate) -> LearningPlan:
        chapter = load_one(self.store, chapter_key(request.chapter_id), Chapter)
        if chapter is None:
            raise ChapterNotFound(f"Chapter {request.chapter_id} not found")
        active_words = [word for word in chapter.words if not word.is_known]
        if not active_words:
            raise EmptyPool(
                "The selected chapter doesn't contain any active words to learn. "
                "All words are marked as known."
            )
        now = iso_now(self.clock)
        plans = self.list_plans()
        taken = {existing.id for existing in plans}
        plan_id = self.new_plan_id()
        while plan_id in taken:
            plan_id = self.new_plan_id()
        sets = partition_into_sets(active_words, request.daily_word_goal, unlocked_at=now)
        plan = LearningPlan(
            id=plan_id,
            title=request.title,
            description=request.description,
            chapter_id=chapter.id,
            chapter_title=chapter.title,
            daily_word_goal=request.daily_word_goal,
            total_words=len(active_words),
            total_days=len(sets),
            created_at=now,
            started_at=now,
            quiz_mode=request.quiz_mode,
            sets=sets,
        )
        plans.append(plan)
        save_list(self.store, PLANS_KEY, plans)
        logger.info("Created plan %s with %d sets from chapter %s", plan.id, len(sets), chapter.id)
        return plan

    def delete_plan(self, plan_id: str) -> None:
        plans, index = self._load_for_update(plan_id)
        del plans[index]
        save_list(self.store, PLANS_KEY, plans)

    def progress(self, plan_id: str) -> PlanProgress:
        return plan_progress(self.get_plan(plan_id))

    def _get_set(self, plan: LearningPlan, set_index: int) -> PlanSet:
        if set_index < 0 or set_index >= len(plan.sets):
            raise InvalidRange(f"Set {set_index} does not exist in plan {plan.id}")
        return plan.sets[set_index]

    def check_startable(self, plan: LearningPlan, set_index: int) -> PlanSet:
        plan_set = self._get_set(plan, set_index)
        if not plan_set.is_unlocked:
            logger.warning("Refused to start locked set %d of plan %s", set_index, plan.id)
            raise LockedSet("Complete the previous sets first to unlock this one.")
        if not plan_set.words:
            logger.warning("Refused to start empty set %d of plan %s", set_index, plan.id)
            raise EmptySet("This set doesn't have any words to review.")
        return plan_set

    def record_flashcard_completion(
        self,
        plan_id: str,
        set_index: int,
        known_ids: Sequence[str],
        unknown_ids: Sequence[str],
    ) -> LearningPlan:
        return self._record_phase(plan_id, set_index, known_ids, unknown_ids, flashcard=True)

    def record_quiz_completion(
        self,
        plan_id: str,
        set_index: int,
        known_ids: Sequence[str],
        unknown_ids: Sequence[str],
    ) -> LearningPlan:
        return self._record_phase(plan_id, set_index, known_ids, unknown_ids, flashcard=False)

    def record_flashcard_outcomes(
        self,
        plan_id: str,
        set_index: int,
        outcomes: Sequence[FlashcardOutcome],
        session_id: Optional[str] = None,
    ) -> LearningPlan:
        """Log per-word flashcard outcomes and complete the flashcard phase.

        Correct cards become the set's known ids; incorrect and skipped cards
        become its unknown ids.
        """
        plan = self.get_plan(plan_id)
        plan_set = self._get_set(plan, set_index)
        known, unknown = partition_outcomes(plan_set.words, outcomes)
        attempts = flashcard_attempts(
            plan_set.words, outcomes, iso_now(self.clock), session_id, plan_id=plan.id, set_index=set_index
        )
        with self.store.batch():
            updated = self.record_flashcard_completion(plan_id, set_index, known, unknown)
            replace_flashcard_attempts(self.store, session_id, attempts, plan_id=plan.id, set_index=set_index)
        return updated

    def _record_phase(
        self,
        plan_id: str,
        set_index: int,
        known_ids: Sequence[str],
        unknown_ids: Sequence[str],
        flashcard: bool,
    ) -> LearningPlan:
        plans, plan_index = self._load_for_update(plan_id)
        plan = plans[plan_index]
        plan_set = self._get_set(plan, set_index)
        if not plan_set.is_unlocked:
            raise LockedSet("Complete the previous sets first to unlock this one.")
        if flashcard:
            plan_set.flashcard_completed = True
        else:
            plan_set.quiz_completed = True
        plan_set.known_word_ids = list(dict.fromkeys(known_ids))
        plan_set.unknown_word_ids = list(dict.fromkeys(unknown_ids))
        if set_is_complete(plan, plan_set):
            self._complete_set(plan, set_index)
        save_list(self.store, PLANS_KEY, plans)
        return plan

    def _complete_set(self, plan: LearningPlan, set_index: int) -> None:
        plan_set = plan.sets[set_index]
        now = iso_now(self.clock)
        if not plan_set.is_completed:
            plan_set.is_completed = True
            plan_set.date_completed = now
            logger.info("Completed set %d of plan %s", set_index, plan.id)
        if plan_set.id not in plan.completed_sets:
            plan.completed_sets.append(plan_set.id)
        if set_index < len(plan.sets) - 1:
            next_set = plan.sets[set_index + 1]
            if not next_set.is_unlocked:
                next_set.is_unlocked = True
                next_set.date_unlocked = now
                logger.info("Unlocked set %d of plan %s", set_index + 1, plan.id)
        plan.current_set_index = max(plan.current_set_index, min(set_index + 1, len(plan.sets) - 1))

    def start_set(
        self,
        plan_id: str,
        set_index: int,
        builder: SessionBuilder,
        show_results: bool = False,
    ) -> SetEntry:
        """Open a plan set: saved results, the quiz phase, or the flashcard phase."""
        plan = self.get_plan(plan_id)
        plan_set = self.check_startable(plan, set_index)
        ref = LearningPlanRef(plan_id=plan.id, set_index=set_index)
        if show_results and plan_set.is_completed:
            saved = get_saved_result(self.store, plan.id, set_index)
            if saved is None:
                raise SavedResultNotFound(f"No saved results for set {set_index} of plan {plan.id}")
            session = RevisionSession(
                id=saved.session_id,
                date=saved.completed_at,
                words=plan_set.words,
                source=SessionSource.LEARNING_PLAN,
                completed=True,
                score=saved.score,
                learning_plan=ref,
            )
            return SetEntry(phase=SetPhase.RESULTS, session=session)
        session = self._plan_session(builder, plan_set.words, ref)
        return SetEntry(phase=entry_phase(plan, plan_set), session=session)

    def focus_unknown(self, plan_id: str, set_index: int, builder: SessionBuilder) -> RevisionSession:
        """Build a plan-backed session from the set's unknown words."""
        plan = self.get_plan(plan_id)
        plan_set = self.check_startable(plan, set_index)
        unknown = set(plan_set.unknown_word_ids)
        words = [word for word in plan_set.words if word.id in unknown]
        if not words:
            raise EmptyPool("There are no unknown words to focus on in this set.")
        return self._plan_session(builder, words, LearningPlanRef(plan_id=plan.id, set_index=set_index))

    def _plan_session(self, builder: SessionBuilder, words: Sequence[Word], ref: LearningPlanRef) -> RevisionSession:
        session = builder.build(
            words,
            SessionSource.LEARNING_PLAN,
            cap=len(words),
            shuffle=False,
            learning_plan=ref,
        )
        if session is None:
            raise EmptySet("This set doesn't have any words to review.")
        return session

from .word import Word, Chapter, LastResult
from .session import RevisionSession, SessionSource, SessionResults, LearningPlanRef
from .plan import LearningPlan, PlanSet, PlanCreate, PlanProgress, QuizMode, SetEntry, SetPhase
from .quiz import (
    QuizOption,
    QuizQuestion,
    RawQuizResult,
    QuizSubmission,
    QuizAnswer,
    QuizScore,
    SavedQuizResult,
    QuizAttempt,
    FlashcardAttempt,
    FlashcardOutcome,
    FlashcardSummary,
    RangeQuizRequest,
)
from .bookmark import Bookmark

__all__ = [
    'Word', 'Chapter', 'LastResult',
    'RevisionSession', 'SessionSource', 'SessionResults', 'LearningPlanRef',
    'LearningPlan', 'PlanSet', 'PlanCreate', 'PlanProgress', 'QuizMode', 'SetEntry', 'SetPhase',
    'QuizOption', 'QuizQuestion', 'RawQuizResult', 'QuizSubmission', 'QuizAnswer', 'QuizScore',
    'SavedQuizResult', 'QuizAttempt', 'FlashcardAttempt', 'FlashcardOutcome', 'FlashcardSummary',
    'RangeQuizRequest', 'Bookmark',
]

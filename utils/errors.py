class RevisionError(Exception):
    """Base class for refused revision and learning-plan operations."""


class EmptyPool(RevisionError):
    """No candidate words are available to build a session from."""


class LockedSet(RevisionError):
    """The plan set has not been unlocked yet."""


class EmptySet(RevisionError):
    """The plan set has no words."""


class InvalidRange(RevisionError):
    """A requested word-index range falls outside the available words."""


class StoreCorruption(RevisionError):
    """A stored record failed structural validation on read."""


class PlanNotFound(RevisionError):
    pass


class SessionNotFound(RevisionError):
    pass


class ChapterNotFound(RevisionError):
    pass


class SavedResultNotFound(RevisionError):
    pass


STATUS_CODES = {
    EmptyPool: 404,
    PlanNotFound: 404,
    SessionNotFound: 404,
    ChapterNotFound: 404,
    SavedResultNotFound: 404,
    LockedSet: 409,
    EmptySet: 409,
    InvalidRange: 400,
}


def status_for(exc: RevisionError) -> int:
    for exc_type, code in STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return code
    return 400

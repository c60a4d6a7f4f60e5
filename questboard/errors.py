"""Error taxonomy for the quest lifecycle."""


class QuestError(Exception):
    """Base class for quest lifecycle failures."""
    pass


class ValidationError(QuestError):
    """Raised when create-quest input is malformed."""
    pass


class LoadError(QuestError):
    """Raised when the quest collection cannot be fetched from storage."""
    pass


class CreateError(QuestError):
    """Raised when storage rejects a new quest."""
    pass


class UpdateError(QuestError):
    """Raised when storage rejects a quest update."""
    pass


class NotFoundError(QuestError):
    """Raised when a quest id is absent from the local collection."""
    pass


class InvalidStateError(QuestError):
    """Raised when completing a quest that is already completed."""
    pass


class OperationInProgressError(QuestError):
    """Raised when another load/create/complete is still in flight."""
    pass

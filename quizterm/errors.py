from __future__ import annotations

"""Exception taxonomy for quizterm."""


class QuizError(Exception):
    """Base class for all quizterm errors."""


class LoadError(QuizError):
    """Question source could not be read or is malformed."""


class UnknownKey(QuizError, KeyError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown configuration key: {key}")
        self.key = key

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownCategory(QuizError, KeyError):
    def __init__(self, category: str) -> None:
        super().__init__(f"Category not found: {category}")
        self.category = category

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownDifficulty(QuizError, KeyError):
    def __init__(self, difficulty: str, category: str) -> None:
        super().__init__(f"Difficulty '{difficulty}' not found in category '{category}'")
        self.difficulty = difficulty
        self.category = category

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidConfigValue(QuizError, ValueError):
    """A configuration value does not match the declared type of its key."""


class SelectionError(QuizError):
    """Selection produced nothing a session can run on."""


class EmptyQuestionPool(SelectionError):
    pass


class NoPointsAvailable(SelectionError):
    pass


class IndexOutOfRange(QuizError, IndexError):
    pass


class SessionStateError(QuizError, RuntimeError):
    """Operation is not valid in the session's current state."""


class AnswerAlreadyRecorded(SessionStateError):
    pass


class RemoteSourceError(QuizError):
    """Remote question source failed (transport, HTTP status or payload)."""

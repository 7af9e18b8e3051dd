from .schema import AnswerRecord, Duration, Result, UserStats
from .feedback import feedback_for
from .result_manager import ResultHistory

__all__ = [
    "AnswerRecord",
    "Duration",
    "Result",
    "UserStats",
    "feedback_for",
    "ResultHistory",
]

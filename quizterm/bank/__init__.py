from .schema import DEFAULT_FEEDBACK, FeedbackBand, Question
from .repository import QuestionBank, load_bank

__all__ = [
    "DEFAULT_FEEDBACK",
    "FeedbackBand",
    "Question",
    "QuestionBank",
    "load_bank",
]

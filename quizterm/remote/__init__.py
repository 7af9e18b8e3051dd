from .source import QuestionSource
from .http_source import HttpQuestionSource

__all__ = ["QuestionSource", "HttpQuestionSource"]

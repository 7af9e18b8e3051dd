from .quiz_manager import QuizManager, SessionState
from .terminal_ui import TerminalUI
from .timed_input import AnswerTimeout, Countdown, LineReader, TimedAnswer, ask_with_deadline

__all__ = [
    "QuizManager",
    "SessionState",
    "TerminalUI",
    "AnswerTimeout",
    "Countdown",
    "LineReader",
    "TimedAnswer",
    "ask_with_deadline",
]

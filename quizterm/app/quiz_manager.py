from __future__ import annotations

"""Quiz session engine: selection, answering, scoring and results.

CLI-agnostic; the terminal UI (or any other front end) drives it through
`start_quiz` -> (`get_current_question`, `check_answer`/`record_timeout`,
`advance`)* -> `finish`. Not thread-safe: callers serialize all operations
against one manager.
"""

import enum
import logging
import random
import threading
import time
from collections import Counter
from datetime import datetime, timezone
from string import ascii_uppercase
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from ..bank.repository import QuestionBank
from ..bank.schema import Question
from ..config.config import Configuration
from ..errors import (
    AnswerAlreadyRecorded,
    EmptyQuestionPool,
    IndexOutOfRange,
    NoPointsAvailable,
    RemoteSourceError,
    SessionStateError,
)
from ..remote.source import QuestionSource
from ..results.feedback import feedback_for
from ..results.result_manager import ResultHistory
from ..results.schema import AnswerRecord, Duration, Result, UserStats
from ..util.randomness import fisher_yates, make_rng

logger = logging.getLogger(__name__)

# seconds the results screen waits for remote stats
STATS_TIMEOUT = 3.0


class SessionState(enum.Enum):
    NOT_STARTED = "not_started"
    SELECTING = "selecting"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


def resolve_answer(question: Question, raw: str) -> Optional[str]:
    """Map user input to the text compared with the correct answer.

    Single characters on option questions are option letters; anything that
    is not a letter naming an existing option resolves to None (wrong).
    """
    answer = raw.strip()
    if not question.has_options or len(answer) != 1:
        return answer
    letter = answer.upper()
    if letter not in ascii_uppercase:
        return None
    idx = ascii_uppercase.index(letter)
    options = question.options or []
    if idx >= len(options):
        return None
    return options[idx]


def is_correct_answer(question: Question, raw: str) -> bool:
    resolved = resolve_answer(question, raw)
    if resolved is None:
        return False
    return resolved.strip().lower() == question.correct_answer.strip().lower()


class QuizManager:
    def __init__(
        self,
        bank: QuestionBank,
        config: Configuration,
        source: Optional[QuestionSource] = None,
        *,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
        user_id: Optional[str] = None,
        history: Optional[ResultHistory] = None,
    ) -> None:
        self.bank = bank
        self.config = config
        self.source = source
        self.rng = rng or make_rng()
        self.clock = clock
        self.user_id = user_id or f"user-{uuid4().hex[:8]}"
        self.history = history if history is not None else ResultHistory()

        self._state = SessionState.NOT_STARTED
        self._questions: List[Question] = []
        self._current_index = 0
        self._answers: Dict[str, AnswerRecord] = {}
        self._score = 0
        self._total_points = 0
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self._submit_thread: Optional[threading.Thread] = None

    # --- read-only state ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def questions(self) -> List[Question]:
        return list(self._questions)

    @property
    def question_count(self) -> int:
        return len(self._questions)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def answers(self) -> Dict[str, AnswerRecord]:
        return dict(self._answers)

    @property
    def score(self) -> int:
        return self._score

    @property
    def total_points(self) -> int:
        return self._total_points

    @property
    def has_questions(self) -> bool:
        return self._current_index < len(self._questions)

    # --- selection ---

    def _local_questions(self, categories: List[str], difficulties: List[str]) -> List[Question]:
        return self.bank.questions_for(categories, difficulties)

    def _candidate_questions(self, categories: List[str], difficulties: List[str], max_questions: int) -> List[Question]:
        if self.source is None:
            return self._local_questions(categories, difficulties)
        try:
            questions = list(self.source.fetch_questions(categories, difficulties, max_questions))
            dupes = sorted(i for i, n in Counter(q.id for q in questions).items() if n > 1)
            if dupes:
                # answers are keyed by question id
                raise RemoteSourceError(f"duplicate question ids: {', '.join(dupes)}")
        except Exception as e:
            logger.warning("Fetching questions from remote source failed (%s); using local bank", e)
            return self._local_questions(categories, difficulties)
        logger.debug("Got %d questions from remote source", len(questions))
        return questions

    def select_questions(self) -> List[Question]:
        """Filter, optionally shuffle and truncate the candidate pool.

        Raises:
            EmptyQuestionPool: nothing left after selection.
            NoPointsAvailable: selected questions are worth zero points.
        """
        if self._state is SessionState.IN_PROGRESS:
            raise SessionStateError("Cannot select questions while a quiz is in progress")
        categories = self.config.get("categories")
        difficulties = self.config.get("difficulties")
        max_questions = self.config.get("max_questions")
        shuffle = self.config.get("shuffle_questions")

        self._state = SessionState.SELECTING
        self._current_index = 0
        self._answers = {}
        self._score = 0
        try:
            pool = self._candidate_questions(categories, difficulties, max_questions)
            if shuffle and pool:
                pool = fisher_yates(pool, self.rng)
            selected = pool[:max_questions]
            total = sum(q.points for q in selected)
            if not selected:
                raise EmptyQuestionPool("No questions match the configured categories and difficulties")
            if total <= 0:
                raise NoPointsAvailable("Selected questions are worth no points")
        except Exception:
            self._state = SessionState.NOT_STARTED
            self._questions = []
            self._total_points = 0
            raise

        self._questions = selected
        self._total_points = total
        self._state = SessionState.IN_PROGRESS
        logger.debug(
            "Selected %d of %d candidate questions (%d points)", len(selected), len(pool), total
        )
        return list(selected)

    def start_quiz(self) -> List[Question]:
        if self._state is SessionState.IN_PROGRESS:
            raise SessionStateError("A quiz is already in progress")
        self.end_time = None
        self.start_time = self.clock()
        return self.select_questions()

    # --- answering ---

    def _require_in_progress(self) -> None:
        if self._state is not SessionState.IN_PROGRESS:
            raise SessionStateError(f"No quiz in progress (state: {self._state.value})")

    def get_current_question(self) -> Question:
        if self._current_index >= len(self._questions):
            raise IndexOutOfRange(
                f"Question index {self._current_index} out of range ({len(self._questions)} questions)"
            )
        return self._questions[self._current_index]

    def is_answered(self) -> bool:
        q = self.get_current_question()
        return q.id in self._answers

    def _record(self, question: Question, user_answer: str, correct: bool, timed_out: bool) -> AnswerRecord:
        if question.id in self._answers:
            raise AnswerAlreadyRecorded(f"Question '{question.id}' already has an answer")
        awarded = question.points if correct else 0
        record = AnswerRecord(
            question_id=question.id,
            question=question.text,
            user_answer=user_answer,
            correct_answer=question.correct_answer,
            is_correct=correct,
            points_awarded=awarded,
            timed_out=timed_out,
            category=question.category,
            difficulty=question.difficulty,
        )
        self._answers[question.id] = record
        self._score += awarded
        return record

    def check_answer(self, raw_answer: str) -> bool:
        """Score `raw_answer` for the current question and record it.

        Malformed input is scored as wrong, never raised.
        """
        self._require_in_progress()
        question = self.get_current_question()
        correct = is_correct_answer(question, raw_answer)
        self._record(question, raw_answer, correct, timed_out=False)
        logger.debug("Answer %r for %s: %s", raw_answer, question.id, "correct" if correct else "wrong")
        return correct

    def record_timeout(self) -> AnswerRecord:
        self._require_in_progress()
        question = self.get_current_question()
        logger.debug("Time expired on %s", question.id)
        return self._record(question, "", False, timed_out=True)

    def advance(self) -> bool:
        self._require_in_progress()
        self._current_index += 1
        return self._current_index < len(self._questions)

    # --- finishing ---

    def compute_results(self) -> Result:
        end = self.end_time if self.end_time is not None else self.clock()
        start = self.start_time if self.start_time is not None else end
        percentage = (self._score / self._total_points * 100.0) if self._total_points > 0 else 0.0
        answers = tuple(self._answers.values())
        return Result(
            user_id=self.user_id,
            score=self._score,
            total_points=self._total_points,
            percentage=percentage,
            question_count=len(self._questions),
            correct_count=sum(1 for a in answers if a.is_correct),
            duration=Duration(seconds=max(0.0, end - start)),
            feedback=feedback_for(percentage, self.bank.feedback_table),
            timestamp=datetime.now(timezone.utc).isoformat(),
            answers=answers,
        )

    def finish(self) -> Result:
        self._require_in_progress()
        self.end_time = self.clock()
        self._state = SessionState.FINISHED
        result = self.compute_results()
        self.history.record(result)
        logger.debug("Quiz finished: %d/%d (%.2f%%)", result.score, result.total_points, result.percentage)
        if self.source is not None:
            self._submit_async(result)
        return result

    def _submit_async(self, result: Result) -> None:
        source = self.source

        def runner() -> None:
            try:
                ack = source.submit_result(result)
            except Exception as e:
                logger.warning("Submitting result to remote source failed: %s", e)
                return
            logger.info("Result stored remotely: %s", ack.get("id", ack) if isinstance(ack, dict) else ack)

        self._submit_thread = threading.Thread(target=runner, name="quizterm-submit", daemon=True)
        self._submit_thread.start()

    def wait_for_submission(self, timeout: Optional[float] = None) -> None:
        if self._submit_thread is not None:
            self._submit_thread.join(timeout)

    def get_user_stats(self, timeout: Optional[float] = STATS_TIMEOUT) -> UserStats:
        """Remote stats when a source answers within `timeout`, else local history."""
        source = self.source
        if source is not None:
            outcome: Dict[str, object] = {}

            def runner() -> None:
                try:
                    outcome["stats"] = source.fetch_user_stats(self.user_id)
                except Exception as e:
                    outcome["error"] = e

            t = threading.Thread(target=runner, name="quizterm-stats", daemon=True)
            t.start()
            t.join(timeout)
            if t.is_alive():
                logger.warning("Fetching user stats timed out after %ss; using local history", timeout)
            elif "stats" in outcome:
                return outcome["stats"]  # type: ignore[return-value]
            else:
                logger.warning("Fetching user stats from remote source failed: %s", outcome.get("error"))
        return self.history.summarize(self.user_id)

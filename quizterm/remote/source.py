from __future__ import annotations

"""Remote question source interface."""

from typing import Any, Dict, List, Protocol, Sequence

from ..bank.schema import Question
from ..results.schema import Result, UserStats


class QuestionSource(Protocol):
    """Capability the session engine may use instead of the local bank.

    Implementations raise on failure; callers fall back or log.
    """

    def fetch_questions(
        self, categories: Sequence[str], difficulties: Sequence[str], max_count: int
    ) -> List[Question]: ...

    def submit_result(self, result: Result) -> Dict[str, Any]: ...

    def fetch_user_stats(self, user_id: str) -> UserStats: ...

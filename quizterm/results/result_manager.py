from __future__ import annotations

"""In-process result history and user statistics.

Results live only as long as the process; nothing is written to disk.
"""

from typing import Dict, List

import numpy as np
import pandas as pd

from .schema import Result, UserStats

RECENT_LIMIT = 5

ANSWER_COLUMNS = ["user_id", "timestamp", "category", "is_correct", "points"]


class ResultHistory:
    def __init__(self) -> None:
        self._results: List[Result] = []

    def __len__(self) -> int:
        return len(self._results)

    def record(self, result: Result) -> None:
        self._results.append(result)

    def for_user(self, user_id: str) -> List[Result]:
        return [r for r in self._results if r.user_id == user_id]

    def answers_frame(self, user_id: str) -> pd.DataFrame:
        rows = [
            {
                "user_id": r.user_id,
                "timestamp": r.timestamp,
                "category": a.category,
                "is_correct": bool(a.is_correct),
                "points": int(a.points_awarded),
            }
            for r in self.for_user(user_id)
            for a in r.answers
        ]
        if not rows:
            return pd.DataFrame({c: pd.Series(dtype="object") for c in ANSWER_COLUMNS})
        return pd.DataFrame(rows, columns=ANSWER_COLUMNS)

    def summarize(self, user_id: str) -> UserStats:
        results = self.for_user(user_id)
        if not results:
            return UserStats()

        pct = np.array([r.percentage for r in results], dtype="float64")
        average = float(np.round(pct.mean(), 2))

        best_category = None
        df = self.answers_frame(user_id)
        if not df.empty:
            acc = df.groupby("category", sort=True)["is_correct"].mean()
            # ties resolve to the alphabetically first category
            best_category = str(acc.idxmax())

        recent: List[Dict[str, object]] = [
            {
                "timestamp": r.timestamp,
                "score": r.score,
                "totalPoints": r.total_points,
                "percentage": round(r.percentage, 2),
            }
            for r in reversed(results[-RECENT_LIMIT:])
        ]
        return UserStats(
            total_quizzes=len(results),
            average_score=average,
            best_category=best_category,
            recent_activity=recent,
        )

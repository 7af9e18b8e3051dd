from __future__ import annotations

"""Result dataclasses: per-question records and the session snapshot."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class AnswerRecord:
    question_id: str
    question: str
    user_answer: str
    correct_answer: str
    is_correct: bool
    points_awarded: int = 0
    timed_out: bool = False
    category: str = ""
    difficulty: str = ""


@dataclass(frozen=True)
class Duration:
    seconds: float

    @property
    def minutes_part(self) -> int:
        return int(self.seconds // 60)

    @property
    def seconds_part(self) -> int:
        return int(self.seconds % 60)

    @property
    def display(self) -> str:
        return f"{self.minutes_part} min {self.seconds_part} sec"


@dataclass(frozen=True)
class Result:
    """Immutable snapshot of a finished (or finishing) session."""

    user_id: str
    score: int
    total_points: int
    percentage: float
    question_count: int
    correct_count: int
    duration: Duration
    feedback: str
    timestamp: str
    answers: Tuple[AnswerRecord, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "score": self.score,
            "totalPoints": self.total_points,
            "percentage": round(self.percentage, 2),
            "questionCount": self.question_count,
            "correctCount": self.correct_count,
            "duration": {
                "minutes": self.duration.minutes_part,
                "seconds": self.duration.seconds_part,
                "total": self.duration.display,
                "ms": int(self.duration.seconds * 1000),
            },
            "answers": {a.question_id: asdict(a) for a in self.answers},
            "feedback": self.feedback,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class UserStats:
    total_quizzes: int = 0
    average_score: float = 0.0
    best_category: Optional[str] = None
    recent_activity: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "UserStats":
        return cls(
            total_quizzes=int(payload.get("totalQuizzes", 0)),
            average_score=float(payload.get("averageScore", 0.0)),
            best_category=payload.get("bestCategory"),
            recent_activity=list(payload.get("recentActivity") or []),
        )

from __future__ import annotations

"""Pydantic models for questions and the feedback table."""

from string import ascii_uppercase
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Question(BaseModel):
    """One quiz question.

    File keys follow the question source format (`question`/`text`,
    `answer`/`correctAnswer`); attributes are snake_case.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    text: str = Field(validation_alias="question")
    options: Optional[List[str]] = None
    correct_answer: str = Field(validation_alias="answer")
    points: int = Field(default=1, gt=0)
    category: str = ""
    difficulty: str = ""
    explanation: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _accept_alternate_keys(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "question" not in data and "text" in data:
            data["question"] = data.pop("text")
        if "answer" not in data:
            for alt in ("correctAnswer", "correct_answer"):
                if alt in data:
                    data["answer"] = data.pop(alt)
                    break
        options = data.get("options")
        answer = data.get("answer")
        if isinstance(options, list) and isinstance(answer, str):
            letter = answer.strip().upper()
            texts = [str(o).strip().lower() for o in options]
            if len(letter) == 1 and letter in ascii_uppercase and letter.lower() not in texts:
                # answer stored as an option letter
                idx = ascii_uppercase.index(letter)
                if idx < len(options):
                    data["answer"] = options[idx]
        return data

    @field_validator("text", "correct_answer", mode="before")
    @classmethod
    def _coerce_str(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("options")
    @classmethod
    def _options_not_empty(cls, v: Optional[List[str]]):
        if v is not None and len(v) == 0:
            raise ValueError("options must not be empty when present")
        if v is not None and len(v) > len(ascii_uppercase):
            raise ValueError("at most 26 options are supported")
        return v

    @model_validator(mode="after")
    def _answer_matches_one_option(self):
        if self.options is None:
            return self
        target = self.correct_answer.strip().lower()
        matches = [o for o in self.options if o.strip().lower() == target]
        if len(matches) != 1:
            raise ValueError(
                f"answer '{self.correct_answer}' must match exactly one option, matched {len(matches)}"
            )
        return self

    @property
    def has_options(self) -> bool:
        return self.options is not None

    def lettered_options(self) -> List[str]:
        return [f"{ascii_uppercase[i]}. {opt}" for i, opt in enumerate(self.options or [])]

    def tagged(self, category: str, difficulty: str) -> "Question":
        return self.model_copy(update={"category": category, "difficulty": difficulty})


class FeedbackBand(BaseModel):
    model_config = ConfigDict(frozen=True)

    threshold: float = Field(ge=0, le=100)
    message: str


DEFAULT_FEEDBACK = (
    FeedbackBand(threshold=80, message="Excellent! Your knowledge is outstanding!"),
    FeedbackBand(threshold=60, message="Good job! You have a solid grasp of the material."),
    FeedbackBand(threshold=40, message="Not bad. There is still room to improve."),
    FeedbackBand(threshold=0, message="Keep learning to improve your knowledge."),
)

from __future__ import annotations

"""Question bank: questions grouped by category and difficulty.

The bank is built once by `load_bank` and is read-only afterwards. Two
source layouts are accepted:

    {category: {difficulty: [question, ...]}}

and the nested layout with explicit sections:

    {"categories": {category: {"questions": {difficulty: [...]}}},
     "feedbackTable": [{"threshold": 80, "message": "..."}]}
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import yaml
from pydantic import ValidationError

from ..errors import LoadError, UnknownCategory, UnknownDifficulty
from .schema import DEFAULT_FEEDBACK, FeedbackBand, Question

logger = logging.getLogger(__name__)

_FEEDBACK_KEYS = ("feedbackTable", "feedback_table", "feedback")


def _default_bank_path() -> Path:
    return Path(__file__).resolve().parents[1] / "resources" / "questions.yml"


class QuestionBank:
    def __init__(
        self,
        questions: Mapping[str, Mapping[str, Sequence[Question]]],
        feedback_table: Optional[Iterable[FeedbackBand]] = None,
    ) -> None:
        self._data: Mapping[str, Mapping[str, Tuple[Question, ...]]] = MappingProxyType(
            {
                cat: MappingProxyType({diff: tuple(qs) for diff, qs in diffs.items()})
                for cat, diffs in questions.items()
            }
        )
        bands = list(feedback_table) if feedback_table else list(DEFAULT_FEEDBACK)
        # descending threshold: first match is the tightest band
        self._feedback: Tuple[FeedbackBand, ...] = tuple(sorted(bands, key=lambda b: b.threshold, reverse=True))

    def __len__(self) -> int:
        return sum(len(qs) for diffs in self._data.values() for qs in diffs.values())

    def __contains__(self, category: object) -> bool:
        return category in self._data

    @property
    def feedback_table(self) -> Tuple[FeedbackBand, ...]:
        return self._feedback

    def categories(self) -> List[str]:
        return list(self._data.keys())

    def difficulties(self, category: Optional[str] = None) -> List[str]:
        """Difficulties of one category, or the union over all categories in first-seen order."""
        if category is not None:
            if category not in self._data:
                raise UnknownCategory(category)
            return list(self._data[category].keys())
        seen: Dict[str, None] = {}
        for diffs in self._data.values():
            for d in diffs:
                seen.setdefault(d, None)
        return list(seen)

    def questions_for(self, categories: Iterable[str], difficulties: Iterable[str]) -> List[Question]:
        """Collect questions for every (category, difficulty) pair.

        Iterates categories in the given order, then difficulties. Missing
        keys are a caller error and raise instead of being skipped.
        """
        difficulties = list(difficulties)
        out: List[Question] = []
        for cat in categories:
            if cat not in self._data:
                raise UnknownCategory(cat)
            by_diff = self._data[cat]
            for diff in difficulties:
                if diff not in by_diff:
                    raise UnknownDifficulty(diff, cat)
                out.extend(by_diff[diff])
        return out


def _read_source(path: Path) -> Any:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise LoadError(f"Cannot read question source {path}: {e}") from e
    try:
        if path.suffix.lower() == ".json":
            return json.loads(raw)
        return yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise LoadError(f"Malformed question source {path}: {e}") from e


def _category_section(node: Any, category: str) -> Mapping[str, Any]:
    if isinstance(node, Mapping) and isinstance(node.get("questions"), Mapping):
        node = node["questions"]
    if not isinstance(node, Mapping):
        raise LoadError(f"Category '{category}' must map difficulty names to question lists")
    return node


def _parse_feedback(raw: Any) -> List[FeedbackBand]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise LoadError("Feedback table must be a list of {threshold, message}")
    try:
        return [FeedbackBand.model_validate(item) for item in raw]
    except ValidationError as e:
        raise LoadError(f"Invalid feedback table: {e}") from e


def load_bank(source: Union[str, Path, Mapping[str, Any], None] = None) -> QuestionBank:
    """Build a QuestionBank from a file path or an already parsed mapping.

    Args:
        source: Path to a JSON/YAML document, a mapping in one of the accepted
            layouts, or None for the packaged sample bank.

    Raises:
        LoadError: unreadable source, wrong shape, invalid question or
            duplicate question id.
    """
    if source is None:
        source = _default_bank_path()
    if isinstance(source, (str, Path)):
        data = _read_source(Path(source))
    else:
        data = source

    if not isinstance(data, Mapping):
        raise LoadError("Question source must be a mapping of categories")

    feedback_raw = None
    for key in _FEEDBACK_KEYS:
        if key in data:
            feedback_raw = data[key]
            break
    feedback = _parse_feedback(feedback_raw)

    cats = data.get("categories") if isinstance(data.get("categories"), Mapping) else data
    questions: Dict[str, Dict[str, List[Question]]] = {}
    seen_ids: set[str] = set()
    for cat, node in cats.items():
        if cat in _FEEDBACK_KEYS:
            continue
        cat = str(cat)
        section = _category_section(node, cat)
        by_diff: Dict[str, List[Question]] = {}
        for diff, items in section.items():
            diff = str(diff)
            if not isinstance(items, list):
                raise LoadError(f"'{cat}/{diff}' must be a list of questions")
            parsed: List[Question] = []
            for n, item in enumerate(items, start=1):
                if not isinstance(item, Mapping):
                    raise LoadError(f"'{cat}/{diff}' item {n} is not an object")
                payload = dict(item)
                payload.setdefault("id", f"{cat}-{diff}-{n}")
                payload["id"] = str(payload["id"])
                payload["category"] = cat
                payload["difficulty"] = diff
                try:
                    q = Question.model_validate(payload)
                except ValidationError as e:
                    raise LoadError(f"Invalid question '{cat}/{diff}' item {n}: {e}") from e
                if q.id in seen_ids:
                    raise LoadError(f"Duplicate question id: {q.id}")
                seen_ids.add(q.id)
                parsed.append(q)
            by_diff[diff] = parsed
        questions[cat] = by_diff

    bank = QuestionBank(questions, feedback)
    logger.debug("Loaded %d questions in %d categories", len(bank), len(questions))
    return bank

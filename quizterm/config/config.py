from __future__ import annotations

"""Runtime configuration for quizterm.

The schema is fixed: every recognised key is a field of `QuizSettings` with a
declared type and constraint. Files use camelCase keys (`timeLimit`), code
may use either the file key or the snake_case attribute name.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import InvalidConfigValue, UnknownKey

logger = logging.getLogger(__name__)


DEFAULT_THEME = {
    "correct": "\x1b[32m",
    "incorrect": "\x1b[31m",
    "normal": "\x1b[0m",
    "highlight": "\x1b[1m",
    "timer": "\x1b[33m",
}


class QuizSettings(BaseModel):
    """Typed configuration values with their defaults."""

    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
        strict=True,
        extra="ignore",
    )

    time_limit: int = Field(30, gt=0, alias="timeLimit")
    shuffle_questions: bool = Field(True, alias="shuffleQuestions")
    max_questions: int = Field(5, gt=0, alias="maxQuestions")
    categories: List[str] = Field(
        default_factory=lambda: ["programming", "mathematics"], min_length=1
    )
    difficulties: List[str] = Field(
        default_factory=lambda: ["easy", "medium", "hard"], min_length=1
    )
    show_feedback: bool = Field(True, alias="showFeedback")
    show_timer: bool = Field(True, alias="showTimer")
    theme: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_THEME))

    @field_validator("categories", "difficulties", mode="before")
    @classmethod
    def _as_list(cls, v: Any) -> Any:
        # sets have no order of their own; store them sorted
        if isinstance(v, (set, frozenset)):
            return sorted(v, key=str)
        if isinstance(v, tuple):
            return list(v)
        return v

    @field_validator("categories", "difficulties")
    @classmethod
    def _unique(cls, v: List[str]) -> List[str]:
        if len(set(v)) != len(v):
            raise ValueError("entries must be unique")
        return v


# file key -> attribute name
_KEY_MAP: Dict[str, str] = {
    (info.alias or name): name for name, info in QuizSettings.model_fields.items()
}
CONFIG_KEYS = tuple(_KEY_MAP.keys())


def _resolve_key(key: str) -> str:
    if key in _KEY_MAP:
        return _KEY_MAP[key]
    if key in QuizSettings.model_fields:
        return key
    raise UnknownKey(key)


class Configuration:
    """Key/value access over a fixed, typed schema.

    `set` validates the value against the key's declared type and raises
    InvalidConfigValue on mismatch.
    """

    def __init__(self, path: Union[str, Path, None] = None) -> None:
        self._settings = QuizSettings()
        if path is not None:
            self.load_from_file(path)

    @property
    def settings(self) -> QuizSettings:
        return self._settings.model_copy(deep=True)

    def get(self, key: str) -> Any:
        name = _resolve_key(key)
        return copy.deepcopy(getattr(self._settings, name))

    def set(self, key: str, value: Any) -> None:
        name = _resolve_key(key)
        try:
            setattr(self._settings, name, value)
        except ValidationError as e:
            msg = "; ".join(err["msg"] for err in e.errors())
            raise InvalidConfigValue(f"Invalid value for '{key}': {value!r} ({msg})") from e

    def as_dict(self) -> Dict[str, Any]:
        """Current values keyed by file key."""
        return self._settings.model_dump(by_alias=True)

    def load_from_file(self, path: Union[str, Path]) -> bool:
        """Merge a config file over the current values, key by key.

        Unknown keys and invalid values are skipped with a warning. When the
        file cannot be read or parsed the current values are kept and False
        is returned.
        """
        p = Path(path)
        try:
            raw = p.read_text(encoding="utf-8")
            if p.suffix.lower() in (".yml", ".yaml"):
                data = yaml.safe_load(raw) or {}
            else:
                data = json.loads(raw)
        except FileNotFoundError:
            logger.error("Config file not found: %s (using defaults)", p)
            return False
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error("Error loading configuration from %s: %s", p, e)
            return False
        if not isinstance(data, dict):
            logger.error("Config file %s must contain a mapping, got %s", p, type(data).__name__)
            return False

        for key, value in data.items():
            try:
                self.set(str(key), value)
            except UnknownKey:
                logger.warning("Ignoring unknown config key '%s' in %s", key, p)
            except InvalidConfigValue as e:
                logger.warning("%s; keeping %r", e, self.get(str(key)))
        return True

    def save_to_file(self, path: Union[str, Path]) -> bool:
        """Write the current values; returns False on I/O failure."""
        p = Path(path)
        data = self.as_dict()
        try:
            if p.suffix.lower() in (".yml", ".yaml"):
                text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
            else:
                text = json.dumps(data, indent=2, ensure_ascii=False)
            p.write_text(text, encoding="utf-8")
        except OSError as e:
            logger.error("Error saving configuration to %s: %s", p, e)
            return False
        logger.debug("Saved configuration to %s", p)
        return True

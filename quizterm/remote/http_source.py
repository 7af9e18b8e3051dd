from __future__ import annotations

"""HTTP client for a remote question bank.

Endpoints (relative to `base_url`):
    GET  /questions?categories=a,b&difficulties=easy&limit=5
    POST /results
    GET  /users/<user_id>/stats
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import requests
from pydantic import ValidationError

from ..bank.schema import Question
from ..errors import RemoteSourceError
from ..results.schema import Result, UserStats

logger = logging.getLogger(__name__)


class HttpQuestionSource:
    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise RemoteSourceError(f"{method} {url} failed: {e}") from e
        except ValueError as e:
            raise RemoteSourceError(f"{method} {url} returned invalid JSON") from e

    def fetch_questions(
        self, categories: Sequence[str], difficulties: Sequence[str], max_count: int
    ) -> List[Question]:
        payload = self._request(
            "GET",
            "/questions",
            params={
                "categories": ",".join(categories),
                "difficulties": ",".join(difficulties),
                "limit": int(max_count),
            },
        )
        items = payload.get("questions") if isinstance(payload, dict) else payload
        if not isinstance(items, list):
            raise RemoteSourceError("questions payload must be a list")
        try:
            questions = [Question.model_validate(item) for item in items]
        except ValidationError as e:
            raise RemoteSourceError(f"invalid question in payload: {e}") from e
        logger.info("Fetched %d questions from %s", len(questions), self.base_url)
        return questions

    def submit_result(self, result: Result) -> Dict[str, Any]:
        ack = self._request("POST", "/results", json=result.to_dict())
        return ack if isinstance(ack, dict) else {"ack": ack}

    def fetch_user_stats(self, user_id: str) -> UserStats:
        payload = self._request("GET", f"/users/{user_id}/stats")
        if not isinstance(payload, dict):
            raise RemoteSourceError("stats payload must be an object")
        return UserStats.from_json(payload)

from __future__ import annotations

"""Threshold-based feedback lookup."""

from typing import Iterable

from ..bank.schema import FeedbackBand


def feedback_for(percentage: float, table: Iterable[FeedbackBand]) -> str:
    """Message of the highest band whose threshold does not exceed `percentage`.

    `table` must be ordered by descending threshold; the bank sorts it at load.
    """
    for band in table:
        if percentage >= band.threshold:
            return band.message
    return ""

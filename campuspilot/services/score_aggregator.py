"""
Score aggregation.

The average is recomputed from the raw score records on every read and
write. No running total is stored, so there is nothing to drift out of
sync when writers interleave.
"""

from typing import Any, Iterable, Mapping

from campuspilot.services.coercion import MISSING, to_number


def average_score(records: Iterable[Mapping[str, Any]]) -> float:
    """
    Arithmetic mean of the "score" field. An empty history averages to 0.
    Non-numeric scores were stored as NaN and propagate into the mean.
    """
    scores = [to_number(record.get("score", MISSING)) for record in records]
    if not scores:
        return 0
    return sum(scores) / len(scores)

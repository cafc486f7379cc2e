"""
Score model and the summary returned with every score read or write.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from campuspilot.models.base import OpenModel


class ScoreIn(OpenModel):
    uid: Optional[str] = None
    subject: Optional[str] = None
    difficulty: Any = None
    score: Any = None  # Coerced to a number
    total: Any = None  # Required, coerced to a number
    timeSpent: Any = None  # Coerced to a number, 0 when absent
    date: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "uid": "firebase-uid",
                "subject": "math",
                "difficulty": "medium",
                "score": 80,
                "total": 100,
                "timeSpent": 45,
            }
        }
    }


class ScoreSummary(BaseModel):
    """Score history for one owner (newest first) and the mean of its scores."""

    records: List[Dict[str, Any]] = Field(default_factory=list)
    average: float = 0

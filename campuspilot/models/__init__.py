"""Pydantic models for request bodies and document serialization helpers."""

from campuspilot.models.classroom import ClassIn
from campuspilot.models.score import ScoreIn, ScoreSummary
from campuspilot.models.task import TaskIn
from campuspilot.models.transaction import TransactionIn
from campuspilot.models.user import UserIn

__all__ = ["UserIn", "TransactionIn", "ClassIn", "ScoreIn", "ScoreSummary", "TaskIn"]

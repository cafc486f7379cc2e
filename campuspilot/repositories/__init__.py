"""One repository per collection, each wrapping the shared MongoStore."""

from campuspilot.repositories.classes import ClassRepository
from campuspilot.repositories.scores import ScoreRepository
from campuspilot.repositories.tasks import TaskRepository
from campuspilot.repositories.transactions import TransactionRepository
from campuspilot.repositories.users import UserRepository

__all__ = [
    "UserRepository",
    "TransactionRepository",
    "ClassRepository",
    "ScoreRepository",
    "TaskRepository",
]

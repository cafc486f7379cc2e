"""
Dependency wiring for the FastAPI app.

Tests replace get_store / get_identity_verifier through app.dependency_overrides.
"""

from typing import Optional

from fastapi import Depends

from campuspilot.config import get_settings
from campuspilot.database import MongoStore
from campuspilot.repositories import (
    ClassRepository,
    ScoreRepository,
    TaskRepository,
    TransactionRepository,
    UserRepository,
)
from campuspilot.services.identity import IdentityVerifier

_store: Optional[MongoStore] = None
_verifier: Optional[IdentityVerifier] = None


def get_store() -> MongoStore:
    """
    Return the process-wide store so the Motor client is shared across requests.
    Creating it does not connect; the first collection lookup does.
    """
    global _store
    if _store is None:
        _store = MongoStore.from_settings(get_settings())
    return _store


def get_identity_verifier() -> IdentityVerifier:
    global _verifier
    if _verifier is None:
        _verifier = IdentityVerifier.from_settings(get_settings())
    return _verifier


def get_user_repository(store: MongoStore = Depends(get_store)) -> UserRepository:
    return UserRepository(store)


def get_transaction_repository(store: MongoStore = Depends(get_store)) -> TransactionRepository:
    return TransactionRepository(store)


def get_class_repository(store: MongoStore = Depends(get_store)) -> ClassRepository:
    return ClassRepository(store)


def get_score_repository(store: MongoStore = Depends(get_store)) -> ScoreRepository:
    return ScoreRepository(store)


def get_task_repository(store: MongoStore = Depends(get_store)) -> TaskRepository:
    return TaskRepository(store)

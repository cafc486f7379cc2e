"""Transaction APIs: record an entry, list a user's entries newest first."""

from typing import Annotated

from fastapi import APIRouter, Depends

from campuspilot.dependencies import get_transaction_repository
from campuspilot.models.serialization import serialize, serialize_many
from campuspilot.models.transaction import TransactionIn
from campuspilot.repositories import TransactionRepository

router = APIRouter()

Transactions = Annotated[TransactionRepository, Depends(get_transaction_repository)]


@router.post("", summary="Add a transaction")
async def create_transaction(data: TransactionIn, transactions: Transactions) -> dict:
    record = await transactions.create(data)
    return {"success": True, "transaction": serialize(record)}


@router.get("/{uid}", summary="List a user's transactions")
async def list_transactions(uid: str, transactions: Transactions) -> list:
    return serialize_many(await transactions.list_by_owner(uid))

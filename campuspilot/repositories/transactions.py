"""Transaction repository (append-only ledger)."""

import logging
from typing import Any, Dict, List

from campuspilot.errors import ValidationError
from campuspilot.models.transaction import TransactionIn
from campuspilot.repositories.base import Repository, is_blank, utc_now_iso
from campuspilot.services.coercion import field_as_number

logger = logging.getLogger(__name__)


class TransactionRepository(Repository):
    collection_name = "transactions"

    async def create(self, data: TransactionIn) -> Dict[str, Any]:
        if is_blank(data.uid):
            raise ValidationError("User UID required")

        # Optional fields (type, category, note) are stored only when sent
        document = {
            **data.to_document(),
            # Non-numeric amounts are kept as NaN rather than rejected
            "amount": field_as_number(data, "amount"),
            "date": data.date or utc_now_iso(),
        }
        record = await self._insert(document)
        logger.debug("Recorded %s transaction for uid=%s", data.type, data.uid)
        return record

    async def list_by_owner(self, uid: str) -> List[Dict[str, Any]]:
        return await self._find({"uid": uid}, newest_first_by="date")

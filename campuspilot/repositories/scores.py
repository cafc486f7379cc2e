"""
Score repository.

Every write and read returns the owner's full history together with the
average recomputed from it (see services.score_aggregator).
"""

import logging
from typing import Any, Dict, List

from campuspilot.errors import ValidationError
from campuspilot.models.score import ScoreIn, ScoreSummary
from campuspilot.repositories.base import Repository, is_blank, utc_now_iso
from campuspilot.services.coercion import field_as_number
from campuspilot.services.score_aggregator import average_score

logger = logging.getLogger(__name__)


class ScoreRepository(Repository):
    collection_name = "scores"

    async def _history(self, uid: str) -> List[Dict[str, Any]]:
        return await self._find({"uid": uid}, newest_first_by="date")

    async def record(self, data: ScoreIn) -> ScoreSummary:
        missing = [name for name in ("uid", "subject", "total") if is_blank(getattr(data, name))]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        # difficulty and any extra attributes are stored only when sent
        document = {
            **data.to_document(),
            "score": field_as_number(data, "score"),
            "total": field_as_number(data, "total"),
            "timeSpent": field_as_number(data, "timeSpent", default=0),
            "date": data.date or utc_now_iso(),
        }
        await self._insert(document)

        # Read back after the insert; concurrent writers for the same uid
        # may or may not be reflected in this snapshot.
        records = await self._history(data.uid)
        average = average_score(records)
        logger.debug("uid=%s now has %d scores (average=%s)", data.uid, len(records), average)
        return ScoreSummary(records=records, average=average)

    async def get_by_owner(self, uid: str) -> ScoreSummary:
        records = await self._history(uid)
        return ScoreSummary(records=records, average=average_score(records))

"""
Score APIs.

Both endpoints return the owner's score history (newest first) with the
average score recomputed from that history.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from campuspilot.dependencies import get_score_repository
from campuspilot.models.score import ScoreIn
from campuspilot.models.serialization import serialize
from campuspilot.repositories import ScoreRepository

router = APIRouter()

Scores = Annotated[ScoreRepository, Depends(get_score_repository)]


@router.post("", summary="Record a score")
async def record_score(data: ScoreIn, scores: Scores) -> dict:
    summary = await scores.record(data)
    return serialize(
        {"success": True, "records": summary.records, "average": summary.average}
    )


@router.get("/{uid}", summary="Get a user's scores and average")
async def get_scores(uid: str, scores: Scores) -> dict:
    summary = await scores.get_by_owner(uid)
    return serialize({"scores": summary.records, "average": summary.average})

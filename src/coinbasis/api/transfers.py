"""Transfers API — detect, list and undo withdrawal/deposit matches."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from coinbasis.api.deps import build_transfer_matcher, get_db, resolve_user
from coinbasis.api.schemas.transfers import MatchRunResponse, TransferMatchResponse
from coinbasis.db.models.user import User

router = APIRouter(prefix="/api/transfers", tags=["transfers"])

DbDep = Annotated[AsyncSession, Depends(get_db)]


@router.post("/match", response_model=MatchRunResponse)
async def match_transfers(db: DbDep, user: User = Depends(resolve_user)) -> MatchRunResponse:
    matched = await build_transfer_matcher(db).find_and_match_transfers(user.id)
    await db.commit()
    return MatchRunResponse(matched=matched)


@router.post("/match/async")
async def queue_transfer_matching(user: User = Depends(resolve_user)) -> dict:
    """Enqueue a Celery task that matches transfers and refreshes the ledger."""
    from coinbasis.workers.tasks import match_transfers_task

    match_transfers_task.delay(str(user.id))
    return {"status": "queued", "user_id": str(user.id)}


@router.get("", response_model=list[TransferMatchResponse])
async def list_transfer_matches(db: DbDep, user: User = Depends(resolve_user)) -> list[TransferMatchResponse]:
    matches = await build_transfer_matcher(db).list_matches(user.id)
    return [TransferMatchResponse.model_validate(m) for m in matches]


@router.delete("/{match_id}")
async def unmatch_transfer(match_id: uuid.UUID, db: DbDep, user: User = Depends(resolve_user)) -> dict:
    """Undo a match. Deleting an unknown or already removed match is not an error."""
    matcher = build_transfer_matcher(db)
    match = await matcher.get_match(match_id)
    if match is not None and match.user_id != user.id:
        raise HTTPException(status_code=404, detail="Transfer match not found")

    await matcher.unmatch_transfer(match_id)
    await db.commit()
    return {"status": "ok"}

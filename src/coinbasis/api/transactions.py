"""Transactions API — build ledger rows from normalized transactions."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from coinbasis.api.deps import get_db, resolve_user
from coinbasis.db.models.user import User
from coinbasis.ledger.transformer import TransactionTransformer

router = APIRouter(prefix="/api/transactions", tags=["transactions"])

DbDep = Annotated[AsyncSession, Depends(get_db)]


@router.post("/transform")
async def transform_transactions(
    db: DbDep,
    user: User = Depends(resolve_user),
    source: Optional[str] = Query(None, description="Only transform rows from this source"),
) -> dict:
    transformed = await TransactionTransformer(db).transform(user.id, source=source)
    await db.commit()
    return {"transformed": transformed}

import uuid
from typing import AsyncGenerator

from dependency_injector.wiring import Provide, inject
from fastapi import Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from coinbasis.config import settings
from coinbasis.container import Container
from coinbasis.db.models.user import User
from coinbasis.db.repos.user_repo import UserRepo
from coinbasis.matching.transfer_matcher import TransferMatcher


@inject
async def get_db(
    session_factory: async_sessionmaker[AsyncSession] = Depends(Provide[Container.session_factory]),
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


async def resolve_user(
    user_id: uuid.UUID = Query(..., description="Owner of the transactions"),
    db: AsyncSession = Depends(get_db),
) -> User:
    user = await UserRepo(db).get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def build_transfer_matcher(db: AsyncSession) -> TransferMatcher:
    """Create a TransferMatcher using the configured window and tolerance."""
    return TransferMatcher(
        db,
        window=settings.transfer_time_window,
        tolerance=settings.transfer_amount_tolerance,
    )

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from coinbasis.db.models.transfer_match import TransferMatch
from coinbasis.domain.enums import MatchMethod


class TransferMatchRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        user_id: uuid.UUID,
        withdrawal_tx_id: uuid.UUID,
        deposit_tx_id: uuid.UUID,
        confidence: Decimal,
        method: MatchMethod,
    ) -> TransferMatch:
        match = TransferMatch(
            user_id=user_id,
            withdrawal_tx_id=withdrawal_tx_id,
            deposit_tx_id=deposit_tx_id,
            match_confidence=confidence,
            match_method=method.value,
        )
        self._session.add(match)
        await self._session.flush()
        return match

    async def get_by_id(self, match_id: uuid.UUID) -> Optional[TransferMatch]:
        result = await self._session.execute(
            select(TransferMatch).where(TransferMatch.id == match_id)
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: uuid.UUID) -> list[TransferMatch]:
        result = await self._session.execute(
            select(TransferMatch)
            .where(TransferMatch.user_id == user_id)
            .order_by(TransferMatch.created_at.desc())
        )
        return list(result.scalars().all())

    async def delete(self, match_id: uuid.UUID) -> bool:
        result = await self._session.execute(
            delete(TransferMatch)
            .where(TransferMatch.id == match_id)
        )
        return result.rowcount > 0

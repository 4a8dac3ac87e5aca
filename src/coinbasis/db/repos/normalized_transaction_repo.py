import uuid
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from coinbasis.db.models.normalized_transaction import NormalizedTransaction
from coinbasis.domain.enums import TxKind


class NormalizedTransactionRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def bulk_insert(self, txs: list[NormalizedTransaction]) -> None:
        self._session.add_all(txs)
        await self._session.flush()

    async def get_by_id(self, tx_id: uuid.UUID) -> Optional[NormalizedTransaction]:
        result = await self._session.execute(
            select(NormalizedTransaction).where(NormalizedTransaction.id == tx_id)
        )
        return result.scalar_one_or_none()

    async def list_unmatched(self, user_id: uuid.UUID, kind: TxKind) -> list[NormalizedTransaction]:
        """Unmatched rows of one kind, oldest first."""
        result = await self._session.execute(
            select(NormalizedTransaction)
            .where(
                NormalizedTransaction.user_id == user_id,
                NormalizedTransaction.kind == kind.value,
                NormalizedTransaction.is_transfer.is_(False),
                NormalizedTransaction.transfer_match_id.is_(None),
            )
            .order_by(NormalizedTransaction.timestamp.asc())
        )
        return list(result.scalars().all())

    async def list_for_user(
        self,
        user_id: uuid.UUID,
        source: Optional[str] = None,
    ) -> list[NormalizedTransaction]:
        stmt = select(NormalizedTransaction).where(NormalizedTransaction.user_id == user_id)
        if source is not None:
            stmt = stmt.where(NormalizedTransaction.source == source)
        result = await self._session.execute(stmt.order_by(NormalizedTransaction.timestamp.asc()))
        return list(result.scalars().all())

    async def mark_as_transfer(self, tx_ids: list[uuid.UUID], match_id: uuid.UUID) -> int:
        """Flag still-unmatched rows as one transfer. Returns how many rows flipped."""
        result = await self._session.execute(
            update(NormalizedTransaction)
            .where(
                NormalizedTransaction.id.in_(tx_ids),
                NormalizedTransaction.is_transfer.is_(False),
                NormalizedTransaction.transfer_match_id.is_(None),
            )
            .values(is_transfer=True, transfer_match_id=match_id)
        )
        return result.rowcount

    async def clear_transfer(self, match_id: uuid.UUID) -> int:
        """Reset both legs of a match. Returns how many rows were reset."""
        result = await self._session.execute(
            update(NormalizedTransaction)
            .where(NormalizedTransaction.transfer_match_id == match_id)
            .values(is_transfer=False, transfer_match_id=None)
        )
        return result.rowcount

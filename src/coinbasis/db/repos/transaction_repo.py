import uuid
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from coinbasis.db.models.transaction import Transaction


class TransactionRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def bulk_insert(self, txs: list[Transaction]) -> None:
        self._session.add_all(txs)
        await self._session.flush()

    async def list_up_to(self, user_id: uuid.UUID, end: datetime) -> list[Transaction]:
        """All ledger rows dated on or before ``end``, oldest first."""
        result = await self._session.execute(
            select(Transaction)
            .where(Transaction.user_id == user_id, Transaction.date <= end)
            .order_by(Transaction.date.asc())
        )
        return list(result.scalars().all())

    async def get_transformed_ids(self, user_id: uuid.UUID) -> set[uuid.UUID]:
        """Normalized transaction ids that already have a ledger row."""
        result = await self._session.execute(
            select(Transaction.normalized_tx_id).where(
                Transaction.user_id == user_id,
                Transaction.normalized_tx_id.is_not(None),
            )
        )
        return set(result.scalars().all())

    async def retype_for_normalized(self, normalized_tx_ids: list[uuid.UUID], tx_type: str) -> int:
        """Change the ledger type of rows created from the given normalized transactions."""
        result = await self._session.execute(
            update(Transaction)
            .where(Transaction.normalized_tx_id.in_(normalized_tx_ids))
            .values(type=tx_type)
        )
        return result.rowcount

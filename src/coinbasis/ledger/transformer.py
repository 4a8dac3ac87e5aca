"""TransactionTransformer — turn normalized transactions into ledger rows."""

import logging
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from coinbasis.db.models.normalized_transaction import NormalizedTransaction
from coinbasis.db.models.transaction import Transaction
from coinbasis.db.repos.normalized_transaction_repo import NormalizedTransactionRepo
from coinbasis.db.repos.transaction_repo import TransactionRepo
from coinbasis.domain.enums import TransactionType, TxKind

logger = logging.getLogger(__name__)

UNCATEGORIZED = "uncategorized"

KIND_TO_TYPE: dict[str, TransactionType] = {
    TxKind.TRADE.value: TransactionType.BUY,
    TxKind.DEPOSIT.value: TransactionType.TRANSFER_IN,
    TxKind.WITHDRAWAL.value: TransactionType.TRANSFER_OUT,
    TxKind.INCOME.value: TransactionType.INCOME,
    TxKind.FEE.value: TransactionType.EXPENSE,
}


def map_kind_to_type(kind: str, is_transfer: bool) -> TransactionType:
    """Ledger type for a normalized kind. Matched transfers become self-transfers."""
    if is_transfer:
        return TransactionType.SELF_TRANSFER
    return KIND_TO_TYPE.get(kind.lower(), TransactionType.INCOME)


class TransactionTransformer:
    """Create one ledger row per normalized transaction, skipping ones already transformed."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._normalized_repo = NormalizedTransactionRepo(session)
        self._tx_repo = TransactionRepo(session)

    async def transform(self, user_id: uuid.UUID, source: Optional[str] = None) -> int:
        """Returns count of new ledger rows."""
        normalized = await self._normalized_repo.list_for_user(user_id, source=source)
        already_done = await self._tx_repo.get_transformed_ids(user_id)

        new_txs = [self._to_transaction(ntx) for ntx in normalized if ntx.id not in already_done]
        if new_txs:
            await self._tx_repo.bulk_insert(new_txs)

        logger.info("Transformed %d new ledger rows for user %s (source=%s)", len(new_txs), user_id, source)
        return len(new_txs)

    def _to_transaction(self, ntx: NormalizedTransaction) -> Transaction:
        return Transaction(
            user_id=ntx.user_id,
            normalized_tx_id=ntx.id,
            source_name=ntx.source,
            date=ntx.timestamp,
            type=map_kind_to_type(ntx.kind, ntx.is_transfer).value,
            asset=ntx.base_asset or "UNKNOWN",
            amount=ntx.base_amount,
            value_usd=ntx.quote_amount,
            fee=ntx.fee_amount,
            tx_hash=ntx.tx_hash,
            category=ntx.category or UNCATEGORIZED,
        )

"""CapitalGainsEngine — loads the ledger and runs lot allocation for a tax year."""

import logging
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from coinbasis.accounting.aggregator import aggregate
from coinbasis.accounting.lots import match_disposals
from coinbasis.db.models.transaction import Transaction
from coinbasis.db.repos.transaction_repo import TransactionRepo
from coinbasis.domain.enums import ACQUISITION_TYPES, DISPOSAL_TYPES, CostBasisMethod
from coinbasis.domain.models.tax import CapitalGainsResult, LedgerEvent
from coinbasis.locks import UserLocks, user_locks

logger = logging.getLogger(__name__)

_ACQUISITION_VALUES = {t.value for t in ACQUISITION_TYPES}
_DISPOSAL_VALUES = {t.value for t in DISPOSAL_TYPES}


def tax_year_bounds(tax_year: int) -> tuple[datetime, datetime]:
    """Inclusive UTC bounds (naive) of a calendar tax year."""
    return (
        datetime(tax_year, 1, 1),
        datetime(tax_year, 12, 31, 23, 59, 59, 999999),
    )


class CapitalGainsEngine:
    """Compute realized capital gains for one user and tax year.

    Nothing is persisted: lots are rebuilt from the ledger on every call, so
    repeated calls over unchanged data return equal results.
    """

    def __init__(self, session: AsyncSession, locks: UserLocks | None = None) -> None:
        self._session = session
        self._locks = locks or user_locks

    async def calculate(
        self,
        user_id: uuid.UUID,
        tax_year: int,
        method: CostBasisMethod | str = CostBasisMethod.FIFO,
    ) -> CapitalGainsResult:
        start, end = tax_year_bounds(tax_year)

        async with self._locks.hold(user_id):
            rows = await TransactionRepo(self._session).list_up_to(user_id, end)

        acquisitions, disposals = classify(rows, start, end)
        items = match_disposals(acquisitions, disposals, method)
        result = aggregate(items)

        logger.info(
            "Capital gains for user %s (%d, %s): %d disposals, %d items, net %s",
            user_id, tax_year, getattr(method, "value", method),
            len(disposals), result.transactions_included, result.net_gain_loss,
        )
        return result


def classify(
    rows: list[Transaction],
    start: datetime,
    end: datetime,
) -> tuple[list[LedgerEvent], list[LedgerEvent]]:
    """Split ledger rows into acquisitions (any date) and in-year disposals.

    Self-transfers and plain transfer-in/out rows are neither.
    """
    acquisitions: list[LedgerEvent] = []
    disposals: list[LedgerEvent] = []

    for row in rows:
        if row.type in _ACQUISITION_VALUES:
            acquisitions.append(_to_event(row))
        elif row.type in _DISPOSAL_VALUES and start <= row.date <= end:
            disposals.append(_to_event(row))

    return acquisitions, disposals


def _to_event(row: Transaction) -> LedgerEvent:
    return LedgerEvent(
        id=row.id,
        type=row.type,
        asset=row.asset,
        amount=row.amount,
        value_usd=row.value_usd if row.value_usd is not None else Decimal(0),
        date=row.date,
    )

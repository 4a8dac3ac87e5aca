"""Domain types for tax lot allocation and capital gains aggregation."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

# Acquisition date of the "unknown cost basis" remainder; rendered as VARIOUS.
UNKNOWN_ACQUISITION_DATE = datetime(1970, 1, 1)


class LedgerEvent(BaseModel):
    """An acquisition or disposal read from the ledger."""

    id: uuid.UUID
    type: str
    asset: str
    amount: Decimal  # Always non-negative
    value_usd: Decimal  # Cost for acquisitions, proceeds for disposals
    date: datetime


class TaxLot(BaseModel):
    """A quantity acquired at one time and cost. Lives for a single calculation."""

    id: uuid.UUID  # = acquisition id
    date: datetime
    asset: str
    amount: Decimal
    cost_basis_usd: Decimal
    remaining_amount: Decimal

    @property
    def unit_cost(self) -> Decimal:
        return self.cost_basis_usd / self.amount if self.amount > 0 else Decimal(0)


class CapitalGainItem(BaseModel):
    """One (lot, disposal) pairing, or the uncovered remainder of a disposal."""

    description: str
    asset: str
    amount: Decimal
    date_acquired: datetime
    date_sold: datetime
    proceeds: Decimal
    cost_basis: Decimal
    gain_or_loss: Decimal  # proceeds - cost_basis
    is_long_term: bool

    @property
    def has_unknown_basis(self) -> bool:
        return self.date_acquired == UNKNOWN_ACQUISITION_DATE


class CapitalGainsResult(BaseModel):
    """Capital gains for a tax year. Loss buckets are stored as positive values."""

    items: list[CapitalGainItem] = []
    short_term_gains: Decimal = Decimal(0)
    short_term_losses: Decimal = Decimal(0)
    long_term_gains: Decimal = Decimal(0)
    long_term_losses: Decimal = Decimal(0)
    total_gains: Decimal = Decimal(0)
    total_losses: Decimal = Decimal(0)
    net_gain_loss: Decimal = Decimal(0)
    transactions_included: int = 0

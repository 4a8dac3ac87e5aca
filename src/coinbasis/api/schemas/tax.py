"""Pydantic schemas for tax API."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class CapitalGainItemResponse(BaseModel):
    description: str
    asset: str
    amount: Decimal
    date_acquired: datetime
    date_sold: datetime
    proceeds: Decimal
    cost_basis: Decimal
    gain_or_loss: Decimal
    is_long_term: bool
    unknown_cost_basis: bool

    model_config = {"from_attributes": True}


class CapitalGainsResponse(BaseModel):
    tax_year: int
    method: str
    short_term_gains: Decimal
    short_term_losses: Decimal
    long_term_gains: Decimal
    long_term_losses: Decimal
    total_gains: Decimal
    total_losses: Decimal
    net_gain_loss: Decimal
    transactions_included: int
    items: list[CapitalGainItemResponse]

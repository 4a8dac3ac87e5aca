"""Domain types for withdrawal/deposit reconciliation."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel

from coinbasis.domain.enums import MatchMethod


class TransferCandidate(BaseModel):
    """A deposit proposed as the other leg of a withdrawal.

    ``withdrawal`` and ``deposit`` are NormalizedTransaction rows (or any object
    exposing the same attributes).
    """

    withdrawal: Any
    deposit: Any
    confidence: Decimal
    method: MatchMethod

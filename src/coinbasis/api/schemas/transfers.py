import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class TransferMatchResponse(BaseModel):
    id: uuid.UUID
    withdrawal_tx_id: uuid.UUID
    deposit_tx_id: uuid.UUID
    match_confidence: Decimal
    match_method: str
    created_at: datetime

    model_config = {"from_attributes": True}


class MatchRunResponse(BaseModel):
    matched: int

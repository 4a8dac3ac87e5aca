import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from coinbasis.db.session import Base, TimestampMixin, UUIDPrimaryKey


class NormalizedTransaction(UUIDPrimaryKey, TimestampMixin, Base):
    """Source-agnostic transaction produced by the normalization layer.

    Append-only: apart from ``is_transfer`` and ``transfer_match_id``, which
    only the transfer repository flips, rows never change after insert.
    """

    __tablename__ = "normalized_transactions"
    __table_args__ = (
        CheckConstraint("base_amount >= 0", name="base_amount_non_negative"),
        Index("ix_normalized_transactions_user_kind_ts", "user_id", "kind", "timestamp"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"))
    source: Mapped[str] = mapped_column(String(50))
    external_id: Mapped[Optional[str]] = mapped_column(String(255), default=None)
    kind: Mapped[str] = mapped_column(String(20))
    base_asset: Mapped[str] = mapped_column(String(50))
    base_amount: Mapped[Decimal]
    quote_asset: Mapped[Optional[str]] = mapped_column(String(50), default=None)
    quote_amount: Mapped[Optional[Decimal]] = mapped_column(default=None)
    fee_asset: Mapped[Optional[str]] = mapped_column(String(50), default=None)
    fee_amount: Mapped[Optional[Decimal]] = mapped_column(default=None)
    timestamp: Mapped[datetime]
    tx_hash: Mapped[Optional[str]] = mapped_column(String(120), default=None, index=True)
    category: Mapped[Optional[str]] = mapped_column(String(50), default=None)
    is_transfer: Mapped[bool] = mapped_column(default=False)
    transfer_match_id: Mapped[Optional[uuid.UUID]] = mapped_column(default=None, index=True)

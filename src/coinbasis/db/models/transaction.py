import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from coinbasis.db.session import USD, Base, TimestampMixin, UUIDPrimaryKey


class Transaction(UUIDPrimaryKey, TimestampMixin, Base):
    """Categorized ledger row. The cost-basis engine reads only this table."""

    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_user_date", "user_id", "date"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"))
    normalized_tx_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("normalized_transactions.id"), default=None, unique=True,
    )
    source_name: Mapped[Optional[str]] = mapped_column(String(50), default=None)
    date: Mapped[datetime]
    type: Mapped[str] = mapped_column(String(20))
    asset: Mapped[str] = mapped_column(String(50))
    amount: Mapped[Decimal]
    value_usd: Mapped[Optional[Decimal]] = mapped_column(USD, default=None)
    fee: Mapped[Optional[Decimal]] = mapped_column(default=None)
    tx_hash: Mapped[Optional[str]] = mapped_column(String(120), default=None)
    category: Mapped[str] = mapped_column(String(50), default="uncategorized")

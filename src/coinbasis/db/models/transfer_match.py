import uuid
from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from coinbasis.db.session import Base, TimestampMixin, UUIDPrimaryKey


class TransferMatch(UUIDPrimaryKey, TimestampMixin, Base):
    """A withdrawal and a deposit recognised as one self-custody movement.

    Each leg is unique, so a transaction belongs to at most one match even when
    two matcher runs race for the same user.
    """

    __tablename__ = "transfer_matches"
    __table_args__ = (
        CheckConstraint("withdrawal_tx_id <> deposit_tx_id", name="distinct_legs"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True)
    withdrawal_tx_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("normalized_transactions.id"), unique=True)
    deposit_tx_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("normalized_transactions.id"), unique=True)
    match_confidence: Mapped[Decimal] = mapped_column(Numeric(5, 4))
    match_method: Mapped[str] = mapped_column(String(30))

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from coinbasis.db.session import Base, TimestampMixin, UUIDPrimaryKey


class User(UUIDPrimaryKey, TimestampMixin, Base):
    """Owner of every transaction, match and calculation."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), default=None)

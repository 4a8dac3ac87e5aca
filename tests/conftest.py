from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from coinbasis.db.models import NormalizedTransaction, Transaction, User
from coinbasis.db.session import Base


@pytest.fixture()
async def engine():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await eng.dispose()


@pytest.fixture()
async def session(engine) -> AsyncSession:
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as sess:
        yield sess


@pytest.fixture()
async def user(session) -> User:
    u = User(email="alice@example.com", name="Alice")
    session.add(u)
    await session.flush()
    return u


@pytest.fixture()
def add_normalized(session, user):
    """Factory fixture: insert a normalized transaction for ``user``."""
    async def _add(kind: str, source: str, asset: str, amount: str, timestamp: datetime, **extra):
        ntx = NormalizedTransaction(
            user_id=user.id,
            source=source,
            kind=kind,
            base_asset=asset,
            base_amount=Decimal(amount),
            timestamp=timestamp,
            **extra,
        )
        session.add(ntx)
        await session.flush()
        return ntx

    return _add


@pytest.fixture()
def add_ledger_row(session, user):
    """Factory fixture: insert a ledger row for ``user``."""
    async def _add(tx_type: str, asset: str, amount: str, value_usd: str, date: datetime):
        tx = Transaction(
            user_id=user.id,
            date=date,
            type=tx_type,
            asset=asset,
            amount=Decimal(amount),
            value_usd=Decimal(value_usd),
        )
        session.add(tx)
        await session.flush()
        return tx

    return _add

"""Integration tests for CapitalGainsEngine against the ledger table."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import select

from coinbasis.accounting.capital_gains import CapitalGainsEngine, tax_year_bounds
from coinbasis.db.models import Transaction
from coinbasis.domain.enums import CostBasisMethod
from coinbasis.ledger.transformer import TransactionTransformer
from coinbasis.locks import UserLocks
from coinbasis.matching.transfer_matcher import TransferMatcher


class TestTaxYearBounds:
    def test_bounds_cover_whole_year(self):
        start, end = tax_year_bounds(2024)
        assert start == datetime(2024, 1, 1)
        assert end == datetime(2024, 12, 31, 23, 59, 59, 999999)


class TestCapitalGainsEngine:
    async def test_long_term_partial_sale(self, session, user, add_ledger_row):
        await add_ledger_row("buy", "BTC", "1", "10000", datetime(2023, 1, 1))
        await add_ledger_row("sell", "BTC", "0.5", "7500", datetime(2024, 2, 1))

        result = await CapitalGainsEngine(session, UserLocks()).calculate(user.id, 2024)

        assert result.long_term_gains == Decimal("2500")
        assert result.short_term_gains == 0
        assert result.short_term_losses == 0
        assert result.long_term_losses == 0
        assert result.net_gain_loss == Decimal("2500")
        assert result.transactions_included == 1
        assert result.items[0].cost_basis == Decimal("5000")

    async def test_transfers_are_ignored(self, session, user, add_ledger_row):
        await add_ledger_row("buy", "BTC", "1", "10000", datetime(2023, 1, 1))
        await add_ledger_row("self-transfer", "BTC", "1", "30000", datetime(2023, 6, 1))
        await add_ledger_row("transfer-out", "BTC", "1", "30000", datetime(2024, 1, 10))
        await add_ledger_row("transfer-in", "BTC", "1", "1", datetime(2024, 1, 11))
        await add_ledger_row("sell", "BTC", "0.5", "7500", datetime(2024, 2, 1))

        result = await CapitalGainsEngine(session, UserLocks()).calculate(user.id, 2024)

        assert result.transactions_included == 1
        assert result.long_term_gains == Decimal("2500")

    async def test_disposals_outside_year_are_excluded(self, session, user, add_ledger_row):
        await add_ledger_row("buy", "ETH", "4", "4000", datetime(2023, 1, 1))
        await add_ledger_row("sell", "ETH", "1", "2000", datetime(2023, 12, 31, 23, 59, 59))
        await add_ledger_row("sell", "ETH", "1", "3000", datetime(2024, 12, 31, 23, 59, 59, 500000))
        await add_ledger_row("sell", "ETH", "1", "5000", datetime(2025, 1, 1))

        result = await CapitalGainsEngine(session, UserLocks()).calculate(user.id, 2024)

        assert result.transactions_included == 1
        assert result.items[0].cost_basis == Decimal("1000")
        assert result.items[0].proceeds == Decimal("3000")

    async def test_acquisitions_after_year_end_are_not_lots(self, session, user, add_ledger_row):
        await add_ledger_row("sell", "BTC", "1", "2000", datetime(2024, 6, 1))
        await add_ledger_row("buy", "BTC", "1", "1000", datetime(2025, 1, 2))

        result = await CapitalGainsEngine(session, UserLocks()).calculate(user.id, 2024)

        assert len(result.items) == 1
        assert result.items[0].has_unknown_basis
        assert result.long_term_gains == Decimal("2000")

    async def test_income_and_expense_rows(self, session, user, add_ledger_row):
        await add_ledger_row("staking", "ETH", "2", "2000", datetime(2024, 1, 1))
        await add_ledger_row("expense", "ETH", "1", "500", datetime(2024, 3, 1))

        result = await CapitalGainsEngine(session, UserLocks()).calculate(user.id, 2024)

        assert result.short_term_losses == Decimal("500")
        assert result.net_gain_loss == Decimal("-500")

    async def test_method_changes_lot_order(self, session, user, add_ledger_row):
        await add_ledger_row("buy", "BTC", "1", "1000", datetime(2024, 1, 1))
        await add_ledger_row("buy", "BTC", "1", "4000", datetime(2024, 2, 1))
        await add_ledger_row("buy", "BTC", "1", "2000", datetime(2024, 3, 1))
        await add_ledger_row("sell", "BTC", "1", "3000", datetime(2024, 4, 1))

        engine = CapitalGainsEngine(session, UserLocks())
        fifo = await engine.calculate(user.id, 2024)
        lifo = await engine.calculate(user.id, 2024, CostBasisMethod.LIFO)
        hifo = await engine.calculate(user.id, 2024, "HIFO")

        assert fifo.net_gain_loss == Decimal("2000")
        assert lifo.net_gain_loss == Decimal("1000")
        assert hifo.net_gain_loss == Decimal("-1000")

    async def test_repeat_calls_are_identical(self, session, user, add_ledger_row):
        await add_ledger_row("buy", "BTC", "2", "20000", datetime(2023, 1, 1))
        await add_ledger_row("sell", "BTC", "1", "15000", datetime(2024, 2, 1))

        engine = CapitalGainsEngine(session, UserLocks())
        first = await engine.calculate(user.id, 2024)
        second = await engine.calculate(user.id, 2024)

        assert first.model_dump() == second.model_dump()

    async def test_empty_ledger(self, session, user):
        result = await CapitalGainsEngine(session, UserLocks()).calculate(user.id, 2024)
        assert result.items == []
        assert result.net_gain_loss == 0


class TestMatchedTransfersEndToEnd:
    async def _history(self, add_normalized, add_ledger_row):
        await add_normalized(
            "trade", "coinbase", "BTC", "1", datetime(2023, 1, 1),
            quote_asset="USD", quote_amount=Decimal("10000"),
        )
        await add_normalized(
            "withdrawal", "coinbase", "BTC", "1", datetime(2024, 1, 10, 12, 0),
            quote_asset="USD", quote_amount=Decimal("40000"),
        )
        await add_normalized(
            "deposit", "ledger", "BTC", "1", datetime(2024, 1, 10, 12, 10),
            quote_asset="USD", quote_amount=Decimal("40000"),
        )
        await add_ledger_row("sell", "BTC", "0.5", "7500", datetime(2024, 2, 1))

    async def _types(self, session, user) -> list[str]:
        result = await session.execute(
            select(Transaction.type).where(Transaction.user_id == user.id).order_by(Transaction.date)
        )
        return list(result.scalars().all())

    async def test_match_then_transform(self, session, user, add_normalized, add_ledger_row):
        await self._history(add_normalized, add_ledger_row)
        locks = UserLocks()

        assert await TransferMatcher(session, locks).find_and_match_transfers(user.id) == 1
        assert await TransactionTransformer(session).transform(user.id) == 3
        result = await CapitalGainsEngine(session, locks).calculate(user.id, 2024)

        assert await self._types(session, user) == ["buy", "self-transfer", "self-transfer", "sell"]
        assert result.transactions_included == 1
        assert result.long_term_gains == Decimal("2500")
        assert result.net_gain_loss == Decimal("2500")

    async def test_transform_then_match(self, session, user, add_normalized, add_ledger_row):
        await self._history(add_normalized, add_ledger_row)
        locks = UserLocks()

        await TransactionTransformer(session).transform(user.id)
        await TransferMatcher(session, locks).find_and_match_transfers(user.id)
        result = await CapitalGainsEngine(session, locks).calculate(user.id, 2024)

        assert await self._types(session, user) == ["buy", "self-transfer", "self-transfer", "sell"]
        assert [item.cost_basis for item in result.items] == [Decimal("5000")]
        assert result.net_gain_loss == Decimal("2500")

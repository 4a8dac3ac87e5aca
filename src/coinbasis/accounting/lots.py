"""Tax lot allocation — pure functions, no DB dependency.

Lots are rebuilt from the acquisition history on every call and consumed by
disposals in chronological order. FIFO, LIFO and HIFO only differ in the order
lots are walked.
"""

import logging
from collections import defaultdict
from datetime import timedelta
from decimal import Decimal

from coinbasis.domain.enums import CostBasisMethod
from coinbasis.domain.models.tax import (
    UNKNOWN_ACQUISITION_DATE,
    CapitalGainItem,
    LedgerEvent,
    TaxLot,
)

logger = logging.getLogger(__name__)

# Pure duration: leap days are not taken into account.
LONG_TERM_THRESHOLD = timedelta(days=365)


def is_long_term(date_acquired, date_sold) -> bool:
    """Held strictly longer than 365 x 24h. Exactly 365 days is short-term."""
    return (date_sold - date_acquired) > LONG_TERM_THRESHOLD


def build_lots(
    acquisitions: list[LedgerEvent],
    method: CostBasisMethod | str = CostBasisMethod.FIFO,
) -> dict[str, list[TaxLot]]:
    """Group acquisitions by asset and order each group for ``method``.

    Args:
        acquisitions: Sorted by date, oldest first.
        method: FIFO / LIFO / HIFO. Unrecognised values are ordered like FIFO.

    Returns:
        asset -> lots in the order disposals consume them.
    """
    lots_by_asset: dict[str, list[TaxLot]] = defaultdict(list)
    for acq in acquisitions:
        lots_by_asset[acq.asset].append(TaxLot(
            id=acq.id,
            date=acq.date,
            asset=acq.asset,
            amount=acq.amount,
            cost_basis_usd=acq.value_usd,
            remaining_amount=acq.amount,
        ))

    method = _resolve_method(method)
    if method == CostBasisMethod.LIFO:
        for lots in lots_by_asset.values():
            lots.reverse()
    elif method == CostBasisMethod.HIFO:
        for asset, lots in lots_by_asset.items():
            # sorted() is stable, equal unit costs keep chronological order
            lots_by_asset[asset] = sorted(lots, key=lambda lot: lot.unit_cost, reverse=True)

    return dict(lots_by_asset)


def allocate_disposal(disposal: LedgerEvent, lots: list[TaxLot]) -> list[CapitalGainItem]:
    """Consume ``lots`` in order to cover one disposal.

    Mutates ``remaining_amount`` on the lots it draws from. Any amount left
    uncovered is emitted as a single item with zero cost basis.
    """
    items: list[CapitalGainItem] = []
    amount_to_sell = disposal.amount
    proceeds_per_unit = disposal.value_usd / amount_to_sell if amount_to_sell > 0 else Decimal(0)

    for lot in lots:
        if amount_to_sell <= 0:
            break
        if lot.remaining_amount <= 0:
            continue

        amount_from_lot = min(lot.remaining_amount, amount_to_sell)
        cost_basis_per_unit = lot.cost_basis_usd / lot.amount if lot.amount > 0 else Decimal(0)

        proceeds = proceeds_per_unit * amount_from_lot
        cost_basis = cost_basis_per_unit * amount_from_lot

        items.append(CapitalGainItem(
            description=f"{amount_from_lot:.8f} {disposal.asset}",
            asset=disposal.asset,
            amount=amount_from_lot,
            date_acquired=lot.date,
            date_sold=disposal.date,
            proceeds=proceeds,
            cost_basis=cost_basis,
            gain_or_loss=proceeds - cost_basis,
            is_long_term=is_long_term(lot.date, disposal.date),
        ))

        lot.remaining_amount -= amount_from_lot
        amount_to_sell -= amount_from_lot

    if amount_to_sell > 0:
        remaining_proceeds = proceeds_per_unit * amount_to_sell
        logger.debug(
            "Disposal %s: %s %s without acquisition history",
            disposal.id, amount_to_sell, disposal.asset,
        )
        items.append(CapitalGainItem(
            description=f"{amount_to_sell:.8f} {disposal.asset} (unknown cost basis)",
            asset=disposal.asset,
            amount=amount_to_sell,
            date_acquired=UNKNOWN_ACQUISITION_DATE,
            date_sold=disposal.date,
            proceeds=remaining_proceeds,
            cost_basis=Decimal(0),
            gain_or_loss=remaining_proceeds,
            is_long_term=True,
        ))

    return items


def match_disposals(
    acquisitions: list[LedgerEvent],
    disposals: list[LedgerEvent],
    method: CostBasisMethod | str = CostBasisMethod.FIFO,
) -> list[CapitalGainItem]:
    """Allocate every disposal against a fresh set of lots.

    Args:
        acquisitions: Sorted by date, oldest first.
        disposals: Sorted by date, oldest first.

    Returns:
        Items in disposal order, then lot order within a disposal.
    """
    lots_by_asset = build_lots(acquisitions, method)
    items: list[CapitalGainItem] = []
    for disposal in disposals:
        items.extend(allocate_disposal(disposal, lots_by_asset.get(disposal.asset, [])))
    return items


def _resolve_method(method: CostBasisMethod | str) -> CostBasisMethod:
    try:
        return CostBasisMethod(method)
    except ValueError:
        logger.warning("Unknown cost basis method %r, using FIFO ordering", method)
        return CostBasisMethod.FIFO

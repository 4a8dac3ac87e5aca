"""Reduce capital gain items to short/long-term totals."""

from decimal import Decimal

from coinbasis.domain.models.tax import CapitalGainItem, CapitalGainsResult


def aggregate(items: list[CapitalGainItem]) -> CapitalGainsResult:
    """Bucket each item by term and sign. Zero gains count as gains."""
    short_term_gains = Decimal(0)
    short_term_losses = Decimal(0)
    long_term_gains = Decimal(0)
    long_term_losses = Decimal(0)

    for item in items:
        if item.gain_or_loss >= 0:
            if item.is_long_term:
                long_term_gains += item.gain_or_loss
            else:
                short_term_gains += item.gain_or_loss
        elif item.is_long_term:
            long_term_losses += abs(item.gain_or_loss)
        else:
            short_term_losses += abs(item.gain_or_loss)

    total_gains = short_term_gains + long_term_gains
    total_losses = short_term_losses + long_term_losses

    return CapitalGainsResult(
        items=list(items),
        short_term_gains=short_term_gains,
        short_term_losses=short_term_losses,
        long_term_gains=long_term_gains,
        long_term_losses=long_term_losses,
        total_gains=total_gains,
        total_losses=total_losses,
        net_gain_loss=total_gains - total_losses,
        transactions_included=len(items),
    )

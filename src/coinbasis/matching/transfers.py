"""Withdrawal/deposit pairing heuristics — pure functions, no DB dependency.

Matching is greedy: withdrawals are visited oldest first and each one claims
the first acceptable deposit still in the pool. The result is order dependent
and not a globally optimal pairing.
"""

from datetime import timedelta
from decimal import Decimal
from typing import Optional

from coinbasis.domain.enums import MatchMethod
from coinbasis.domain.models.transfer import TransferCandidate

TIME_WINDOW = timedelta(hours=1)
AMOUNT_TOLERANCE = Decimal("0.0001")  # 0.01%
MAX_HEURISTIC_CONFIDENCE = Decimal("0.99")
FEE_ADJUSTED_FACTOR = Decimal("0.95")
HASH_CONFIDENCE = Decimal("1.0")


def amounts_match(amount1: Decimal, amount2: Decimal, tolerance: Decimal = AMOUNT_TOLERANCE) -> bool:
    """Relative difference against the mean is within ``tolerance``."""
    avg = (amount1 + amount2) / 2
    if avg <= 0:
        return False
    return abs(amount1 - amount2) / avg <= tolerance


def calculate_confidence(withdrawal, deposit, window: timedelta = TIME_WINDOW) -> Decimal:
    """0.5 base, up to 0.3 for time proximity, 0.2 for the same asset. Capped at 0.99."""
    time_diff = abs(deposit.timestamp - withdrawal.timestamp)
    if window <= timedelta(0):
        time_score = Decimal(0)
    else:
        time_score = 1 - Decimal(time_diff // timedelta(microseconds=1)) / Decimal(window // timedelta(microseconds=1))
    confidence = Decimal("0.5") + time_score * Decimal("0.3")
    if withdrawal.base_asset == deposit.base_asset:
        confidence += Decimal("0.2")
    return min(confidence, MAX_HEURISTIC_CONFIDENCE)


def candidate_deposits(withdrawal, deposits: list, window: timedelta = TIME_WINDOW) -> list:
    """Deposits within the time window, of the same asset, from another source."""
    window_start = withdrawal.timestamp - window
    window_end = withdrawal.timestamp + window
    return [
        d for d in deposits
        if window_start <= d.timestamp <= window_end
        and d.base_asset == withdrawal.base_asset
        and d.source != withdrawal.source
    ]


def find_matching_deposit(
    withdrawal,
    deposits: list,
    window: timedelta = TIME_WINDOW,
    tolerance: Decimal = AMOUNT_TOLERANCE,
) -> Optional[TransferCandidate]:
    """Find the deposit that completes ``withdrawal``, trying hash, amount, then net-of-fee amount."""
    if withdrawal.tx_hash:
        for deposit in deposits:
            if deposit.tx_hash and deposit.tx_hash == withdrawal.tx_hash:
                return TransferCandidate(
                    withdrawal=withdrawal,
                    deposit=deposit,
                    confidence=HASH_CONFIDENCE,
                    method=MatchMethod.TX_HASH,
                )

    candidates = candidate_deposits(withdrawal, deposits, window)
    if not candidates:
        return None

    withdrawal_amount = withdrawal.base_amount or Decimal(0)
    for deposit in candidates:
        if amounts_match(withdrawal_amount, deposit.base_amount or Decimal(0), tolerance):
            return TransferCandidate(
                withdrawal=withdrawal,
                deposit=deposit,
                confidence=calculate_confidence(withdrawal, deposit, window),
                method=MatchMethod.AMOUNT_TIME,
            )

    if withdrawal.fee_asset != withdrawal.base_asset:
        return None

    net_amount = withdrawal_amount - (withdrawal.fee_amount or Decimal(0))
    if net_amount <= 0:
        return None

    for deposit in candidates:
        if amounts_match(net_amount, deposit.base_amount or Decimal(0), tolerance):
            return TransferCandidate(
                withdrawal=withdrawal,
                deposit=deposit,
                confidence=calculate_confidence(withdrawal, deposit, window) * FEE_ADJUSTED_FACTOR,
                method=MatchMethod.AMOUNT_TIME_FEE_ADJUSTED,
            )

    return None


def pair_transfers(
    withdrawals: list,
    deposits: list,
    window: timedelta = TIME_WINDOW,
    tolerance: Decimal = AMOUNT_TOLERANCE,
) -> list[TransferCandidate]:
    """Greedily pair withdrawals with deposits.

    Args:
        withdrawals: Unmatched withdrawals, oldest first.
        deposits: Unmatched deposits, oldest first. Not modified.

    Returns:
        One candidate per matched withdrawal, in withdrawal order. No deposit
        appears twice.
    """
    pool = list(deposits)
    pairs: list[TransferCandidate] = []
    for withdrawal in withdrawals:
        candidate = find_matching_deposit(withdrawal, pool, window, tolerance)
        if candidate is None:
            continue
        pairs.append(candidate)
        pool.remove(candidate.deposit)
    return pairs

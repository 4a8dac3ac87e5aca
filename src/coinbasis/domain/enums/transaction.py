from enum import Enum


class TxKind(str, Enum):
    """Canonical kind assigned by the normalization layer."""

    TRADE = "trade"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    INCOME = "income"
    FEE = "fee"


class TransactionType(str, Enum):
    """Ledger transaction type consumed by the cost-basis engine."""

    BUY = "buy"
    SELL = "sell"
    INCOME = "income"
    MINING = "mining"
    STAKING = "staking"
    AIRDROP = "airdrop"
    GIFT_RECEIVED = "gift-received"
    EXPENSE = "expense"
    GIFT_SENT = "gift-sent"
    TRANSFER_IN = "transfer-in"
    TRANSFER_OUT = "transfer-out"
    SELF_TRANSFER = "self-transfer"


ACQUISITION_TYPES = frozenset({
    TransactionType.BUY,
    TransactionType.INCOME,
    TransactionType.MINING,
    TransactionType.STAKING,
    TransactionType.AIRDROP,
    TransactionType.GIFT_RECEIVED,
})

DISPOSAL_TYPES = frozenset({
    TransactionType.SELL,
    TransactionType.EXPENSE,
    TransactionType.GIFT_SENT,
})

from coinbasis.db.models.normalized_transaction import NormalizedTransaction
from coinbasis.db.models.transaction import Transaction
from coinbasis.db.models.transfer_match import TransferMatch
from coinbasis.db.models.user import User

__all__ = [
    "NormalizedTransaction",
    "Transaction",
    "TransferMatch",
    "User",
]

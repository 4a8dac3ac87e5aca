from coinbasis.db.repos.normalized_transaction_repo import NormalizedTransactionRepo
from coinbasis.db.repos.transaction_repo import TransactionRepo
from coinbasis.db.repos.transfer_match_repo import TransferMatchRepo
from coinbasis.db.repos.user_repo import UserRepo

__all__ = ["NormalizedTransactionRepo", "TransactionRepo", "TransferMatchRepo", "UserRepo"]

"""Domain exceptions."""


class CoinbasisError(Exception):
    """Base for all coinbasis errors."""


class TransferConflictError(CoinbasisError):
    """One leg of a transfer pair was already claimed by another match."""

    def __init__(self, withdrawal_tx_id, deposit_tx_id) -> None:
        self.withdrawal_tx_id = withdrawal_tx_id
        self.deposit_tx_id = deposit_tx_id
        super().__init__(
            f"Transfer legs {withdrawal_tx_id} / {deposit_tx_id} are already matched"
        )

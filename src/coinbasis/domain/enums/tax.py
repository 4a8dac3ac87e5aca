from enum import Enum


class CostBasisMethod(str, Enum):
    """Lot selection order used when matching a disposal against lots."""

    FIFO = "FIFO"
    LIFO = "LIFO"
    HIFO = "HIFO"


class MatchMethod(str, Enum):
    """How a withdrawal/deposit pair was recognised as a self-transfer."""

    TX_HASH = "tx_hash"
    AMOUNT_TIME = "amount_time"
    AMOUNT_TIME_FEE_ADJUSTED = "amount_time_fee_adjusted"


class ExportFormat(str, Enum):
    FORM_8949 = "form8949"
    TURBOTAX = "turbotax"
    TAXACT = "taxact"
    XLSX = "xlsx"

from coinbasis.domain.enums.tax import CostBasisMethod, ExportFormat, MatchMethod
from coinbasis.domain.enums.transaction import (
    ACQUISITION_TYPES,
    DISPOSAL_TYPES,
    TransactionType,
    TxKind,
)

__all__ = [
    "ACQUISITION_TYPES",
    "DISPOSAL_TYPES",
    "CostBasisMethod",
    "ExportFormat",
    "MatchMethod",
    "TransactionType",
    "TxKind",
]

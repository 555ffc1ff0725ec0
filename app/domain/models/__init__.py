"""
Domain Models Package
Export all domain entities
"""

from .ledger import (
    DebitCredit,
    LedgerEntry,
    LedgerSummary,
    VoucherCategory,
)
from .portfolio import PortfolioStats
from .trade import (
    CashFlow,
    Trade,
    TradeSide,
)
from .tradebook import (
    PositionStatus,
    StatusFilter,
    Tradebook,
    TradebookSummary,
    TradeGroup,
)

__all__ = [
    # Enums
    "PositionStatus",
    "StatusFilter",
    "TradeSide",
    "VoucherCategory",

    # Entities
    "CashFlow",
    "DebitCredit",
    "LedgerEntry",
    "LedgerSummary",
    "PortfolioStats",
    "Trade",
    "Tradebook",
    "TradebookSummary",
    "TradeGroup",
]

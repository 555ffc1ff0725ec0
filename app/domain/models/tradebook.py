"""
DOMAIN MODELS — TRADEBOOK & PnL

Per (symbol, account) position groups and the tradebook summary.
No database access. No market data fetching.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional

from app.domain.models.trade import Trade


class PositionStatus(str, Enum):
    """Position lifecycle"""
    ACTIVE = "active"
    SOLD = "sold"


class StatusFilter(str, Enum):
    """Tradebook status filter"""
    ALL = "all"
    ACTIVE = "active"
    SOLD = "sold"

    def accepts(self, status: PositionStatus) -> bool:
        return self == StatusFilter.ALL or self.value == status.value


@dataclass
class TradeGroup:
    """
    Reconciled position for one symbol in one account.
    """
    symbol: str
    account_id: Optional[int]
    account_name: str
    first_trade_date: date
    last_trade_date: date
    total_buy_quantity: float = 0.0
    total_sell_quantity: float = 0.0
    total_buy_value: float = 0.0
    total_sell_value: float = 0.0
    net_quantity: float = 0.0
    avg_buy_price: float = 0.0
    avg_sell_price: float = 0.0
    current_price: float = 0.0
    current_value: float = 0.0
    realized_pnl: float = 0.0
    realized_pnl_pct: float = 0.0
    unrealized_pnl: float = 0.0
    unrealized_pnl_pct: float = 0.0
    status: PositionStatus = PositionStatus.ACTIVE
    xirr: Optional[float] = None
    trades: List[Trade] = field(default_factory=list)

    @property
    def total_pnl(self) -> float:
        return self.realized_pnl + self.unrealized_pnl


@dataclass(frozen=True)
class TradebookSummary:
    """
    Totals across the (filtered) tradebook.
    """
    total_stocks: int
    active_stocks: int
    sold_stocks: int
    total_buy_value: float
    total_sell_value: float
    total_realized_pnl: float
    total_unrealized_pnl: float

    @property
    def total_pnl(self) -> float:
        return self.total_realized_pnl + self.total_unrealized_pnl


@dataclass(frozen=True)
class Tradebook:
    """Reconciled groups plus summary"""
    groups: List[TradeGroup]
    summary: TradebookSummary

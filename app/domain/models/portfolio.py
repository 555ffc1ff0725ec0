"""
DOMAIN MODELS — PORTFOLIO STATS

Consolidated view across every reconciled holding plus the funds ledger.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PortfolioStats:
    """
    Portfolio-wide totals.

    total_investment is the cost basis of units still held, not all-time buys.
    """
    account_id: Optional[int]
    account_name: str
    total_investment: float
    total_invested_from_ledger: float
    current_value: float
    total_realized_pnl: float
    total_unrealized_pnl: float
    total_sold_value: float
    total_sold_cost: float
    holdings_count: int
    active_holdings_count: int
    sold_holdings_count: int
    xirr: Optional[float] = None

    @property
    def total_pnl(self) -> float:
        return self.total_realized_pnl + self.total_unrealized_pnl

    @property
    def total_pnl_pct(self) -> float:
        if self.total_investment <= 0:
            return 0.0
        return (self.total_pnl / self.total_investment) * 100.0

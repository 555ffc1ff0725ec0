from typing import Optional

from pydantic import BaseModel

from app.config import settings
from app.domain.models import PortfolioStats


class PortfolioStatsSchema(BaseModel):
    account_id: Optional[int]
    account_name: str
    total_investment: float
    total_invested_from_ledger: float
    current_value: float
    total_pnl: float
    total_pnl_pct: float
    total_realized_pnl: float
    total_unrealized_pnl: float
    total_sold_value: float
    total_sold_cost: float
    xirr: Optional[float]
    holdings_count: int
    active_holdings_count: int
    sold_holdings_count: int

    @classmethod
    def from_domain(cls, stats: PortfolioStats) -> "PortfolioStatsSchema":
        digits = settings.DISPLAY_DECIMALS
        return cls(
            account_id=stats.account_id,
            account_name=stats.account_name,
            total_investment=round(stats.total_investment, digits),
            total_invested_from_ledger=round(stats.total_invested_from_ledger, digits),
            current_value=round(stats.current_value, digits),
            total_pnl=round(stats.total_pnl, digits),
            total_pnl_pct=round(stats.total_pnl_pct, digits),
            total_realized_pnl=round(stats.total_realized_pnl, digits),
            total_unrealized_pnl=round(stats.total_unrealized_pnl, digits),
            total_sold_value=round(stats.total_sold_value, digits),
            total_sold_cost=round(stats.total_sold_cost, digits),
            xirr=None if stats.xirr is None else round(stats.xirr, digits),
            holdings_count=stats.holdings_count,
            active_holdings_count=stats.active_holdings_count,
            sold_holdings_count=stats.sold_holdings_count,
        )

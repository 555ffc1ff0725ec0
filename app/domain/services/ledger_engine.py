"""
LEDGER ENGINE
Per-account funds ledger totals and portfolio-level XIRR

RESPONSIBILITIES:
- Total debit / credit per account
- Voucher category breakdown
- Invested value (funds added - funds withdrawn)
- Portfolio XIRR from ledger postings + current holdings value
- Consolidated portfolio stats (tradebook totals + ledger)
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from app.domain.models import (
    LedgerEntry,
    LedgerSummary,
    PortfolioStats,
    PositionStatus,
    Tradebook,
)
from app.domain.services.xirr_engine import calculate_portfolio_xirr
from app.domain.services.xirr_solver import XirrSolver

logger = logging.getLogger(__name__)

CONSOLIDATED = "Consolidated"


class LedgerEngine:
    """
    Ledger Engine
    Aggregates postings; never decides what a posting means beyond its voucher type
    """

    def __init__(self, solver: Optional[XirrSolver] = None):
        self.solver = solver or XirrSolver()

    def summarize(
        self,
        entries: Iterable[LedgerEntry],
        account_names: Optional[Dict[int, str]] = None,
    ) -> List[LedgerSummary]:
        """
        Group postings by account

        Returns:
            One summary per account, in first-seen order
        """
        account_names = account_names or {}
        summaries: Dict[Optional[int], LedgerSummary] = {}

        for entry in entries:
            summary = summaries.get(entry.account_id)
            if summary is None:
                summary = LedgerSummary(
                    account_id=entry.account_id,
                    account_name=account_names.get(entry.account_id, "Unknown"),
                )
                summaries[entry.account_id] = summary

            summary.entry_count += 1
            summary.total_debit += entry.debit
            summary.total_credit += entry.credit

            bucket = summary.categories[entry.category]
            bucket.debit += entry.debit
            bucket.credit += entry.credit

        logger.info("Ledger summarized for %d accounts", len(summaries))
        return list(summaries.values())

    def portfolio_xirr(
        self,
        entries: Sequence[LedgerEntry],
        current_value: float,
        valuation_date: Optional[date] = None,
    ) -> Optional[float]:
        """Portfolio XIRR (%) from ledger postings, or None"""
        return calculate_portfolio_xirr(
            entries,
            current_value,
            valuation_date=valuation_date,
            solver=self.solver,
        )

    def portfolio_stats(
        self,
        tradebook: Tradebook,
        entries: Sequence[LedgerEntry],
        valuation_date: Optional[date] = None,
        account_id: Optional[int] = None,
        account_name: Optional[str] = None,
    ) -> PortfolioStats:
        """
        Consolidated stats: holdings totals from the tradebook, portfolio XIRR
        from the ledger valued at the summed current value of held units

        Args:
            tradebook: Reconciled tradebook (unfiltered for a full view)
            entries: Ledger postings for the same account scope
            valuation_date: Terminal valuation date for XIRR (default: today)
            account_id: Scope label; None means consolidated
            account_name: Display name for the scope
        """
        groups = tradebook.groups
        current_value = sum(g.current_value for g in groups)

        stats = PortfolioStats(
            account_id=account_id,
            account_name=account_name or (CONSOLIDATED if account_id is None else "Unknown"),
            total_investment=sum(g.net_quantity * g.avg_buy_price for g in groups),
            total_invested_from_ledger=sum(e.debit for e in entries),
            current_value=current_value,
            total_realized_pnl=sum(g.realized_pnl for g in groups),
            total_unrealized_pnl=sum(g.unrealized_pnl for g in groups),
            total_sold_value=sum(g.total_sell_value for g in groups),
            total_sold_cost=sum(g.total_sell_quantity * g.avg_buy_price for g in groups),
            holdings_count=len(groups),
            active_holdings_count=sum(1 for g in groups if g.status == PositionStatus.ACTIVE),
            sold_holdings_count=sum(1 for g in groups if g.status == PositionStatus.SOLD),
            xirr=self.portfolio_xirr(entries, current_value, valuation_date=valuation_date),
        )

        logger.info(
            "Portfolio stats | holdings=%d invested=%.2f value=%.2f pnl=%.2f xirr=%s",
            stats.holdings_count,
            stats.total_investment,
            stats.current_value,
            stats.total_pnl,
            stats.xirr,
        )
        return stats

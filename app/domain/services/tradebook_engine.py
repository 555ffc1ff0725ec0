"""
TRADEBOOK ENGINE
Reconcile raw trades into per (symbol, account) positions

RESPONSIBILITIES:
- Group trades by symbol and account
- Net position, average buy/sell price
- Realized & unrealized PnL (average cost)
- Per-group XIRR
- Status filter and summary totals

RULES:
❌ No price fetching (prices are passed in)
❌ No rounding (schemas round for display)
✅ Missing price -> 0, XIRR degrades to None
✅ Groups are independent
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from app.config import settings
from app.domain.models import (
    PositionStatus,
    StatusFilter,
    Trade,
    Tradebook,
    TradebookSummary,
    TradeGroup,
)
from app.domain.services.cash_flow_builder import sort_trades
from app.domain.services.xirr_engine import calculate_stock_xirr
from app.domain.services.xirr_solver import XirrSolver
from app.utils.time import resolve_valuation_date

logger = logging.getLogger(__name__)

GroupKey = Tuple[str, Optional[int]]

UNKNOWN_ACCOUNT = "Unknown"


class TradebookEngine:
    """
    Tradebook Engine
    Turns an unordered trade stream into reconciled positions
    """

    def __init__(
        self,
        solver: Optional[XirrSolver] = None,
        position_epsilon: Optional[float] = None,
    ):
        """
        Args:
            solver: XIRR solver shared by every group
            position_epsilon: |net quantity| at or below which a position is closed
        """
        self.solver = solver or XirrSolver()
        self.position_epsilon = (
            settings.POSITION_EPSILON if position_epsilon is None else position_epsilon
        )

    def build(
        self,
        trades: Iterable[Trade],
        prices: Dict[str, float],
        account_names: Optional[Dict[int, str]] = None,
        status: StatusFilter = StatusFilter.ALL,
        valuation_date: Optional[date] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Tradebook:
        """
        Build the reconciled tradebook

        Args:
            trades: Trades across any symbols/accounts, any order
            prices: Current price per symbol (missing -> 0)
            account_names: account_id -> display name
            status: Keep all, only active or only sold positions
            valuation_date: Terminal valuation date for XIRR (default: today)
            from_date: Earliest trade date kept (inclusive)
            to_date: Latest trade date kept (inclusive)

        Returns:
            Tradebook with groups sorted by symbol, then account
        """
        account_names = account_names or {}
        valuation_date = resolve_valuation_date(valuation_date)
        status = StatusFilter(status)

        if from_date is not None or to_date is not None:
            trades = [
                t for t in trades
                if (from_date is None or t.trade_date >= from_date)
                and (to_date is None or t.trade_date <= to_date)
            ]

        grouped = self.group_trades(trades)
        logger.info("Reconciling %d trade groups", len(grouped))

        groups: List[TradeGroup] = []
        for (symbol, account_id), group_trades in grouped.items():
            group = self.reconcile_group(
                symbol=symbol,
                account_id=account_id,
                account_name=account_names.get(account_id, UNKNOWN_ACCOUNT),
                trades=group_trades,
                current_price=prices.get(symbol) or 0.0,
                valuation_date=valuation_date,
            )
            if not status.accepts(group.status):
                continue
            groups.append(group)

        groups.sort(key=lambda g: (g.symbol, g.account_id is None, g.account_id or 0))
        summary = self.summarize(groups)

        logger.info(
            "Tradebook ready | groups=%d active=%d sold=%d realized=%.2f unrealized=%.2f",
            summary.total_stocks,
            summary.active_stocks,
            summary.sold_stocks,
            summary.total_realized_pnl,
            summary.total_unrealized_pnl,
        )
        return Tradebook(groups=groups, summary=summary)

    @staticmethod
    def group_trades(trades: Iterable[Trade]) -> Dict[GroupKey, List[Trade]]:
        """(symbol, account_id) -> trades in input order"""
        grouped: Dict[GroupKey, List[Trade]] = {}
        for trade in trades:
            grouped.setdefault((trade.symbol, trade.account_id), []).append(trade)
        return grouped

    def reconcile_group(
        self,
        symbol: str,
        account_id: Optional[int],
        account_name: str,
        trades: List[Trade],
        current_price: float,
        valuation_date: date,
    ) -> TradeGroup:
        """
        Position, PnL and XIRR for one (symbol, account) grouping
        Trades may arrive in any order; they are sorted here once
        """
        ordered = sort_trades(trades)
        group = TradeGroup(
            symbol=symbol,
            account_id=account_id,
            account_name=account_name,
            first_trade_date=ordered[0].trade_date,
            last_trade_date=ordered[-1].trade_date,
            trades=ordered,
        )

        for trade in ordered:
            if trade.is_buy:
                group.total_buy_quantity += trade.quantity
                group.total_buy_value += trade.value
            else:
                group.total_sell_quantity += trade.quantity
                group.total_sell_value += trade.value

        net_quantity = group.total_buy_quantity - group.total_sell_quantity
        if abs(net_quantity) <= self.position_epsilon:
            net_quantity = 0.0
        group.net_quantity = net_quantity

        group.avg_buy_price = (
            group.total_buy_value / group.total_buy_quantity
            if group.total_buy_quantity > 0
            else 0.0
        )
        group.avg_sell_price = (
            group.total_sell_value / group.total_sell_quantity
            if group.total_sell_quantity > 0
            else 0.0
        )

        group.current_price = current_price
        group.current_value = net_quantity * current_price

        # ---------- Realized (sold units at average cost) ----------
        cost_of_sold = group.total_sell_quantity * group.avg_buy_price
        group.realized_pnl = group.total_sell_value - cost_of_sold
        group.realized_pnl_pct = (
            (group.realized_pnl / cost_of_sold) * 100.0 if cost_of_sold > 0 else 0.0
        )

        # ---------- Unrealized (held units at average cost) ----------
        active_cost = net_quantity * group.avg_buy_price
        group.unrealized_pnl = group.current_value - active_cost
        group.unrealized_pnl_pct = (
            (group.unrealized_pnl / active_cost) * 100.0 if active_cost > 0 else 0.0
        )

        group.status = PositionStatus.SOLD if net_quantity == 0 else PositionStatus.ACTIVE

        if net_quantity != 0 and current_price <= 0:
            logger.warning("Live price missing for %s", symbol)

        group.xirr = calculate_stock_xirr(
            ordered,
            current_price,
            net_quantity,
            valuation_date=valuation_date,
            solver=self.solver,
        )

        logger.debug(
            "%s [%s] net=%s realized=%.2f unrealized=%.2f xirr=%s",
            symbol,
            account_id,
            net_quantity,
            group.realized_pnl,
            group.unrealized_pnl,
            group.xirr,
        )
        return group

    @staticmethod
    def summarize(groups: List[TradeGroup]) -> TradebookSummary:
        return TradebookSummary(
            total_stocks=len(groups),
            active_stocks=sum(1 for g in groups if g.status == PositionStatus.ACTIVE),
            sold_stocks=sum(1 for g in groups if g.status == PositionStatus.SOLD),
            total_buy_value=sum(g.total_buy_value for g in groups),
            total_sell_value=sum(g.total_sell_value for g in groups),
            total_realized_pnl=sum(g.realized_pnl for g in groups),
            total_unrealized_pnl=sum(g.unrealized_pnl for g in groups),
        )

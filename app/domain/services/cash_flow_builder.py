"""
CASH FLOW BUILDER
Turn trade history / ledger postings into dated, signed cash flows

RESPONSIBILITIES:
- Order trades chronologically (stable for same-day ties)
- One flow per trade: BUY -> outflow, SELL -> inflow
- Terminal mark-to-market flow for open positions
- Classify series that cannot produce a return

RULES:
❌ No solving here
❌ No rounding
✅ Same-day trades keep input order
✅ Pure calculation
"""

from datetime import date
from typing import Iterable, List, Optional, Sequence

from app.domain.models import CashFlow, LedgerEntry, Trade, TradeSide
from app.utils.time import resolve_valuation_date

INSUFFICIENT_FLOWS = "insufficient_flows"
NO_OUTFLOW = "no_outflow"
NO_INFLOW = "no_inflow"


def sort_trades(trades: Iterable[Trade]) -> List[Trade]:
    """
    Chronological order; sorted() is stable so same-day trades are
    never reordered by side.
    """
    return sorted(trades, key=lambda t: t.trade_date)


def trade_cash_flow(trade: Trade) -> CashFlow:
    """BUY -> -(qty*price), SELL -> +(qty*price)"""
    amount = trade.value
    if trade.side == TradeSide.BUY:
        amount = -amount
    return CashFlow(flow_date=trade.trade_date, amount=amount)


def build_cash_flows(
    trades: Sequence[Trade],
    current_price: float,
    net_quantity: float,
    valuation_date: Optional[date] = None,
) -> List[CashFlow]:
    """
    Build the cash-flow series for one (symbol, account) grouping.

    Args:
        trades: Executed trades, any order
        current_price: Current market price (0 when unavailable)
        net_quantity: Units still held (buys - sells)
        valuation_date: Date of the terminal flow (default: today, market tz)

    Returns:
        Chronological cash flows; the terminal flow (if any) is last
    """
    flows = [trade_cash_flow(trade) for trade in sort_trades(trades)]

    # Open position: value it as if liquidated on the valuation date
    if net_quantity != 0:
        flows.append(
            CashFlow(
                flow_date=resolve_valuation_date(valuation_date),
                amount=net_quantity * current_price,
            )
        )

    return flows


def build_ledger_cash_flows(
    entries: Sequence[LedgerEntry],
    current_value: float,
    valuation_date: Optional[date] = None,
) -> List[CashFlow]:
    """
    Build a portfolio-level series from ledger postings.

    Each posting contributes credit - debit (zero postings are skipped);
    the current portfolio value is appended when positive.
    """
    ordered = sorted(entries, key=lambda e: e.posting_date)
    flows = [
        CashFlow(flow_date=entry.posting_date, amount=entry.net_flow)
        for entry in ordered
        if entry.net_flow != 0
    ]

    if current_value > 0:
        flows.append(
            CashFlow(
                flow_date=resolve_valuation_date(valuation_date),
                amount=current_value,
            )
        )

    return flows


def not_computable_reason(flows: Sequence[CashFlow]) -> Optional[str]:
    """
    Why a return cannot be computed for this series, or None if it can.

    A root of the NPV function requires at least one strictly negative and
    one strictly positive flow.
    """
    if len(flows) < 2:
        return INSUFFICIENT_FLOWS
    if not any(cf.amount < 0 for cf in flows):
        return NO_OUTFLOW
    if not any(cf.amount > 0 for cf in flows):
        return NO_INFLOW
    return None

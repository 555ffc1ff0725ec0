"""
XIRR ENGINE
Public entry points: trades / ledger -> annualized return (%)

"Not computable" is a normal outcome and comes back as None.
Callers show it as "N/A".
"""

import logging
from datetime import date
from typing import Optional, Sequence

from app.domain.models import CashFlow, LedgerEntry, Trade
from app.domain.services.cash_flow_builder import (
    build_cash_flows,
    build_ledger_cash_flows,
)
from app.domain.services.xirr_solver import XirrSolver

logger = logging.getLogger(__name__)


def calculate_xirr(
    flows: Sequence[CashFlow],
    solver: Optional[XirrSolver] = None,
) -> Optional[float]:
    """
    XIRR for caller-built cash flows

    Returns:
        Annualized percentage (15.5 == 15.5%) at full precision, or None
    """
    ordered = sorted(flows, key=lambda cf: cf.flow_date)
    rate = (solver or XirrSolver()).solve(ordered)
    if rate is None:
        return None
    return rate * 100.0


def calculate_stock_xirr(
    trades: Sequence[Trade],
    current_price: float,
    net_quantity: float,
    valuation_date: Optional[date] = None,
    solver: Optional[XirrSolver] = None,
) -> Optional[float]:
    """
    XIRR for a single stock position

    Args:
        trades: Trades for one (symbol, account) grouping, any order
        current_price: Current price (0 when no quote is available)
        net_quantity: Units still held
        valuation_date: Date of the terminal valuation (default: today)
        solver: Optional pre-configured solver

    Returns:
        Annualized percentage, or None
    """
    flows = build_cash_flows(trades, current_price, net_quantity, valuation_date)
    return calculate_xirr(flows, solver)


def calculate_portfolio_xirr(
    ledger_entries: Sequence[LedgerEntry],
    current_value: float,
    valuation_date: Optional[date] = None,
    solver: Optional[XirrSolver] = None,
) -> Optional[float]:
    """
    XIRR for the whole portfolio from funds-ledger postings

    Args:
        ledger_entries: Ledger postings (credit - debit per entry)
        current_value: Current value of active holdings
        valuation_date: Date of the terminal valuation (default: today)
        solver: Optional pre-configured solver

    Returns:
        Annualized percentage, or None
    """
    flows = build_ledger_cash_flows(ledger_entries, current_value, valuation_date)
    result = calculate_xirr(flows, solver)
    logger.debug(
        "Portfolio XIRR | entries=%d value=%.2f xirr=%s",
        len(ledger_entries),
        current_value,
        result,
    )
    return result

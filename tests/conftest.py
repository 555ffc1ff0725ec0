from datetime import date, timedelta
from typing import Callable, Optional

import pytest

from app.domain.models import CashFlow, Trade, TradeSide
from app.domain.services.xirr_solver import XirrSolver


@pytest.fixture
def start_date() -> date:
    """Non-leap year start so +365 days lands on the same calendar day"""
    return date(2023, 1, 2)


@pytest.fixture
def make_trade() -> Callable[..., Trade]:
    """Factory for trades with sensible defaults"""

    def _make(
        side: str = "buy",
        quantity: float = 10,
        price: float = 100,
        trade_date: date = date(2023, 1, 2),
        symbol: str = "INFY",
        account_id: Optional[int] = 1,
        trade_id: Optional[str] = None,
    ) -> Trade:
        return Trade(
            symbol=symbol,
            trade_date=trade_date,
            side=TradeSide.parse(side),
            quantity=quantity,
            price=price,
            account_id=account_id,
            trade_id=trade_id,
        )

    return _make


@pytest.fixture
def one_year_flows(start_date) -> Callable[[float, float], list]:
    """Outflow on day 0, inflow exactly 365 days later"""

    def _flows(outflow: float, inflow: float) -> list:
        return [
            CashFlow(flow_date=start_date, amount=-outflow),
            CashFlow(flow_date=start_date + timedelta(days=365), amount=inflow),
        ]

    return _flows


@pytest.fixture
def solver() -> XirrSolver:
    return XirrSolver()

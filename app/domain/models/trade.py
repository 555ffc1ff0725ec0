"""
DOMAIN MODELS — TRADES & CASH FLOWS

Immutable structures for executed trades and the signed cash flows
derived from them. No database access. No market data fetching.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class TradeSide(str, Enum):
    """Direction of an executed trade"""
    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def parse(cls, value) -> "TradeSide":
        """Accept broker trade_type strings ('buy', 'SELL', ...)"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown trade side: {value!r}") from None


@dataclass(frozen=True)
class Trade:
    """One executed buy or sell - Immutable"""
    symbol: str
    trade_date: date
    side: TradeSide
    quantity: float
    price: float
    account_id: Optional[int] = None
    trade_id: Optional[str] = None

    def __post_init__(self):
        if not self.symbol:
            raise ValueError("Trade symbol cannot be empty")
        if self.quantity <= 0:
            raise ValueError(f"Trade quantity must be positive: {self.quantity}")
        if self.price <= 0:
            raise ValueError(f"Trade price must be positive: {self.price}")
        if not isinstance(self.side, TradeSide):
            object.__setattr__(self, "side", TradeSide.parse(self.side))

    @property
    def value(self) -> float:
        """Gross traded value (quantity x price)"""
        return self.quantity * self.price

    @property
    def is_buy(self) -> bool:
        return self.side == TradeSide.BUY


@dataclass(frozen=True)
class CashFlow:
    """
    Signed monetary event.
    Outflows (investments) are negative, inflows (proceeds, terminal value)
    are positive.
    """
    flow_date: date
    amount: float

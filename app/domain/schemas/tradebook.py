from datetime import date
from typing import List, Optional

from pydantic import BaseModel

from app.config import settings
from app.domain.models import Trade, Tradebook, TradebookSummary, TradeGroup


def _money(value: float) -> float:
    return round(value, settings.DISPLAY_DECIMALS)


def _rate(value: Optional[float]) -> Optional[float]:
    return None if value is None else round(value, settings.DISPLAY_DECIMALS)


class TradeSchema(BaseModel):
    symbol: str
    trade_date: date
    side: str
    quantity: float
    price: float
    account_id: Optional[int] = None
    trade_id: Optional[str] = None

    @classmethod
    def from_domain(cls, trade: Trade) -> "TradeSchema":
        return cls(
            symbol=trade.symbol,
            trade_date=trade.trade_date,
            side=trade.side.value,
            quantity=trade.quantity,
            price=trade.price,
            account_id=trade.account_id,
            trade_id=trade.trade_id,
        )


class TradeGroupSchema(BaseModel):
    symbol: str
    account_id: Optional[int]
    account_name: str
    total_buy_quantity: float
    total_sell_quantity: float
    net_quantity: float
    total_buy_value: float
    total_sell_value: float
    avg_buy_price: float
    avg_sell_price: float
    current_price: float
    current_value: float
    realized_pnl: float
    realized_pnl_pct: float
    unrealized_pnl: float
    unrealized_pnl_pct: float
    total_pnl: float
    status: str
    xirr: Optional[float]
    first_trade_date: date
    last_trade_date: date
    trades: List[TradeSchema] = []

    @classmethod
    def from_domain(cls, group: TradeGroup, include_trades: bool = True) -> "TradeGroupSchema":
        return cls(
            symbol=group.symbol,
            account_id=group.account_id,
            account_name=group.account_name,
            total_buy_quantity=group.total_buy_quantity,
            total_sell_quantity=group.total_sell_quantity,
            net_quantity=group.net_quantity,
            total_buy_value=_money(group.total_buy_value),
            total_sell_value=_money(group.total_sell_value),
            avg_buy_price=_money(group.avg_buy_price),
            avg_sell_price=_money(group.avg_sell_price),
            current_price=_money(group.current_price),
            current_value=_money(group.current_value),
            realized_pnl=_money(group.realized_pnl),
            realized_pnl_pct=_money(group.realized_pnl_pct),
            unrealized_pnl=_money(group.unrealized_pnl),
            unrealized_pnl_pct=_money(group.unrealized_pnl_pct),
            total_pnl=_money(group.total_pnl),
            status=group.status.value,
            xirr=_rate(group.xirr),
            first_trade_date=group.first_trade_date,
            last_trade_date=group.last_trade_date,
            trades=[TradeSchema.from_domain(t) for t in group.trades] if include_trades else [],
        )


class TradebookSummarySchema(BaseModel):
    total_stocks: int
    active_stocks: int
    sold_stocks: int
    total_buy_value: float
    total_sell_value: float
    total_realized_pnl: float
    total_unrealized_pnl: float
    total_pnl: float

    @classmethod
    def from_domain(cls, summary: TradebookSummary) -> "TradebookSummarySchema":
        return cls(
            total_stocks=summary.total_stocks,
            active_stocks=summary.active_stocks,
            sold_stocks=summary.sold_stocks,
            total_buy_value=_money(summary.total_buy_value),
            total_sell_value=_money(summary.total_sell_value),
            total_realized_pnl=_money(summary.total_realized_pnl),
            total_unrealized_pnl=_money(summary.total_unrealized_pnl),
            total_pnl=_money(summary.total_pnl),
        )


class TradebookSchema(BaseModel):
    groups: List[TradeGroupSchema]
    summary: TradebookSummarySchema

    @classmethod
    def from_domain(cls, tradebook: Tradebook, include_trades: bool = True) -> "TradebookSchema":
        return cls(
            groups=[TradeGroupSchema.from_domain(g, include_trades) for g in tradebook.groups],
            summary=TradebookSummarySchema.from_domain(tradebook.summary),
        )

"""
Unit Tests for Tradebook Engine
Position reconciliation, PnL and per-group XIRR
"""

import pytest
from datetime import date

from app.domain.models import PositionStatus, StatusFilter
from app.domain.services.tradebook_engine import TradebookEngine


VALUATION = date(2024, 6, 30)


@pytest.fixture
def engine():
    """Fixture for TradebookEngine"""
    return TradebookEngine()


@pytest.fixture
def trades(make_trade):
    """Mixed, unordered trade stream across two accounts"""
    return [
        make_trade("sell", 5, 130, date(2024, 3, 1), symbol="INFY", account_id=1),
        make_trade("buy", 2, 3000, date(2024, 1, 5), symbol="TCS", account_id=1),
        make_trade("buy", 10, 100, date(2024, 1, 1), symbol="INFY", account_id=1),
        make_trade("sell", 5, 90, date(2024, 4, 10), symbol="INFY", account_id=2),
        make_trade("buy", 10, 120, date(2024, 2, 1), symbol="INFY", account_id=1),
        make_trade("buy", 5, 100, date(2024, 1, 10), symbol="INFY", account_id=2),
    ]


@pytest.fixture
def prices():
    """TCS deliberately missing"""
    return {"INFY": 140.0}


class TestTradebookEngine:
    """Test suite for Tradebook Engine"""

    def test_groups_sorted_by_symbol_then_account(self, engine, trades, prices):
        book = engine.build(trades, prices, valuation_date=VALUATION)
        assert [(g.symbol, g.account_id) for g in book.groups] == [
            ("INFY", 1),
            ("INFY", 2),
            ("TCS", 1),
        ]

    def test_active_group_pnl(self, engine, trades, prices):
        book = engine.build(trades, prices, valuation_date=VALUATION)
        infy = book.groups[0]

        assert infy.total_buy_quantity == 20
        assert infy.total_buy_value == 2200
        assert infy.total_sell_quantity == 5
        assert infy.total_sell_value == 650
        assert infy.net_quantity == 15
        assert infy.avg_buy_price == pytest.approx(110.0)
        assert infy.avg_sell_price == pytest.approx(130.0)
        assert infy.current_price == 140.0
        assert infy.current_value == pytest.approx(2100.0)
        assert infy.realized_pnl == pytest.approx(100.0)
        assert infy.realized_pnl_pct == pytest.approx(100 / 550 * 100)
        assert infy.unrealized_pnl == pytest.approx(450.0)
        assert infy.unrealized_pnl_pct == pytest.approx(450 / 1650 * 100)
        assert infy.total_pnl == pytest.approx(550.0)
        assert infy.status == PositionStatus.ACTIVE
        assert infy.xirr is not None and infy.xirr > 0
        assert infy.first_trade_date == date(2024, 1, 1)
        assert infy.last_trade_date == date(2024, 3, 1)
        assert [t.trade_date for t in infy.trades] == [
            date(2024, 1, 1),
            date(2024, 2, 1),
            date(2024, 3, 1),
        ]

    def test_closed_group(self, engine, trades, prices):
        book = engine.build(trades, prices, valuation_date=VALUATION)
        closed = book.groups[1]

        assert closed.net_quantity == 0
        assert closed.status == PositionStatus.SOLD
        assert closed.current_value == 0
        assert closed.realized_pnl == pytest.approx(-50.0)
        assert closed.realized_pnl_pct == pytest.approx(-10.0)
        assert closed.unrealized_pnl == 0
        assert closed.xirr is not None and closed.xirr < 0

    def test_missing_price_degrades_xirr(self, engine, trades, prices):
        book = engine.build(trades, prices, valuation_date=VALUATION)
        tcs = book.groups[2]

        assert tcs.current_price == 0
        assert tcs.current_value == 0
        assert tcs.unrealized_pnl == pytest.approx(-6000.0)
        assert tcs.unrealized_pnl_pct == pytest.approx(-100.0)
        assert tcs.status == PositionStatus.ACTIVE
        assert tcs.xirr is None

    def test_summary(self, engine, trades, prices):
        summary = engine.build(trades, prices, valuation_date=VALUATION).summary

        assert summary.total_stocks == 3
        assert summary.active_stocks == 2
        assert summary.sold_stocks == 1
        assert summary.total_buy_value == pytest.approx(8700.0)
        assert summary.total_sell_value == pytest.approx(1100.0)
        assert summary.total_realized_pnl == pytest.approx(50.0)
        assert summary.total_unrealized_pnl == pytest.approx(-5550.0)
        assert summary.total_pnl == pytest.approx(-5500.0)

    @pytest.mark.parametrize(
        "status, expected",
        [
            (StatusFilter.ALL, [("INFY", 1), ("INFY", 2), ("TCS", 1)]),
            (StatusFilter.ACTIVE, [("INFY", 1), ("TCS", 1)]),
            (StatusFilter.SOLD, [("INFY", 2)]),
            ("sold", [("INFY", 2)]),
        ],
    )
    def test_status_filter(self, engine, trades, prices, status, expected):
        book = engine.build(trades, prices, status=status, valuation_date=VALUATION)
        assert [(g.symbol, g.account_id) for g in book.groups] == expected
        assert book.summary.total_stocks == len(expected)

    def test_account_names(self, engine, trades, prices):
        book = engine.build(
            trades,
            prices,
            account_names={1: "Zerodha - Self"},
            valuation_date=VALUATION,
        )
        assert book.groups[0].account_name == "Zerodha - Self"
        assert book.groups[1].account_name == "Unknown"

    def test_fractional_residue_closes_position(self, engine, make_trade):
        trades = [
            make_trade("buy", 0.1, 100, date(2024, 1, 1)),
            make_trade("buy", 0.2, 100, date(2024, 1, 2)),
            make_trade("sell", 0.3, 110, date(2024, 2, 1)),
        ]
        group = engine.build(trades, {"INFY": 120}, valuation_date=VALUATION).groups[0]
        assert group.net_quantity == 0
        assert group.status == PositionStatus.SOLD
        assert group.current_value == 0

    def test_matches_stock_xirr(self, engine, trades, prices):
        from app.domain.services.xirr_engine import calculate_stock_xirr

        book = engine.build(trades, prices, valuation_date=VALUATION)
        infy = book.groups[0]
        expected = calculate_stock_xirr(infy.trades, 140.0, 15, valuation_date=VALUATION)
        assert infy.xirr == pytest.approx(expected)

    def test_empty_stream(self, engine):
        book = engine.build([], {}, valuation_date=VALUATION)
        assert book.groups == []
        assert book.summary.total_stocks == 0
        assert book.summary.total_pnl == 0

    def test_trade_date_window(self, engine, trades, prices):
        book = engine.build(
            trades,
            prices,
            valuation_date=VALUATION,
            from_date=date(2024, 1, 5),
            to_date=date(2024, 3, 1),
        )
        infy_1, infy_2, tcs = book.groups

        assert infy_1.total_buy_quantity == 10
        assert infy_1.total_sell_quantity == 5
        assert infy_1.first_trade_date == date(2024, 2, 1)
        assert infy_1.last_trade_date == date(2024, 3, 1)
        assert infy_2.total_sell_quantity == 0
        assert infy_2.status == PositionStatus.ACTIVE
        assert tcs.total_buy_quantity == 2

    def test_open_ended_window(self, engine, trades, prices):
        book = engine.build(trades, prices, valuation_date=VALUATION, from_date=date(2024, 3, 1))
        assert [(g.symbol, g.account_id) for g in book.groups] == [("INFY", 1), ("INFY", 2)]
        assert all(g.total_buy_quantity == 0 for g in book.groups)

    def test_grouping_keeps_input_order(self, engine, trades):
        grouped = engine.group_trades(trades)
        assert [t.trade_date for t in grouped[("INFY", 1)]] == [
            date(2024, 3, 1),
            date(2024, 1, 1),
            date(2024, 2, 1),
        ]

    def test_reconcile_group_orders_trades(self, engine, make_trade):
        unordered = [
            make_trade("sell", 5, 130, date(2024, 3, 1)),
            make_trade("buy", 10, 100, date(2024, 1, 1)),
        ]
        group = engine.reconcile_group(
            symbol="INFY",
            account_id=1,
            account_name="Main",
            trades=unordered,
            current_price=120.0,
            valuation_date=VALUATION,
        )
        assert [t.trade_date for t in group.trades] == [date(2024, 1, 1), date(2024, 3, 1)]
        assert group.first_trade_date == date(2024, 1, 1)
        assert group.net_quantity == 5

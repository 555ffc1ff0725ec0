"""
Unit Tests for consolidated portfolio stats
Tradebook totals combined with the funds ledger
"""

import pytest
from datetime import date, timedelta

from app.domain.models import LedgerEntry, Tradebook, TradebookSummary
from app.domain.services.ledger_engine import LedgerEngine
from app.domain.services.tradebook_engine import TradebookEngine


START = date(2023, 1, 2)
VALUATION = START + timedelta(days=365)


@pytest.fixture
def engine():
    return LedgerEngine()


@pytest.fixture
def tradebook(make_trade):
    """INFY partly sold and still held, TCS fully exited"""
    trades = [
        make_trade("buy", 10, 100, START, symbol="INFY"),
        make_trade("sell", 4, 150, date(2023, 6, 1), symbol="INFY"),
        make_trade("buy", 5, 200, START, symbol="TCS"),
        make_trade("sell", 5, 220, date(2023, 3, 1), symbol="TCS"),
    ]
    return TradebookEngine().build(trades, {"INFY": 130.0, "TCS": 250.0}, valuation_date=VALUATION)


@pytest.fixture
def entries():
    return [
        LedgerEntry(1, START, debit=2000, voucher_type="Bank Receipts"),
        LedgerEntry(1, START + timedelta(days=1), debit=20, voucher_type="Book Voucher"),
        LedgerEntry(1, date(2023, 6, 5), credit=1000, voucher_type="Bank Payments"),
    ]


class TestPortfolioStats:
    """Test suite for LedgerEngine.portfolio_stats"""

    def test_holding_totals(self, engine, tradebook, entries):
        stats = engine.portfolio_stats(tradebook, entries, valuation_date=VALUATION)

        assert stats.total_investment == pytest.approx(600.0)
        assert stats.current_value == pytest.approx(780.0)
        assert stats.total_realized_pnl == pytest.approx(300.0)
        assert stats.total_unrealized_pnl == pytest.approx(180.0)
        assert stats.total_pnl == pytest.approx(480.0)
        assert stats.total_pnl_pct == pytest.approx(80.0)
        assert stats.total_sold_value == pytest.approx(1700.0)
        assert stats.total_sold_cost == pytest.approx(1400.0)

    def test_counts(self, engine, tradebook, entries):
        stats = engine.portfolio_stats(tradebook, entries, valuation_date=VALUATION)
        assert stats.holdings_count == 2
        assert stats.active_holdings_count == 1
        assert stats.sold_holdings_count == 1

    def test_invested_from_ledger_sums_debits(self, engine, tradebook, entries):
        stats = engine.portfolio_stats(tradebook, entries, valuation_date=VALUATION)
        assert stats.total_invested_from_ledger == pytest.approx(2020.0)

    def test_xirr_uses_value_of_held_units(self, engine, tradebook, entries):
        stats = engine.portfolio_stats(tradebook, entries, valuation_date=VALUATION)
        expected = engine.portfolio_xirr(entries, 780.0, valuation_date=VALUATION)
        assert stats.xirr is not None
        assert stats.xirr == pytest.approx(expected)

    def test_ten_percent_portfolio(self, engine, make_trade):
        book = TradebookEngine().build(
            [make_trade("buy", 10, 100, START)], {"INFY": 110.0}, valuation_date=VALUATION
        )
        entries = [LedgerEntry(1, START, debit=1000, voucher_type="Bank Receipts")]

        stats = engine.portfolio_stats(book, entries, valuation_date=VALUATION)
        assert stats.xirr == pytest.approx(10.0, abs=0.01)
        assert stats.total_pnl_pct == pytest.approx(10.0)

    def test_scope_labels(self, engine, tradebook, entries):
        consolidated = engine.portfolio_stats(tradebook, entries, valuation_date=VALUATION)
        assert consolidated.account_id is None
        assert consolidated.account_name == "Consolidated"

        scoped = engine.portfolio_stats(
            tradebook, entries, valuation_date=VALUATION, account_id=1, account_name="Main"
        )
        assert scoped.account_id == 1
        assert scoped.account_name == "Main"

    def test_empty_portfolio(self, engine):
        empty = Tradebook(
            groups=[],
            summary=TradebookSummary(0, 0, 0, 0.0, 0.0, 0.0, 0.0),
        )
        stats = engine.portfolio_stats(empty, [], valuation_date=VALUATION)

        assert stats.holdings_count == 0
        assert stats.total_investment == 0
        assert stats.total_pnl_pct == 0.0
        assert stats.xirr is None

"""
DOMAIN MODELS — BROKER LEDGER

Funds ledger entries and per-account aggregates.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Optional


class VoucherCategory(str, Enum):
    """Ledger voucher grouping"""
    FEES_AND_CHARGES = "fees_and_charges"          # Book Voucher
    FUNDS_ADDED = "funds_added"                    # Bank Receipts
    INTERNAL_ADJUSTMENT = "internal_adjustment"    # Journal Entry
    FUNDS_WITHDRAWN = "funds_withdrawn"            # Bank Payments
    DEMAT_MOVEMENT = "demat_movement"              # Delivery Voucher
    OTHER = "other"

    @classmethod
    def from_voucher_type(cls, voucher_type: Optional[str]) -> "VoucherCategory":
        text = (voucher_type or "").lower()
        if "book" in text:
            return cls.FEES_AND_CHARGES
        if "bank receipt" in text:
            return cls.FUNDS_ADDED
        if "journal" in text:
            return cls.INTERNAL_ADJUSTMENT
        if "bank payment" in text:
            return cls.FUNDS_WITHDRAWN
        if "delivery" in text:
            return cls.DEMAT_MOVEMENT
        return cls.OTHER


@dataclass(frozen=True)
class LedgerEntry:
    """Single posting in the broker funds ledger - Immutable"""
    account_id: Optional[int]
    posting_date: date
    debit: float = 0.0
    credit: float = 0.0
    voucher_type: Optional[str] = None
    particular: Optional[str] = None

    def __post_init__(self):
        if self.debit < 0 or self.credit < 0:
            raise ValueError("Ledger debit/credit cannot be negative")

    @property
    def net_flow(self) -> float:
        """Investor-side cash flow (credit - debit)"""
        return self.credit - self.debit

    @property
    def category(self) -> VoucherCategory:
        return VoucherCategory.from_voucher_type(self.voucher_type)


@dataclass
class DebitCredit:
    """Running debit/credit pair"""
    debit: float = 0.0
    credit: float = 0.0


@dataclass
class LedgerSummary:
    """
    Aggregated ledger totals for a single account.
    """
    account_id: Optional[int]
    account_name: str
    total_debit: float = 0.0
    total_credit: float = 0.0
    categories: Dict[VoucherCategory, DebitCredit] = field(
        default_factory=lambda: {c: DebitCredit() for c in VoucherCategory}
    )
    entry_count: int = 0

    @property
    def net_cash_flow(self) -> float:
        return self.total_credit - self.total_debit

    @property
    def invested_value(self) -> float:
        """Funds added (bank receipt debits) less funds withdrawn (bank payment credits)"""
        return (
            self.categories[VoucherCategory.FUNDS_ADDED].debit
            - self.categories[VoucherCategory.FUNDS_WITHDRAWN].credit
        )

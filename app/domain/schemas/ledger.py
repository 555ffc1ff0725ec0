from typing import Dict, Optional

from pydantic import BaseModel

from app.config import settings
from app.domain.models import LedgerSummary


class DebitCreditSchema(BaseModel):
    debit: float
    credit: float


class LedgerSummarySchema(BaseModel):
    account_id: Optional[int]
    account_name: str
    entry_count: int
    total_debit: float
    total_credit: float
    net_cash_flow: float
    invested_value: float
    categories: Dict[str, DebitCreditSchema]

    @classmethod
    def from_domain(cls, summary: LedgerSummary) -> "LedgerSummarySchema":
        digits = settings.DISPLAY_DECIMALS
        return cls(
            account_id=summary.account_id,
            account_name=summary.account_name,
            entry_count=summary.entry_count,
            total_debit=round(summary.total_debit, digits),
            total_credit=round(summary.total_credit, digits),
            net_cash_flow=round(summary.net_cash_flow, digits),
            invested_value=round(summary.invested_value, digits),
            categories={
                category.value: DebitCreditSchema(
                    debit=round(bucket.debit, digits),
                    credit=round(bucket.credit, digits),
                )
                for category, bucket in summary.categories.items()
            },
        )

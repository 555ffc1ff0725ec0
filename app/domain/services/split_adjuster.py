"""
SPLIT ADJUSTER
Restate pre-split trade history after a stock split

A "1:5" split turns every pre-split unit into five: quantity is multiplied
and price divided by the same factor, so trade values (and every cash flow
derived from them) are unchanged.
"""

import logging
import re
from dataclasses import dataclass, replace
from datetime import date
from typing import List, Optional, Sequence, Tuple

from app.domain.models import Trade

logger = logging.getLogger(__name__)

_RATIO_PATTERN = re.compile(r"^\s*(\d+)\s*:\s*(\d+)\s*$")


@dataclass(frozen=True)
class SplitAdjustment:
    """Result of applying a split"""
    trades: List[Trade]
    affected_count: int
    old_ratio: int
    new_ratio: int

    @property
    def multiplier(self) -> float:
        return self.new_ratio / self.old_ratio


def parse_split_ratio(ratio: str) -> Tuple[int, int]:
    """
    Parse "old:new" (e.g. "1:5")

    Raises:
        ValueError: malformed or zero ratio
    """
    match = _RATIO_PATTERN.match(ratio or "")
    if not match:
        raise ValueError(f'Invalid ratio format {ratio!r}. Use format like "1:5"')

    old_ratio, new_ratio = int(match.group(1)), int(match.group(2))
    if old_ratio == 0 or new_ratio == 0:
        raise ValueError("Split ratio terms must be positive")
    return old_ratio, new_ratio


def apply_stock_split(
    trades: Sequence[Trade],
    symbol: str,
    split_date: date,
    ratio: str,
    account_id: Optional[int] = None,
) -> SplitAdjustment:
    """
    Adjust trades of `symbol` dated strictly before `split_date`

    Args:
        trades: Trade history (input order is kept)
        symbol: Instrument that split
        split_date: Ex-date of the split
        ratio: "old:new" ratio string
        account_id: Restrict to one account (None = every account)

    Returns:
        SplitAdjustment with the restated trade list
    """
    old_ratio, new_ratio = parse_split_ratio(ratio)
    multiplier = new_ratio / old_ratio

    adjusted: List[Trade] = []
    affected = 0
    for trade in trades:
        applies = (
            trade.symbol == symbol
            and trade.trade_date < split_date
            and (account_id is None or trade.account_id == account_id)
        )
        if applies:
            trade = replace(
                trade,
                quantity=trade.quantity * multiplier,
                price=trade.price / multiplier,
            )
            affected += 1
        adjusted.append(trade)

    logger.info(
        "Split %d:%d applied to %s | affected=%d",
        old_ratio,
        new_ratio,
        symbol,
        affected,
    )
    return SplitAdjustment(
        trades=adjusted,
        affected_count=affected,
        old_ratio=old_ratio,
        new_ratio=new_ratio,
    )

"""
Dashboard Aggregation

DESIGN DECISION: Aggregation is DETERMINISTIC and recomputed from scratch
on every call. Record counts are bounded by what a person uploads by hand,
so there is no incremental bookkeeping and no cache to invalidate.

Every dataset is the same grouping pass with a different key and a
different contribution (the record's amount, or 1), followed by a
dataset-specific ordering:
- category totals: first-seen order
- merchant totals: descending by amount, top N
- daily totals: ascending by date text (valid because dates are YYYY-MM-DD)
- category counts: descending by count

Python's sort is stable, so ties keep first-seen order.
"""

from decimal import Decimal
from typing import Callable, Optional, Sequence, TypeVar

from smartspend.models.receipt import (
    DashboardData,
    GroupCount,
    GroupTotal,
    ReceiptRecord,
)

Number = TypeVar("Number", Decimal, int)

DEFAULT_MERCHANT_TOP_N = 5


def group_records(
    records: Sequence[ReceiptRecord],
    key: Callable[[ReceiptRecord], str],
    contribution: Callable[[ReceiptRecord], Number],
    zero: Number,
) -> list[tuple[str, Number]]:
    """
    Accumulate `contribution` per `key`, in first-seen key order.
    """
    groups: dict[str, Number] = {}

    for record in records:
        group_key = key(record)
        if group_key not in groups:
            groups[group_key] = zero
        groups[group_key] += contribution(record)

    return list(groups.items())


def _amount(record: ReceiptRecord) -> Decimal:
    return record.total


def _one(record: ReceiptRecord) -> int:
    return 1


def category_totals(records: Sequence[ReceiptRecord]) -> list[GroupTotal]:
    """Summed spend per category, in the order categories first appear."""
    pairs = group_records(records, lambda r: r.category, _amount, Decimal("0"))
    return [GroupTotal(key=k, total=v) for k, v in pairs]


def merchant_totals(
    records: Sequence[ReceiptRecord],
    top_n: int = DEFAULT_MERCHANT_TOP_N,
) -> list[GroupTotal]:
    """The `top_n` merchants by summed spend, highest first."""
    pairs = group_records(records, lambda r: r.merchant, _amount, Decimal("0"))
    pairs.sort(key=lambda pair: pair[1], reverse=True)
    return [GroupTotal(key=k, total=v) for k, v in pairs[:top_n]]


def daily_totals(records: Sequence[ReceiptRecord]) -> list[GroupTotal]:
    """Summed spend per day, oldest first."""
    pairs = group_records(records, lambda r: r.date, _amount, Decimal("0"))
    pairs.sort(key=lambda pair: pair[0])
    return [GroupTotal(key=k, total=v) for k, v in pairs]


def category_counts(records: Sequence[ReceiptRecord]) -> list[GroupCount]:
    """Number of receipts per category, most frequent first."""
    pairs = group_records(records, lambda r: r.category, _one, 0)
    pairs.sort(key=lambda pair: pair[1], reverse=True)
    return [GroupCount(key=k, count=v) for k, v in pairs]


def total_spend(records: Sequence[ReceiptRecord]) -> Decimal:
    return sum((record.total for record in records), Decimal("0"))


def top_category(records: Sequence[ReceiptRecord]) -> Optional[str]:
    """
    Category with the highest summed spend.

    None when there are no records. Ties go to the category seen first.
    """
    totals = sorted(category_totals(records), key=lambda g: g.total, reverse=True)
    if not totals:
        return None
    return totals[0].key


def build_dashboard(
    records: Sequence[ReceiptRecord],
    merchant_top_n: int = DEFAULT_MERCHANT_TOP_N,
) -> DashboardData:
    """
    Compute every dataset and summary number from one snapshot.

    Pass `store.snapshot()`; the tuple cannot change during the pass.
    """
    return DashboardData(
        category_totals=category_totals(records),
        merchant_totals=merchant_totals(records, top_n=merchant_top_n),
        daily_totals=daily_totals(records),
        category_counts=category_counts(records),
        total_spend=total_spend(records),
        top_category=top_category(records),
        record_count=len(records),
    )

"""Dashboard aggregation package."""

from smartspend.aggregation.aggregator import (
    DEFAULT_MERCHANT_TOP_N,
    build_dashboard,
    category_counts,
    category_totals,
    daily_totals,
    group_records,
    merchant_totals,
    top_category,
    total_spend,
)

__all__ = [
    "DEFAULT_MERCHANT_TOP_N",
    "build_dashboard",
    "category_counts",
    "category_totals",
    "daily_totals",
    "group_records",
    "merchant_totals",
    "top_category",
    "total_spend",
]

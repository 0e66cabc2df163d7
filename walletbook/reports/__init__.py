"""Reports (aggregation engine) package."""

from walletbook.reports.aggregation import (
    category_label,
    filter_by_range,
    find_category,
    find_wallet,
    group_by_category,
    group_by_date,
    month_range,
    monthly_report,
    to_local,
    total_balance,
    totals,
)

__all__ = [
    "category_label",
    "filter_by_range",
    "find_category",
    "find_wallet",
    "group_by_category",
    "group_by_date",
    "month_range",
    "monthly_report",
    "to_local",
    "total_balance",
    "totals",
]

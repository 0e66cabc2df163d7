"""
Aggregation Engine

DESIGN DECISION: Reports are PURE functions over a snapshot.
The caller scopes the snapshot (usually to one month via month_range)
and re-runs these functions every time a subscription pushes a new list.
Nothing here reads from or writes to storage.

Dates: transaction dates may arrive timezone-aware (from the hosted store,
in UTC) or naive (already local). Everything is compared and grouped in
the observer's local calendar.
"""

import calendar
from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Optional

from walletbook.config import get_settings
from walletbook.models.finance import (
    Category,
    CategoryGroup,
    CategoryReport,
    DateGroup,
    MonthlyReport,
    MonthRange,
    Totals,
    Transaction,
    TransactionType,
    Wallet,
)


def to_local(value: datetime) -> datetime:
    """Naive local datetime for any datetime, aware or not."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def local_day(value: datetime) -> date:
    return to_local(value).date()


def totals(transactions: Iterable[Transaction]) -> Totals:
    """
    Sum income and expense amounts.

    Amounts are raw integers; there is no currency conversion.
    """
    income = 0
    expense = 0
    for tx in transactions:
        if tx.type == TransactionType.INCOME:
            income += tx.amount
        else:
            expense += tx.amount
    return Totals(income=income, expense=expense)


def group_by_date(transactions: Iterable[Transaction]) -> list[DateGroup]:
    """
    Group transactions by local calendar day, newest day first.

    Time of day is discarded. Within a day, input order is preserved.
    """
    groups: dict[date, list[Transaction]] = defaultdict(list)
    for tx in transactions:
        groups[local_day(tx.date)].append(tx)

    return [
        DateGroup(date=day, transactions=items)
        for day, items in sorted(groups.items(), key=lambda item: item[0], reverse=True)
    ]


def find_category(categories: Iterable[Category], category_id: str) -> Optional[Category]:
    """Category with this ID, or None if it no longer exists."""
    for category in categories:
        if category.id == category_id:
            return category
    return None


def find_wallet(wallets: Iterable[Wallet], wallet_id: str) -> Optional[Wallet]:
    """Wallet with this ID, or None if it no longer exists."""
    for wallet in wallets:
        if wallet.id == wallet_id:
            return wallet
    return None


def category_label(category: Optional[Category]) -> tuple[str, str, str]:
    """(name, icon, color) for display, with placeholders for a dangling reference."""
    settings = get_settings().app
    if category is None:
        return (
            settings.unknown_category_name,
            settings.unknown_category_icon,
            settings.unknown_category_color,
        )
    return (
        category.name or settings.unknown_category_name,
        category.icon or settings.unknown_category_icon,
        category.color or settings.unknown_category_color,
    )


def group_by_category(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    tx_type: TransactionType = TransactionType.EXPENSE,
) -> list[CategoryGroup]:
    """
    Total per category for one transaction type, largest first.

    Only categories that actually appear among the transactions are
    returned. A category ID with no matching record still gets a group,
    labelled with the "Unknown" placeholders.
    """
    categories = list(categories)
    grouped: dict[str, CategoryGroup] = {}

    for tx in transactions:
        if tx.type != tx_type:
            continue
        group = grouped.get(tx.category_id)
        if group is None:
            name, icon, color = category_label(find_category(categories, tx.category_id))
            group = CategoryGroup(
                category_id=tx.category_id,
                name=name,
                icon=icon,
                color=color,
            )
            grouped[tx.category_id] = group
        group.total += tx.amount

    return sorted(grouped.values(), key=lambda g: g.total, reverse=True)


def month_range(value: Optional[datetime] = None) -> MonthRange:
    """
    First and last instant of the month containing `value`, local time.

    The end is 23:59:59 on the last day of the month.
    """
    value = to_local(value or datetime.now())
    last_day = calendar.monthrange(value.year, value.month)[1]
    return MonthRange(
        start=datetime(value.year, value.month, 1),
        end=datetime(value.year, value.month, last_day, 23, 59, 59),
    )


def filter_by_range(
    transactions: Iterable[Transaction],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> list[Transaction]:
    """Transactions whose date falls within [start, end]; either bound may be open."""
    start = to_local(start) if start else None
    end = to_local(end) if end else None

    result = []
    for tx in transactions:
        when = to_local(tx.date)
        if start and when < start:
            continue
        if end and when > end:
            continue
        result.append(tx)
    return result


def monthly_report(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    tx_type: TransactionType = TransactionType.EXPENSE,
) -> MonthlyReport:
    """
    Totals plus a category breakdown with percentage shares.

    Percentages are of the chosen type's total, rounded to one decimal.
    """
    transactions = list(transactions)
    summary = totals(transactions)
    groups = group_by_category(transactions, categories, tx_type)
    type_total = summary.income if tx_type == TransactionType.INCOME else summary.expense

    return MonthlyReport(
        income=summary.income,
        expense=summary.expense,
        balance=summary.net,
        categories=[
            CategoryReport(
                category_id=group.category_id,
                category_name=group.name,
                category_icon=group.icon,
                color=group.color,
                total=group.total,
                percentage=round(group.total * 100 / type_total, 1) if type_total else 0.0,
            )
            for group in groups
        ],
    )


def total_balance(wallets: Iterable[Wallet]) -> int:
    """Sum of all wallet balances."""
    return sum(wallet.balance or 0 for wallet in wallets)

"""Expense aggregation for reports."""

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from models.account import Account
from models.category import Category
from models.transaction import Transaction, TransactionType

UNKNOWN_ACCOUNT_LABEL = "(unknown account)"
UNCATEGORIZED_LABEL = "uncategorized"

Totals = List[Tuple[str, int]]


@dataclass
class PeriodSummary:
    income_cents: int
    expense_cents: int

    @property
    def net_cents(self) -> int:
        return self.income_cents - self.expense_cents


def month_key(day: date) -> str:
    """Year-month key for a date, e.g. "2025-03"."""
    return f"{day.year:04d}-{day.month:02d}"


def recent_month_keys(today: date, count: int = 12) -> List[str]:
    """The ``count`` most recent month keys, newest first, starting at ``today``."""
    first = today.replace(day=1)
    return [month_key(first - relativedelta(months=i)) for i in range(count)]


def filter_by_month(
    transactions: Iterable[Transaction], month: Optional[str]
) -> List[Transaction]:
    """Keep the transactions dated in ``month`` ("YYYY-MM"); None keeps all."""
    if month is None:
        return list(transactions)
    return [t for t in transactions if month_key(t.transaction_date) == month]


def _expenses(transactions: Iterable[Transaction]) -> Iterable[Transaction]:
    return (t for t in transactions if t.type is TransactionType.EXPENSE)


def _group(pairs: Iterable[Tuple[str, int]]) -> Totals:
    # dicts keep insertion order, so groups come out in first-seen order
    totals: Dict[str, int] = {}
    for label, amount in pairs:
        totals[label] = totals.get(label, 0) + amount
    return list(totals.items())


def account_label(accounts: Dict[str, Account], account_id: Optional[str]) -> str:
    account = accounts.get(account_id) if account_id else None
    return account.name if account else UNKNOWN_ACCOUNT_LABEL


def category_label(categories: Dict[str, Category], category_id: Optional[str]) -> str:
    category = categories.get(category_id) if category_id else None
    return category.name if category else UNCATEGORIZED_LABEL


def expenses_by_account(
    transactions: Iterable[Transaction], accounts: Sequence[Account]
) -> Totals:
    """Sum expenses by source account name.

    Income and transfers are not expenses and are left out. Expenses whose
    source account is missing are grouped under UNKNOWN_ACCOUNT_LABEL.

    Args:
        transactions: Transactions to aggregate, usually one month or all time.
        accounts: Account registry.

    Returns:
        List of (account name, total cents), in first-seen order.
    """
    by_id = {a.id: a for a in accounts}
    return _group(
        (account_label(by_id, t.account_from_id), t.amount_cents)
        for t in _expenses(transactions)
    )


def expenses_by_category(
    transactions: Iterable[Transaction], categories: Sequence[Category]
) -> Totals:
    """Sum expenses by category name; missing categories go under "uncategorized"."""
    by_id = {c.id: c for c in categories}
    return _group(
        (category_label(by_id, t.category_id), t.amount_cents)
        for t in _expenses(transactions)
    )


def expenses_by_month(transactions: Iterable[Transaction], limit: int = 6) -> Totals:
    """Sum expenses by month over the whole log.

    Args:
        transactions: The entire transaction log (not a month filter).
        limit: How many of the most recent months with expenses to keep.

    Returns:
        List of ("YYYY-MM", total cents) for the latest ``limit`` months,
        oldest first.
    """
    totals = dict(
        _group((month_key(t.transaction_date), t.amount_cents) for t in _expenses(transactions))
    )
    keys = sorted(totals)[-limit:] if limit > 0 else []
    return [(key, totals[key]) for key in keys]


def summarize(transactions: Iterable[Transaction]) -> PeriodSummary:
    """Total income and expenses; transfers move money and count as neither."""
    income = 0
    expense = 0
    for t in transactions:
        if t.type is TransactionType.INCOME:
            income += t.amount_cents
        elif t.type is TransactionType.EXPENSE:
            expense += t.amount_cents
    return PeriodSummary(income_cents=income, expense_cents=expense)

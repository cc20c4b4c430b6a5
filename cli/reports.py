#!/usr/bin/env python3

import sys
from datetime import date
from logger import get_logger
from models.money import format_cents
from tools.reports import (
    expenses_by_account,
    expenses_by_category,
    expenses_by_month,
    filter_by_month,
    recent_month_keys,
    summarize,
)

logger = get_logger()


def cmd_summary(args, services):
    """Show liquidity, cash and credit totals."""
    summary = services.balances()

    logger.info("\nSummary")
    logger.info("=" * 80)
    logger.info(f"Liquidity:        {format_cents(summary.liquidity_cents):>20}")
    logger.info(f"Cash total:       {format_cents(summary.cash_total_cents):>20}")
    logger.info(f"Available credit: {format_cents(summary.credit_available_total_cents):>20}")
    logger.info("-" * 80)
    for entry in summary.per_account:
        line = f"{entry.account.name:<28} {format_cents(entry.balance_cents):>20}"
        if entry.credit_available_cents is not None:
            line += f"   available {format_cents(entry.credit_available_cents)}"
        logger.info(line)


def cmd_expenses(args, services):
    """Show expense breakdowns by account, category and month."""
    month = None if args.month == "all" else args.month
    if month is not None and not _is_month_key(month):
        logger.error("Use YYYY-MM format for --month, or 'all'")
        sys.exit(1)

    log = services.transactions.find_all()
    selected = filter_by_month(log, month)

    period = summarize(selected)
    logger.info(f"\nPeriod: {month or 'all time'}")
    logger.info("=" * 80)
    logger.info(f"Income:   {format_cents(period.income_cents):>20}")
    logger.info(f"Expenses: {format_cents(period.expense_cents):>20}")
    logger.info(f"Net:      {format_cents(period.net_cents):>20}")

    _log_totals("Expenses by account", expenses_by_account(selected, services.accounts.find_all()))
    _log_totals(
        "Expenses by category", expenses_by_category(selected, services.categories.find_all())
    )
    # Always over the whole log, whatever month was selected
    _log_totals("Expenses by month", expenses_by_month(log, limit=args.months))


def cmd_months(args, services):
    """List recent month keys, newest first."""
    for key in recent_month_keys(services.transactions.today(), args.count):
        logger.info(key)


def _is_month_key(value):
    try:
        date.fromisoformat(f"{value}-01")
    except ValueError:
        return False
    return len(value) == 7


def _log_totals(title, totals):
    logger.info(f"\n{title}")
    logger.info("-" * 80)
    if not totals:
        logger.info("  (none)")
        return
    for label, cents in totals:
        logger.info(f"  {label:<32} {format_cents(cents):>20}")


def setup_parser(subparsers):
    """Setup reports subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "reports",
        help="Balances and expense reports",
        description="Liquidity summary and expense breakdowns",
    )

    reports_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available report commands",
        dest="subcommand",
        required=True,
    )

    summary_parser = reports_subparsers.add_parser(
        "summary", help="Liquidity, cash and credit totals"
    )
    summary_parser.set_defaults(func=cmd_summary)

    expenses_parser = reports_subparsers.add_parser(
        "expenses", help="Expenses by account, category and month"
    )
    expenses_parser.add_argument(
        "--month", default="all", help="Month to report, YYYY-MM, or 'all' (default)"
    )
    expenses_parser.add_argument(
        "--months",
        type=int,
        default=6,
        help="How many recent months the by-month view shows (default: 6)",
    )
    expenses_parser.set_defaults(func=cmd_expenses)

    months_parser = reports_subparsers.add_parser(
        "months", help="List recent months, newest first"
    )
    months_parser.add_argument("--count", type=int, default=12)
    months_parser.set_defaults(func=cmd_months)

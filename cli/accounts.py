#!/usr/bin/env python3

import sys
from logger import get_logger
from models.money import format_cents

logger = get_logger()


def cmd_list(args, services):
    """List all accounts with their current balances."""
    summary = services.balances()

    if not summary.per_account:
        logger.info("No accounts found.")
        return

    logger.info("\nAccounts:")
    logger.info("=" * 80)
    for entry in summary.per_account:
        account = entry.account
        logger.info(f"ID: {account.id}")
        logger.info(f"Name: {account.name}")
        logger.info(f"Type: {account.type.value}")
        logger.info(f"Balance: {format_cents(entry.balance_cents)}")
        if account.is_credit:
            logger.info(f"Credit limit: {format_cents(account.credit_limit_cents)}")
            logger.info(f"Available credit: {format_cents(entry.credit_available_cents)}")
        logger.info("-" * 80)

    logger.info(f"\nTotal accounts: {len(summary.per_account)}")


def cmd_show(args, services):
    """Show one account and its balance."""
    entry = services.balances().for_account(args.account_id)
    if entry is None:
        logger.error(f"Account '{args.account_id}' not found.")
        logger.info("Use 'python -m cli accounts list' to see available accounts.")
        sys.exit(1)

    logger.info(f"{entry.account.name} ({entry.account.id})")
    logger.info(f"  Balance: {format_cents(entry.balance_cents)}")
    if entry.account.is_credit:
        logger.info(f"  Debt: {format_cents(entry.debt_cents)}")
        logger.info(f"  Available credit: {format_cents(entry.credit_available_cents)}")


def setup_parser(subparsers):
    """Setup accounts subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "accounts",
        help="List accounts and balances",
        description="Show cash and credit accounts with their balances",
    )

    accounts_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available account commands",
        dest="subcommand",
        required=True,
    )

    list_parser = accounts_subparsers.add_parser(
        "list", help="List all accounts with balances"
    )
    list_parser.set_defaults(func=cmd_list)

    show_parser = accounts_subparsers.add_parser("show", help="Show one account")
    show_parser.add_argument("account_id", help="ID of the account, e.g. nequi")
    show_parser.set_defaults(func=cmd_show)

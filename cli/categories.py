#!/usr/bin/env python3

from logger import get_logger
from models.category import CategoryKind

logger = get_logger()


def cmd_list(args, services):
    """List categories, optionally only expense or income ones."""
    kind = CategoryKind[args.kind.upper()] if args.kind else None
    categories = services.categories.find_all(kind)

    if not categories:
        logger.info("No categories found.")
        return

    logger.info("\nCategories:")
    logger.info("=" * 80)
    for category in categories:
        logger.info(f"{category.id:<24} {category.kind.name.lower():<8} {category.name}")

    logger.info(f"\nTotal categories: {len(categories)}")


def cmd_payment_methods(args, services):
    """List payment methods and the account each one draws from."""
    methods = services.transactions.payment_methods
    if not methods:
        logger.info("No payment methods configured.")
        return

    for method in methods.values():
        account = services.accounts.find(method.account_id)
        account_name = account.name if account else method.account_id
        logger.info(f"{method.id:<16} {method.label}  ->  {account_name}")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="List categories",
        description="List expense and income categories and payment methods",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    list_parser = categories_subparsers.add_parser("list", help="List all categories")
    list_parser.add_argument(
        "--kind",
        choices=["expense", "income"],
        help="Only list categories of this kind",
    )
    list_parser.set_defaults(func=cmd_list)

    methods_parser = categories_subparsers.add_parser(
        "payment-methods", help="List payment methods and their default accounts"
    )
    methods_parser.set_defaults(func=cmd_payment_methods)

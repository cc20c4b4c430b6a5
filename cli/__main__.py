#!/usr/bin/env python3
"""
Hasaba CLI - Command-line interface for tracking accounts, expenses and transfers.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    accounts     List accounts and their balances
    categories   List categories
    transactions Add, delete, import and export transactions
    reports      Balances, liquidity and expense breakdowns
    migrate      Database migrations

Examples:
    python -m cli accounts list
    python -m cli transactions add expense 45000 --payment-method NEQUI --category mercado
    python -m cli transactions add transfer 100000 --from ahorros --to visa
    python -m cli transactions export hasaba-transacciones.csv
    python -m cli reports expenses --month 2025-03
    python -m cli migrate apply
"""

import sys
import sqlite3
import argparse
from cli import accounts, categories, transactions, reports, migrate
from config import load_config
from services.base import Services
from db.manager import DatabaseManager, apply_pending_migrations
from logger import get_logger, setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Hasaba - Personal and small-business finance tracking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    # Register each command's subparser
    accounts.setup_parser(subparsers)
    categories.setup_parser(subparsers)
    transactions.setup_parser(subparsers)
    reports.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)
            db_manager = DatabaseManager(config)

            if args.command == "migrate":
                # Migrate commands need db_manager for raw database operations
                args.func(args, db_manager)
            else:
                try:
                    apply_pending_migrations(db_manager)
                except (sqlite3.Error, OSError) as e:
                    get_logger().warning(f"Storage unavailable, changes will not be saved: {e}")
                services = Services(config, db_manager=db_manager)
                args.func(args, services)
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

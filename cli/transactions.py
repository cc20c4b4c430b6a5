#!/usr/bin/env python3

import sys
import gzip
import shutil
from pathlib import Path
from datetime import date, datetime
from ingestion.ledger_csv import DEFAULT_EXPORT_FILENAME
from logger import get_logger
from models.money import InvalidAmountError, format_cents
from models.transaction import InvalidTransactionError, TransactionType
from tools.reports import account_label, category_label

logger = get_logger()

_TYPES = {
    "income": TransactionType.INCOME,
    "expense": TransactionType.EXPENSE,
    "transfer": TransactionType.TRANSFER,
}


def cmd_add(args, services):
    """Add an income, expense or transfer.

    Args:
        args: Parsed command-line arguments with type, amount and account options
        services: Services container
    """
    try:
        transaction_date = date.fromisoformat(args.date) if args.date else None
    except ValueError:
        logger.error(f"Invalid date '{args.date}'. Use YYYY-MM-DD.")
        sys.exit(1)

    try:
        transaction = services.transactions.create(
            _TYPES[args.type],
            args.amount,
            transaction_date,
            account_from_id=args.account_from,
            account_to_id=args.account_to,
            category_id=args.category,
            payment_method=args.payment_method,
            note=args.note,
        )
    except (InvalidAmountError, InvalidTransactionError) as e:
        logger.error(f"Transaction rejected: {e}")
        sys.exit(1)

    logger.info(f"✓ Transaction added with ID: {transaction.id}")
    _log_transaction(transaction, services)


def cmd_list(args, services):
    """List transactions, newest first."""
    transactions = services.transactions.find_all()

    if args.month:
        try:
            year, month = (int(part) for part in args.month.split("-"))
        except ValueError:
            logger.error("Use YYYY-MM format for --month")
            sys.exit(1)
        transactions = services.transactions.get_transactions_by_month(year, month)

    if not transactions:
        logger.info("No transactions found.")
        return

    if args.limit:
        transactions = transactions[: args.limit]

    for transaction in transactions:
        _log_transaction(transaction, services)
        logger.info("-" * 80)

    logger.info(f"\nShown: {len(transactions)}")


def cmd_delete(args, services):
    """Delete a transaction by ID."""
    transaction = services.transactions.find(args.transaction_id)
    if not transaction:
        logger.error(f"Transaction with ID '{args.transaction_id}' not found.")
        sys.exit(1)

    _log_transaction(transaction, services)

    if not args.yes:
        confirm = (
            input("\nAre you sure you want to delete this transaction? (yes/no): ")
            .strip()
            .lower()
        )
        if confirm != "yes":
            logger.info("Deletion cancelled.")
            return

    services.transactions.delete(transaction.id)
    logger.info("✓ Transaction deleted.")


def cmd_import(args, services):
    """Import transactions from a CSV file in the export format."""
    csv_path = Path(args.csv_file)
    if not csv_path.exists():
        logger.error(f"File not found: {args.csv_file}")
        sys.exit(1)

    logger.info(f"Importing transactions from: {csv_path}")

    imported = services.transactions.import_file(csv_path)

    if not imported:
        logger.info("No transactions to import.")
        return

    config = services.config
    if config.archive_enabled:
        config.archive_dir.mkdir(parents=True, exist_ok=True)

        # Archive filename: {timestamp}_{original_filename}.gz
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        archive_path = config.archive_dir / f"{timestamp}_{csv_path.name}.gz"

        with open(csv_path, "rb") as f_in:
            with gzip.open(archive_path, "wb") as f_out:
                shutil.copyfileobj(f_in, f_out)

        logger.info(f"Archived CSV to: {archive_path}")

    logger.info(f"✓ Successfully imported {len(imported)} transactions")


def cmd_export(args, services):
    """Export the whole transaction log to CSV."""
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8", newline="") as f:
        count = services.transactions.export_csv(f)

    logger.info(f"✓ Exported {count} transactions to: {output_path}")


def _log_transaction(transaction, services):
    accounts = services.accounts.by_id()
    categories = services.categories.by_id()

    logger.info(
        f"{transaction.transaction_date.isoformat()}  {transaction.type.name.lower():<8} "
        f"{format_cents(transaction.amount_cents):>16}  [{transaction.id}]"
    )
    if transaction.type is TransactionType.INCOME:
        logger.info(f"  To: {account_label(accounts, transaction.account_to_id)}")
    elif transaction.type is TransactionType.EXPENSE:
        logger.info(f"  From: {account_label(accounts, transaction.account_from_id)}")
    else:
        logger.info(
            f"  {account_label(accounts, transaction.account_from_id)} -> "
            f"{account_label(accounts, transaction.account_to_id)}"
        )
    if transaction.type is not TransactionType.TRANSFER:
        logger.info(f"  Category: {category_label(categories, transaction.category_id)}")
    if transaction.payment_method:
        logger.info(f"  Payment method: {transaction.payment_method}")
    if transaction.note:
        logger.info(f"  Note: {transaction.note}")


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Add, list, delete, import and export transactions",
        description="Manage the transaction log",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    # transactions add
    add_parser = transactions_subparsers.add_parser("add", help="Add a transaction")
    add_parser.add_argument("type", choices=list(_TYPES), help="Transaction type")
    add_parser.add_argument("amount", help="Amount, e.g. 45000 or 45.000,50")
    add_parser.add_argument("--date", help="Date in YYYY-MM-DD format (default: today)")
    add_parser.add_argument(
        "--from", dest="account_from", help="Source account ID (expense, transfer)"
    )
    add_parser.add_argument(
        "--to", dest="account_to", help="Destination account ID (income, transfer)"
    )
    add_parser.add_argument("--category", help="Category ID (income, expense)")
    add_parser.add_argument(
        "--payment-method",
        help="Payment method tag (expense); sets the source account when --from is omitted",
    )
    add_parser.add_argument("--note", help="Free-text note")
    add_parser.set_defaults(func=cmd_add)

    # transactions list
    list_parser = transactions_subparsers.add_parser("list", help="List transactions")
    list_parser.add_argument("--month", help="Only this month, YYYY-MM")
    list_parser.add_argument("--limit", type=int, help="Show at most this many")
    list_parser.set_defaults(func=cmd_list)

    # transactions delete
    delete_parser = transactions_subparsers.add_parser(
        "delete", help="Delete a transaction by ID"
    )
    delete_parser.add_argument("transaction_id", help="ID of the transaction")
    delete_parser.add_argument(
        "--yes", action="store_true", help="Do not ask for confirmation"
    )
    delete_parser.set_defaults(func=cmd_delete)

    # transactions import
    import_parser = transactions_subparsers.add_parser(
        "import", help="Import transactions from CSV"
    )
    import_parser.add_argument("csv_file", help="Path to the CSV file")
    import_parser.set_defaults(func=cmd_import)

    # transactions export
    export_parser = transactions_subparsers.add_parser(
        "export", help="Export all transactions to CSV"
    )
    export_parser.add_argument(
        "output",
        nargs="?",
        default=DEFAULT_EXPORT_FILENAME,
        help=f"Output CSV file path (default: {DEFAULT_EXPORT_FILENAME})",
    )
    export_parser.set_defaults(func=cmd_export)

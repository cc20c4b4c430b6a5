import csv
import uuid
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from pathlib import Path
from typing import Callable, Iterable, List, Optional, TextIO, Union

from dateutil import parser as date_parser

from logger import get_logger
from models.transaction import Transaction, TransactionType, build_transaction

logger = get_logger("ingestion")

HEADER = [
    "id",
    "type",
    "date",
    "amountCents",
    "accountFromId",
    "accountToId",
    "categoryId",
    "paymentMethod",
    "note",
]

DEFAULT_EXPORT_FILENAME = "hasaba-transacciones.csv"


def new_transaction_id() -> str:
    return uuid.uuid4().hex


def sanitize(value: Optional[str]) -> str:
    """Make free text safe for the unquoted format: commas become semicolons,
    line breaks become spaces."""
    if not value:
        return ""
    return value.replace(",", ";").replace("\r\n", " ").replace("\n", " ").replace("\r", " ")


def to_row(transaction: Transaction) -> List[str]:
    return [
        transaction.id,
        transaction.type.value,
        transaction.transaction_date.isoformat(),
        str(transaction.amount_cents),
        sanitize(transaction.account_from_id),
        sanitize(transaction.account_to_id),
        sanitize(transaction.category_id),
        sanitize(transaction.payment_method),
        sanitize(transaction.note),
    ]


def export(transactions: Iterable[Transaction], dest: TextIO) -> int:
    """Write transactions in the tabular format.

    Fields are joined with commas and never quoted, so every field goes
    through sanitize() first.

    Args:
        transactions: Transactions to write, in log order.
        dest: Text stream to write to.

    Returns:
        Number of transactions written.
    """
    dest.write(",".join(HEADER) + "\n")
    count = 0
    for transaction in transactions:
        dest.write(",".join(to_row(transaction)) + "\n")
        count += 1
    logger.info(f"Exported {count} transactions")
    return count


def ingest(
    source: TextIO,
    new_id: Callable[[], str] = new_transaction_id,
    today: Callable[[], date] = date.today,
) -> List[Transaction]:
    """
    Parse transactions from the tabular format.

    Expected format:
    - Header row (line 1): id,type,date,amountCents,accountFromId,accountToId,categoryId,paymentMethod,note
    - Transaction rows (line 2+), blank lines ignored

    Rows are imported best-effort rather than rejected: a missing id gets a
    fresh one, a missing or unreadable amount becomes 0, a missing or
    unreadable date becomes today, an empty type means GASTO. Rows with an
    unknown type cannot be represented and are skipped.
    """
    transactions = []
    reader = csv.reader(source, quoting=csv.QUOTE_NONE)
    rows = [row for row in reader if any(field.strip() for field in row)]

    if not rows:
        logger.error("Empty CSV file")
        return transactions

    header = [field.strip() for field in rows[0]]
    if header != HEADER:
        logger.warning(f"Unexpected header, reading columns positionally: {rows[0]}")

    for line_num, row in enumerate(rows[1:], start=2):
        if len(row) != len(HEADER):
            logger.warning(f"Line {line_num} has {len(row)} fields, expected {len(HEADER)}")
        record = dict(zip(HEADER, row + [""] * (len(HEADER) - len(row))))

        type_code = record["type"].strip() or TransactionType.EXPENSE.value
        try:
            transaction_type = TransactionType(type_code)
        except ValueError:
            logger.warning(f"Skipping line {line_num} with unknown type: {type_code}")
            continue

        transaction = build_transaction(
            transaction_type,
            id=record["id"].strip() or new_id(),
            transaction_date=_coerce_date(record["date"], today, line_num),
            amount_cents=_coerce_amount(record["amountCents"], line_num),
            account_from_id=record["accountFromId"] or None,
            account_to_id=record["accountToId"] or None,
            category_id=record["categoryId"] or None,
            payment_method=record["paymentMethod"] or None,
            note=record["note"] or None,
        )
        transactions.append(transaction)

    logger.info(f"Successfully ingested {len(transactions)} transactions")
    return transactions


def _coerce_amount(text: str, line_num: int) -> int:
    text = text.strip()
    if not text:
        return 0
    try:
        return int(Decimal(text).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError):
        logger.warning(f"Line {line_num}: unreadable amount {text!r}, using 0")
        return 0


def _coerce_date(text: str, today: Callable[[], date], line_num: int) -> date:
    text = text.strip()
    if not text:
        return today()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError):
        logger.warning(f"Line {line_num}: unreadable date {text!r}, using today")
        return today()


def ingest_file(
    path: Union[str, Path],
    new_id: Callable[[], str] = new_transaction_id,
    today: Callable[[], date] = date.today,
) -> List[Transaction]:
    """Read a CSV file and ingest it.

    Bytes that are not valid UTF-8 are replaced with U+FFFD instead of
    failing the whole import.
    """
    with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
        return ingest(f, new_id=new_id, today=today)

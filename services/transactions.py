"""Transaction log service."""

from datetime import date, datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, TextIO, Union

from db.store import TRANSACTIONS_KEY, KeyValueStore, load_records, save_records
from ingestion import ledger_csv
from logger import get_logger
from models.money import parse_cents
from models.payment_method import PaymentMethod
from models.transaction import (
    InvalidTransactionError,
    Transaction,
    TransactionType,
    build_transaction,
)
from tools.reports import filter_by_month

logger = get_logger()


class TransactionService:
    """Owns the in-memory transaction log and its stored copy.

    The log is kept newest-first: new and imported transactions are put in
    front. Balance computation does not depend on this order.
    """

    def __init__(
        self,
        store: KeyValueStore,
        accounts,
        categories,
        payment_methods: Optional[Dict[str, PaymentMethod]] = None,
        new_id: Callable[[], str] = ledger_csv.new_transaction_id,
        today: Callable[[], date] = date.today,
    ):
        """Initialize the transaction service.

        Args:
            store: Key-value store holding the transactions blob.
            accounts: AccountService used to validate new transactions.
            categories: CategoryService used to validate new transactions.
            payment_methods: Payment method tag -> PaymentMethod mapping.
            new_id: Generator for transaction ids.
            today: Source of the current date.
        """
        self.store = store
        self.accounts = accounts
        self.categories = categories
        self.payment_methods = payment_methods or {}
        self.new_id = new_id
        self.today = today
        self._transactions: List[Transaction] = []
        self._unreadable: List[dict] = []

    def load(self) -> List[Transaction]:
        """Read the log from storage, replacing the in-memory copy.

        Records that cannot be read are kept aside and written back by save().
        """
        transactions = []
        unreadable = []
        for record in load_records(self.store, TRANSACTIONS_KEY) or []:
            try:
                transactions.append(Transaction.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping unreadable stored transaction {record!r}: {e}")
                unreadable.append(record)
        self._transactions = transactions
        self._unreadable = unreadable
        return list(transactions)

    def save(self) -> bool:
        return save_records(
            self.store,
            TRANSACTIONS_KEY,
            [t.to_dict() for t in self._transactions] + self._unreadable,
        )

    def find_all(self) -> List[Transaction]:
        """Get the whole log, newest first."""
        return list(self._transactions)

    def find(self, transaction_id: str) -> Optional[Transaction]:
        """Get a single transaction by ID, or None if not found."""
        for transaction in self._transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    def get_transactions_by_month(self, year: int, month: int) -> List[Transaction]:
        """Get transactions dated in the given month.

        Args:
            year: Year (e.g., 2025).
            month: Month (1-12).
        """
        return filter_by_month(self._transactions, f"{year:04d}-{month:02d}")

    def add(self, transaction: Transaction) -> Transaction:
        """Validate a transaction and put it at the front of the log.

        Args:
            transaction: New transaction.

        Returns:
            The same transaction.

        Raises:
            InvalidTransactionError: If the transaction is rejected. The log
                is left unchanged.
        """
        transaction.validate(self.accounts.by_id(), self.categories.by_id())
        if self.find(transaction.id) is not None:
            raise InvalidTransactionError(f"Duplicate transaction id: {transaction.id}")

        self._transactions.insert(0, transaction)
        self.save()
        logger.info(
            f"Added {transaction.type.name.lower()} {transaction.id} "
            f"({transaction.amount_cents} cents)"
        )
        return transaction

    def create(
        self,
        transaction_type: TransactionType,
        amount: Union[int, str],
        transaction_date: Optional[date] = None,
        *,
        account_from_id: Optional[str] = None,
        account_to_id: Optional[str] = None,
        category_id: Optional[str] = None,
        payment_method: Optional[str] = None,
        note: Optional[str] = None,
    ) -> Transaction:
        """Build a new transaction from user input and add it to the log.

        Args:
            transaction_type: Income, expense or transfer.
            amount: Cents as int, or free-form text such as "50.000,50".
            transaction_date: Defaults to today.
            account_from_id: Source account (expense, transfer).
            account_to_id: Destination account (income, transfer).
            category_id: Category (income, expense).
            payment_method: Payment method tag (expense). When no source
                account is given, the account mapped to the tag is used.
            note: Free text.

        Returns:
            The created transaction.

        Raises:
            InvalidAmountError: If the amount text cannot be parsed.
            InvalidTransactionError: If the transaction is rejected.
        """
        transaction_type = TransactionType(transaction_type)
        amount_cents = parse_cents(amount) if isinstance(amount, str) else int(amount)

        if transaction_type is TransactionType.EXPENSE and payment_method:
            method = self.payment_methods.get(payment_method)
            if method is None:
                raise InvalidTransactionError(f"Unknown payment method: {payment_method}")
            if account_from_id is None:
                account_from_id = method.account_id

        now = datetime.now()
        transaction = build_transaction(
            transaction_type,
            id=self.new_id(),
            transaction_date=transaction_date or self.today(),
            amount_cents=amount_cents,
            account_from_id=account_from_id,
            account_to_id=account_to_id,
            category_id=category_id,
            payment_method=payment_method,
            note=(note or "").strip() or None,
            created_at=now,
            updated_at=now,
        )
        return self.add(transaction)

    def delete(self, transaction_id: str) -> bool:
        """Delete a transaction by ID.

        Args:
            transaction_id: The transaction ID to delete.

        Returns:
            True if the transaction was deleted, False if not found.
        """
        remaining = [t for t in self._transactions if t.id != transaction_id]
        if len(remaining) == len(self._transactions):
            return False
        self._transactions = remaining
        self.save()
        logger.info(f"Deleted transaction {transaction_id}")
        return True

    def import_csv(self, source: TextIO) -> List[Transaction]:
        """Parse CSV rows and put them in front of the log.

        No deduplication and no reference checks: rows naming unknown
        accounts simply have no effect on balances.

        Args:
            source: Text stream in the export format.

        Returns:
            The imported transactions.
        """
        return self._prepend(
            ledger_csv.ingest(source, new_id=self.new_id, today=self.today)
        )

    def import_file(self, path: Union[str, Path]) -> List[Transaction]:
        """Import a CSV file in the export format; see import_csv()."""
        return self._prepend(
            ledger_csv.ingest_file(path, new_id=self.new_id, today=self.today)
        )

    def _prepend(self, imported: List[Transaction]) -> List[Transaction]:
        if imported:
            self._transactions = imported + self._transactions
            self.save()
        return imported

    def export_csv(self, dest: TextIO) -> int:
        """Write the whole log in CSV format; returns the number of rows."""
        return ledger_csv.export(self._transactions, dest)

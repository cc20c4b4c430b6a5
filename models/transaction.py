"""Transaction models.

A transaction is one of three variants (Income, Expense, Transfer). Each
variant only carries the fields that make sense for it: an Income has no
source account, an Expense has no destination, a Transfer has neither
category nor payment method. Reading a field a variant does not carry
yields None.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Dict, Optional, Tuple

from models.account import Account
from models.category import Category, CategoryKind


class TransactionType(str, Enum):
    """Transaction types. Values are the codes used in CSV and stored state."""

    INCOME = "INGRESO"
    EXPENSE = "GASTO"
    TRANSFER = "TRANSFERENCIA"


class InvalidTransactionError(ValueError):
    """Raised when a new transaction is rejected before entering the log."""


@dataclass
class Transaction:
    id: str  # random 128-bit token, hex
    transaction_date: date
    amount_cents: int  # always positive for transactions created through the service
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    type: ClassVar[TransactionType]

    def __post_init__(self):
        now = datetime.now()
        if self.created_at is None:
            self.created_at = now
        if self.updated_at is None:
            self.updated_at = self.created_at

    @property
    def account_from_id(self) -> Optional[str]:
        return None

    @property
    def account_to_id(self) -> Optional[str]:
        return None

    @property
    def category_id(self) -> Optional[str]:
        return None

    @property
    def payment_method(self) -> Optional[str]:
        return None

    def validate(
        self,
        accounts: Dict[str, Account],
        categories: Dict[str, Category],
    ) -> None:
        """Check the transaction can enter the log.

        Args:
            accounts: Account registry keyed by id.
            categories: Category registry keyed by id.

        Raises:
            InvalidTransactionError: If any field is missing or inconsistent.
        """
        if self.amount_cents <= 0:
            raise InvalidTransactionError("Amount must be greater than zero")

    def to_dict(self) -> dict:
        """Convert transaction to dictionary for storage."""
        return {
            "id": self.id,
            "type": self.type.value,
            "date": self.transaction_date.isoformat(),
            "amount_cents": self.amount_cents,
            "account_from_id": self.account_from_id,
            "account_to_id": self.account_to_id,
            "category_id": self.category_id,
            "payment_method": self.payment_method,
            "note": self.note,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        """Rebuild a transaction of the right variant from its stored form."""
        return build_transaction(
            TransactionType(data["type"]),
            id=data["id"],
            transaction_date=date.fromisoformat(data["date"]),
            amount_cents=int(data.get("amount_cents") or 0),
            account_from_id=data.get("account_from_id"),
            account_to_id=data.get("account_to_id"),
            category_id=data.get("category_id"),
            payment_method=data.get("payment_method"),
            note=data.get("note"),
            created_at=_parse_timestamp(data.get("created_at")),
            updated_at=_parse_timestamp(data.get("updated_at")),
        )


def _require_account(
    accounts: Dict[str, Account], account_id: Optional[str], role: str
) -> Account:
    if not account_id:
        raise InvalidTransactionError(f"{role} account is required")
    account = accounts.get(account_id)
    if account is None:
        raise InvalidTransactionError(f"Unknown {role.lower()} account: {account_id}")
    return account


def _check_category(
    categories: Dict[str, Category],
    category_id: Optional[str],
    kind: CategoryKind,
) -> None:
    if category_id is None:
        return
    category = categories.get(category_id)
    if category is None:
        raise InvalidTransactionError(f"Unknown category: {category_id}")
    if category.kind is not kind:
        raise InvalidTransactionError(
            f"Category '{category.name}' is not an {kind.name.lower()} category"
        )


@dataclass
class Income(Transaction):
    account_to_id: Optional[str] = None
    category_id: Optional[str] = None

    type: ClassVar[TransactionType] = TransactionType.INCOME

    def validate(self, accounts, categories):
        super().validate(accounts, categories)
        _require_account(accounts, self.account_to_id, "Destination")
        _check_category(categories, self.category_id, CategoryKind.INCOME)


@dataclass
class Expense(Transaction):
    account_from_id: Optional[str] = None
    category_id: Optional[str] = None
    payment_method: Optional[str] = None

    type: ClassVar[TransactionType] = TransactionType.EXPENSE

    def validate(self, accounts, categories):
        super().validate(accounts, categories)
        _require_account(accounts, self.account_from_id, "Source")
        _check_category(categories, self.category_id, CategoryKind.EXPENSE)


@dataclass
class Transfer(Transaction):
    account_from_id: Optional[str] = None
    account_to_id: Optional[str] = None

    type: ClassVar[TransactionType] = TransactionType.TRANSFER

    def validate(self, accounts, categories):
        super().validate(accounts, categories)
        _require_account(accounts, self.account_from_id, "Source")
        _require_account(accounts, self.account_to_id, "Destination")
        if self.account_from_id == self.account_to_id:
            raise InvalidTransactionError(
                "Source and destination of a transfer must differ"
            )


_VARIANTS = {variant.type: variant for variant in (Income, Expense, Transfer)}

# Fields each variant accepts beyond the common ones
_VARIANT_FIELDS: Dict[TransactionType, Tuple[str, ...]] = {
    TransactionType.INCOME: ("account_to_id", "category_id"),
    TransactionType.EXPENSE: ("account_from_id", "category_id", "payment_method"),
    TransactionType.TRANSFER: ("account_from_id", "account_to_id"),
}


def build_transaction(transaction_type: TransactionType, **fields) -> Transaction:
    """Create the variant for ``transaction_type``.

    Fields the variant does not carry (e.g. a category on a transfer) are
    dropped, so callers can pass a flat record.

    Args:
        transaction_type: Which variant to build.
        **fields: Common fields plus any of account_from_id, account_to_id,
            category_id, payment_method.

    Returns:
        An Income, Expense or Transfer instance.
    """
    variant = _VARIANTS[TransactionType(transaction_type)]
    common = ("id", "transaction_date", "amount_cents", "note", "created_at", "updated_at")
    allowed = common + _VARIANT_FIELDS[variant.type]
    return variant(**{k: v for k, v in fields.items() if k in allowed})


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None

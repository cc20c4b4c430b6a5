from dataclasses import dataclass
from enum import Enum


class AccountType(str, Enum):
    CASH = "CASH"
    CREDIT = "CREDIT"


@dataclass
class Account:
    id: str  # stable slug, e.g. "nequi"
    name: str  # display name, e.g. "Tarjeta Visa"
    type: AccountType
    opening_balance_cents: int = 0  # CASH only, may be negative
    credit_limit_cents: int = 0  # CREDIT only
    opening_debt_cents: int = 0  # CREDIT only, amount owed

    def __post_init__(self):
        self.type = AccountType(self.type)
        if self.is_credit:
            if self.credit_limit_cents < 0:
                raise ValueError(f"Account {self.id}: credit limit cannot be negative")
            if self.opening_debt_cents < 0:
                raise ValueError(f"Account {self.id}: opening debt cannot be negative")

    @property
    def is_credit(self) -> bool:
        return self.type is AccountType.CREDIT

    @property
    def is_cash(self) -> bool:
        return self.type is AccountType.CASH

    def to_dict(self) -> dict:
        """Convert account to dictionary for storage."""
        data = {"id": self.id, "name": self.name, "type": self.type.value}
        if self.is_credit:
            data["credit_limit_cents"] = self.credit_limit_cents
            data["opening_debt_cents"] = self.opening_debt_cents
        else:
            data["opening_balance_cents"] = self.opening_balance_cents
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Account":
        """Build an account from its stored dictionary form."""
        return cls(
            id=data["id"],
            name=data.get("name") or data["id"],
            type=AccountType(data["type"]),
            opening_balance_cents=int(data.get("opening_balance_cents") or 0),
            credit_limit_cents=int(data.get("credit_limit_cents") or 0),
            opening_debt_cents=int(data.get("opening_debt_cents") or 0),
        )

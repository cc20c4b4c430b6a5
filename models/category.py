"""Category model for income and expense classification."""

from dataclasses import dataclass
from enum import Enum


class CategoryKind(str, Enum):
    """Which transaction type a category applies to.

    Values are the codes used in stored state.
    """

    EXPENSE = "GASTO"
    INCOME = "INGRESO"


@dataclass
class Category:
    """Represents a transaction category.

    Attributes:
        id: Stable identifier, e.g. "mercado".
        name: Display name.
        kind: Whether expense or income transactions may use it.
    """

    id: str
    name: str
    kind: CategoryKind

    def __post_init__(self):
        self.kind = CategoryKind(self.kind)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "kind": self.kind.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Category":
        return cls(
            id=data["id"],
            name=data.get("name") or data["id"],
            kind=CategoryKind(data["kind"]),
        )

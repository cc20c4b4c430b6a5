"""Seed registry loading.

The seed file lists the accounts, categories and payment methods every
installation starts with. It is loaded and validated once at startup.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from config import get_default_seed_file
from logger import get_logger
from models.account import Account
from models.category import Category
from models.payment_method import PaymentMethod

logger = get_logger()


class SeedError(ValueError):
    """Raised when the seed file is missing or inconsistent."""


@dataclass
class Seed:
    accounts: List[Account] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    payment_methods: Dict[str, PaymentMethod] = field(default_factory=dict)


def load_seed(seed_file: Optional[Path] = None) -> Seed:
    """Load seed definitions from a YAML file.

    Args:
        seed_file: Seed file to read. Defaults to db/seed/registry.yaml.

    Returns:
        Validated Seed.

    Raises:
        SeedError: If the file is missing, malformed, or a payment method
            points at an account that is not seeded.
    """
    seed_file = seed_file or get_default_seed_file()
    if not seed_file.exists():
        raise SeedError(f"Seed file not found: {seed_file}")

    logger.debug(f"Loading seed registry from {seed_file}")

    try:
        with open(seed_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise SeedError(f"Invalid seed file {seed_file}: {e}") from e

    try:
        seed = Seed(
            accounts=[Account.from_dict(a) for a in data.get("accounts") or []],
            categories=[Category.from_dict(c) for c in data.get("categories") or []],
            payment_methods={
                pm["id"]: PaymentMethod(
                    id=pm["id"], label=pm.get("label") or pm["id"], account_id=pm["account_id"]
                )
                for pm in data.get("payment_methods") or []
            },
        )
    except (KeyError, TypeError, ValueError) as e:
        raise SeedError(f"Invalid entry in seed file {seed_file}: {e}") from e

    validate_seed(seed)
    return seed


def validate_seed(seed: Seed) -> None:
    """Check ids are unique and payment methods map to seeded accounts."""
    for kind, entries in (("account", seed.accounts), ("category", seed.categories)):
        seen = set()
        for entry in entries:
            if entry.id in seen:
                raise SeedError(f"Duplicate {kind} id in seed: {entry.id}")
            seen.add(entry.id)

    account_ids = {a.id for a in seed.accounts}
    for method in seed.payment_methods.values():
        if method.account_id not in account_ids:
            raise SeedError(
                f"Payment method {method.id} maps to unknown account: {method.account_id}"
            )

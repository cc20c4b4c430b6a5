"""Account registry service."""

from typing import List, Optional, Sequence

from db.store import ACCOUNTS_KEY, KeyValueStore, load_records, save_records
from logger import get_logger
from models.account import Account
from tools.registry import reconcile, record_ids

logger = get_logger()


class AccountService:
    """Owns the in-memory account registry and its stored copy."""

    def __init__(self, store: KeyValueStore):
        """Initialize the account service.

        Args:
            store: Key-value store holding the accounts blob.
        """
        self.store = store
        self._accounts: List[Account] = []
        self._unreadable: List[dict] = []

    def load(self) -> List[Account]:
        """Read the registry from storage, replacing the in-memory copy.

        Unreadable entries are left out of the registry but kept as stored
        and written back by save(). A missing blob yields an empty registry
        until reconcile() adds the seeds.

        Returns:
            The loaded accounts.
        """
        accounts = []
        unreadable = []
        for record in load_records(self.store, ACCOUNTS_KEY) or []:
            try:
                accounts.append(Account.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping unreadable stored account {record!r}: {e}")
                unreadable.append(record)
        self._accounts = accounts
        self._unreadable = unreadable
        return list(accounts)

    def reconcile(self, seeds: Sequence[Account]) -> bool:
        """Add any seed account missing from the registry and save if it changed.

        Args:
            seeds: Seed account definitions.

        Returns:
            True if accounts were added.
        """
        merged, changed = reconcile(
            self._accounts, seeds, reserved_ids=record_ids(self._unreadable)
        )
        if changed:
            added = [a.id for a in merged[len(self._accounts):]]
            logger.info(f"Added seed accounts: {', '.join(added)}")
            self._accounts = merged
            self.save()
        return changed

    def save(self) -> bool:
        records = [a.to_dict() for a in self._accounts] + self._unreadable
        return save_records(self.store, ACCOUNTS_KEY, records)

    def find_all(self) -> List[Account]:
        """Get all accounts, in registry order."""
        return list(self._accounts)

    def find(self, account_id: str) -> Optional[Account]:
        """Get a single account by ID.

        Args:
            account_id: The account ID to find.

        Returns:
            Account object if found, None otherwise.
        """
        for account in self._accounts:
            if account.id == account_id:
                return account
        return None

    def by_id(self) -> dict:
        return {a.id: a for a in self._accounts}

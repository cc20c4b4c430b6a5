"""Base services container for dependency injection."""

from datetime import date
from typing import Callable, Optional

from config import Config
from db.manager import DatabaseManager
from db.store import KeyValueStore
from ingestion.ledger_csv import new_transaction_id
from services.accounts import AccountService
from services.categories import CategoryService
from services.seeds import Seed, load_seed
from services.transactions import TransactionService
from tools.balances import BalanceSummary, compute_balances


class Services:
    """Container for all application services.

    This is the session: it owns the account registry, the category
    registry and the transaction log, loads them once on creation and
    reconciles the registries with the seed definitions.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config is ignored.
        seed: Optional seed definitions. Defaults to the configured seed file.
        new_id: Optional transaction id generator.
        today: Optional source of the current date.
    """

    def __init__(
        self,
        config: Config,
        db_manager=None,
        seed: Optional[Seed] = None,
        new_id: Callable[[], str] = new_transaction_id,
        today: Callable[[], date] = date.today,
    ):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)
        self.store = KeyValueStore(self.db_manager)
        self.seed = seed if seed is not None else load_seed(config.seed_file)

        self.accounts = AccountService(self.store)
        self.categories = CategoryService(self.store)
        self.transactions = TransactionService(
            self.store,
            self.accounts,
            self.categories,
            payment_methods=self.seed.payment_methods,
            new_id=new_id,
            today=today,
        )

        self.load()

    def load(self) -> None:
        """Read all three collections from storage and reconcile the registries."""
        self.accounts.load()
        self.categories.load()
        self.transactions.load()
        self.reconcile()

    def reconcile(self) -> bool:
        """Add missing seed accounts and categories. Safe to run repeatedly.

        Returns:
            True if either registry changed.
        """
        accounts_changed = self.accounts.reconcile(self.seed.accounts)
        categories_changed = self.categories.reconcile(self.seed.categories)
        return accounts_changed or categories_changed

    def balances(self) -> BalanceSummary:
        """Compute balances for a consistent snapshot of the session."""
        return compute_balances(
            self.accounts.find_all(),
            self.transactions.find_all(),
            self.config.liquidity_accounts,
        )

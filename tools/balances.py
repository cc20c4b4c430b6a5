"""Balance engine.

Replays the transaction log against the account registry. Every account is
tracked as a signed balance in cents: for cash accounts that is the money
held, for credit accounts it is the negated debt. In those terms:

- Income adds to the destination (for a credit account: pays down debt).
- Expense subtracts from the source (for a credit account: adds debt).
- Transfer subtracts from the source and adds to the destination. Between
  cash accounts this moves money, cash to credit is a card payment, credit
  to cash is a cash advance and credit to credit is a balance transfer.

Each transaction's effect depends only on its own fields and the accounts
it references, so the result does not depend on the order of the log.
Transactions that reference an unknown account, transfer to their own
source or carry a non-positive amount have no effect at all.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from models.account import Account
from models.transaction import Transaction, TransactionType


@dataclass
class AccountBalance:
    """Computed state of one account.

    Attributes:
        account: The account.
        balance_cents: Money held (cash) or -debt (credit).
        credit_available_cents: limit - debt for credit accounts, None for cash.
    """

    account: Account
    balance_cents: int
    credit_available_cents: Optional[int]

    @property
    def debt_cents(self) -> Optional[int]:
        return -self.balance_cents if self.account.is_credit else None


@dataclass
class BalanceSummary:
    per_account: List[AccountBalance]
    liquidity_cents: int
    cash_total_cents: int
    credit_available_total_cents: int

    def for_account(self, account_id: str) -> Optional[AccountBalance]:
        for entry in self.per_account:
            if entry.account.id == account_id:
                return entry
        return None


def transaction_effects(
    transaction: Transaction, accounts: Dict[str, Account]
) -> Dict[str, int]:
    """Balance deltas produced by a single transaction.

    Args:
        transaction: Transaction to evaluate.
        accounts: Account registry keyed by id.

    Returns:
        Mapping of account id to signed balance delta in cents. Empty when
        the transaction is inert.
    """
    amount = transaction.amount_cents
    if amount <= 0:
        return {}

    if transaction.type is TransactionType.INCOME:
        target = transaction.account_to_id
        if target not in accounts:
            return {}
        return {target: amount}

    if transaction.type is TransactionType.EXPENSE:
        source = transaction.account_from_id
        if source not in accounts:
            return {}
        return {source: -amount}

    source = transaction.account_from_id
    target = transaction.account_to_id
    if source not in accounts or target not in accounts or source == target:
        return {}
    return {source: -amount, target: amount}


def compute_balances(
    accounts: Sequence[Account],
    transactions: Iterable[Transaction],
    liquidity_account_ids: Iterable[str] = (),
) -> BalanceSummary:
    """Compute the balance of every account from scratch.

    Args:
        accounts: Account registry, in display order.
        transactions: Transaction log, in any order.
        liquidity_account_ids: Cash accounts counted as immediately spendable.
            Ids that are missing or not cash accounts contribute zero.

    Returns:
        BalanceSummary with one entry per account, in registry order.
    """
    by_id = {account.id: account for account in accounts}

    deltas: Counter = Counter()
    for transaction in transactions:
        deltas.update(transaction_effects(transaction, by_id))

    per_account = []
    for account in accounts:
        if account.is_credit:
            debt = account.opening_debt_cents - deltas[account.id]
            per_account.append(
                AccountBalance(
                    account=account,
                    balance_cents=-debt,
                    credit_available_cents=account.credit_limit_cents - debt,
                )
            )
        else:
            per_account.append(
                AccountBalance(
                    account=account,
                    balance_cents=account.opening_balance_cents + deltas[account.id],
                    credit_available_cents=None,
                )
            )

    cash = {e.account.id: e.balance_cents for e in per_account if e.account.is_cash}
    liquidity = sum(cash.get(account_id, 0) for account_id in set(liquidity_account_ids))

    return BalanceSummary(
        per_account=per_account,
        liquidity_cents=liquidity,
        cash_total_cents=sum(cash.values()),
        credit_available_total_cents=sum(
            e.credit_available_cents for e in per_account if e.account.is_credit
        ),
    )

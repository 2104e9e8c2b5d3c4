"""
Module: poultry_engines.ledger
Responsibility:
    The ledger rules shared by every money-moving operation, plus the two
    operations that touch only the ledger: the generic transaction entry
    and the initial balance credit.

Architecture position:
    Engines -- pure state transitions, zero I/O.  Time arrives as ``now``.

Invariants enforced:
    - Credit of A: balance += A.  Debit of A: balance -= A.
    - borrowed_amount == max(0, -balance) after every application.
    - The balance itself is never clamped; a negative balance is money
      borrowed from the financier (there is no separate loan ledger).
    - Transactions are appended, never edited or removed.
    - Every transaction amount is strictly positive.

Failure modes:
    - InvalidQuantityError for a non-positive amount.
    - InvalidVocabularyError for an unknown type, category or company.
    - MissingFieldError for an empty source.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import uuid4

from poultry_engines._validation import require_positive, require_text
from poultry_engines.tracer import traced_engine
from poultry_kernel.domain.records import BankAccount, FarmState, Transaction
from poultry_kernel.domain.vocabulary import (
    FINANCIER,
    LinkedCompany,
    TransactionCategory,
    TransactionType,
    parse_vocabulary,
)
from poultry_kernel.logging_config import get_logger

logger = get_logger("engines.ledger")

_ZERO = Decimal("0")


def borrowed_for(balance: Decimal) -> Decimal:
    """Shortfall reported as borrowed when the balance is negative."""
    return max(_ZERO, -balance)


def apply_credit(account: BankAccount, amount: Decimal, now: datetime) -> BankAccount:
    balance = account.balance + amount
    return BankAccount(balance=balance, borrowed_amount=borrowed_for(balance), last_updated=now)


def apply_debit(account: BankAccount, amount: Decimal, now: datetime) -> BankAccount:
    balance = account.balance - amount
    return BankAccount(balance=balance, borrowed_amount=borrowed_for(balance), last_updated=now)


def post_transaction(
    state: FarmState,
    *,
    transaction_date: date,
    type: TransactionType | str,
    amount: Any,
    source: str,
    linked_company: LinkedCompany | str,
    description: str,
    category: TransactionCategory | str,
    now: datetime,
) -> tuple[FarmState, Transaction]:
    """
    Append one transaction and apply it to the bank account.

    Used by every operation that moves money so the record and its ledger
    effect always land in the same snapshot.

    Returns:
        The new state and the transaction that was appended.
    """
    txn_type = parse_vocabulary(TransactionType, type, "type")
    txn = Transaction(
        id=uuid4(),
        transaction_date=transaction_date,
        type=txn_type,
        amount=require_positive(amount, "amount"),
        source=require_text(source, "source"),
        linked_company=parse_vocabulary(LinkedCompany, linked_company, "linked_company"),
        description=description or "",
        category=parse_vocabulary(TransactionCategory, category, "category"),
    )

    if txn_type == TransactionType.CREDIT:
        account = apply_credit(state.bank_account, txn.amount, now)
    else:
        account = apply_debit(state.bank_account, txn.amount, now)

    if account.borrowed_amount > state.bank_account.borrowed_amount:
        logger.info(
            "borrowing_increased",
            extra={
                "transaction_id": str(txn.id),
                "borrowed_amount": account.borrowed_amount,
                "category": txn.category.value,
            },
        )

    new_state = replace(
        state,
        transactions=state.transactions + (txn,),
        bank_account=account,
    )
    return new_state, txn


@traced_engine(
    "ledger.transaction", "1.0",
    fingerprint_fields=("type", "amount", "category", "linked_company"),
)
def add_transaction(
    state: FarmState,
    *,
    transaction_date: date,
    type: TransactionType | str,
    amount: Any,
    source: str,
    description: str = "",
    category: TransactionCategory | str = TransactionCategory.OTHER,
    linked_company: LinkedCompany | str = LinkedCompany.EXTERNAL,
    now: datetime,
) -> FarmState:
    """Record a manual credit or debit (utilities, labor, other ...)."""
    new_state, _ = post_transaction(
        state,
        transaction_date=transaction_date,
        type=type,
        amount=amount,
        source=source,
        linked_company=linked_company,
        description=description,
        category=category,
        now=now,
    )
    return new_state


@traced_engine("ledger.initial_balance", "1.0", fingerprint_fields=("amount",))
def set_initial_balance(
    state: FarmState,
    *,
    amount: Any,
    now: datetime,
    transaction_date: date | None = None,
) -> FarmState:
    """Credit funds received from the financier."""
    new_state, _ = post_transaction(
        state,
        transaction_date=transaction_date or now.date(),
        type=TransactionType.CREDIT,
        amount=amount,
        source="Balance Added",
        linked_company=FINANCIER,
        description=f"Funds received from {FINANCIER.value} (External)",
        category=TransactionCategory.INITIAL_BALANCE,
        now=now,
    )
    return new_state

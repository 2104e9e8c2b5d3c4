"""
Module: poultry_engines.labour
Responsibility:
    The worker register and wage payments.

Architecture position:
    Engines -- pure state transitions, zero I/O.

Invariants enforced:
    - Each payment posts exactly one debit (category labour_payment) and
      the payment keeps the id of that transaction.
    - Workers are deactivated, never deleted, so old payments keep
      resolving to a name.

Failure modes:
    - LabourNotFoundError when paying an unregistered worker.
    - InvalidQuantityError for non-positive amounts or negative wages.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Any
from uuid import UUID, uuid4

from poultry_engines._validation import require_non_negative, require_positive, require_text
from poultry_engines.ledger import post_transaction
from poultry_engines.tracer import traced_engine
from poultry_kernel.domain.records import FarmState, Labour, LabourPayment
from poultry_kernel.domain.vocabulary import (
    LabourStatus,
    LinkedCompany,
    TransactionCategory,
    TransactionType,
    WageType,
    parse_vocabulary,
)
from poultry_kernel.exceptions import LabourNotFoundError
from poultry_kernel.logging_config import get_logger

logger = get_logger("engines.labour")


@traced_engine("labour.add", "1.0", fingerprint_fields=("name", "role", "wage_type"))
def add_labour(
    state: FarmState,
    *,
    name: str,
    role: str,
    wage_type: WageType | str,
    wage_amount: Any,
    joining_date: date,
    phone: str = "",
) -> FarmState:
    worker = Labour(
        id=uuid4(),
        name=require_text(name, "name"),
        role=require_text(role, "role"),
        wage_type=parse_vocabulary(WageType, wage_type, "wage_type"),
        wage_amount=require_non_negative(wage_amount, "wage_amount"),
        joining_date=joining_date,
        phone=phone or "",
        status=LabourStatus.ACTIVE,
    )
    return replace(state, labour_list=state.labour_list + (worker,))


@traced_engine("labour.status", "1.0", fingerprint_fields=("status",))
def set_labour_status(
    state: FarmState, labour_id: UUID, *, status: LabourStatus | str
) -> FarmState:
    new_status = parse_vocabulary(LabourStatus, status, "status")
    if state.find_labour(labour_id) is None:
        logger.warning("labour_not_found", extra={"labour_id": str(labour_id)})
        return state
    return replace(
        state,
        labour_list=tuple(
            replace(w, status=new_status) if w.id == labour_id else w
            for w in state.labour_list
        ),
    )


@traced_engine("labour.payment", "1.0", fingerprint_fields=("amount",))
def record_labour_payment(
    state: FarmState,
    labour_id: UUID,
    *,
    amount: Any,
    payment_date: date,
    now: datetime,
    notes: str = "",
) -> FarmState:
    """Pay a registered worker out of the farm account."""
    worker = state.find_labour(labour_id)
    if worker is None:
        raise LabourNotFoundError(str(labour_id))
    paid = require_positive(amount, "amount")
    if worker.status == LabourStatus.INACTIVE:
        logger.info("payment_to_inactive_labour", extra={"labour_id": str(labour_id)})

    state, txn = post_transaction(
        state,
        transaction_date=payment_date,
        type=TransactionType.DEBIT,
        amount=paid,
        source=f"Labour Payment - {worker.name}",
        linked_company=LinkedCompany.EXTERNAL,
        description=f"Labour Payment - {worker.name} ({worker.role})",
        category=TransactionCategory.LABOUR_PAYMENT,
        now=now,
    )
    payment = LabourPayment(
        id=uuid4(),
        labour_id=labour_id,
        payment_date=payment_date,
        amount=paid,
        notes=notes or "",
        transaction_id=txn.id,
    )
    return replace(state, labour_payments=state.labour_payments + (payment,))

"""
Module: poultry_engines.flocks
Responsibility:
    Flock registration, typed flock edits, mortality and bird purchases.

Architecture position:
    Engines -- pure state transitions, zero I/O.

Invariants enforced:
    - number_of_layers never goes negative.
    - mortality is cumulative and only grows.
    - Flocks are archived (is_active=False), never deleted.
    - Only a bird purchase moves money: one debit, category bird_purchase,
      linked company Chairman Hatchery.

Failure modes:
    - InvalidQuantityError for negative counts or ages.
    - MissingFieldError for an empty breed.
    - Unknown flock ids on edits / mortality are a logged no-op.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Any
from uuid import UUID, uuid4

from poultry_engines._validation import require_count, require_positive, require_text
from poultry_engines.ledger import post_transaction
from poultry_engines.tracer import traced_engine
from poultry_kernel.domain.commands import (
    CorrectFlockAge,
    CorrectLayerCount,
    FlockCommand,
    RenameBreed,
    SetFlockActive,
)
from poultry_kernel.domain.records import FarmState, Flock
from poultry_kernel.domain.vocabulary import CHICK_SUPPLIER, TransactionCategory, TransactionType
from poultry_kernel.logging_config import get_logger

logger = get_logger("engines.flocks")


def _replace_flock(state: FarmState, flock_id: UUID, **changes: Any) -> FarmState:
    if state.find_flock(flock_id) is None:
        logger.warning("flock_not_found", extra={"flock_id": str(flock_id)})
        return state
    return replace(
        state,
        flocks=tuple(
            replace(f, **changes) if f.id == flock_id else f for f in state.flocks
        ),
    )


@traced_engine("flocks.add", "1.0", fingerprint_fields=("breed", "number_of_layers"))
def add_flock(
    state: FarmState,
    *,
    breed: str,
    number_of_layers: Any,
    age_weeks: Any,
    start_date: date,
    is_active: bool = True,
) -> FarmState:
    flock = Flock(
        id=uuid4(),
        breed=require_text(breed, "breed"),
        number_of_layers=require_count(number_of_layers, "number_of_layers"),
        age_weeks=require_count(age_weeks, "age_weeks"),
        start_date=start_date,
        mortality=0,
        is_active=is_active,
    )
    return replace(state, flocks=state.flocks + (flock,))


@traced_engine("flocks.update", "1.0")
def update_flock(state: FarmState, command: FlockCommand) -> FarmState:
    """Apply one typed edit to a flock; no-op if the flock does not exist."""
    if isinstance(command, SetFlockActive):
        return _replace_flock(state, command.flock_id, is_active=bool(command.is_active))
    if isinstance(command, RenameBreed):
        return _replace_flock(
            state, command.flock_id, breed=require_text(command.breed, "breed")
        )
    if isinstance(command, CorrectLayerCount):
        return _replace_flock(
            state,
            command.flock_id,
            number_of_layers=require_count(command.number_of_layers, "number_of_layers"),
        )
    if isinstance(command, CorrectFlockAge):
        return _replace_flock(
            state,
            command.flock_id,
            age_weeks=require_count(command.age_weeks, "age_weeks"),
            start_date=command.start_date,
        )
    raise TypeError(f"Unsupported flock command: {type(command).__name__}")


@traced_engine("flocks.mortality", "1.0", fingerprint_fields=("count",))
def record_mortality(state: FarmState, flock_id: UUID, *, count: Any) -> FarmState:
    """Record deaths; the head count floors at zero."""
    deaths = require_count(count, "count")
    flock = state.find_flock(flock_id)
    if flock is None:
        logger.warning("flock_not_found", extra={"flock_id": str(flock_id)})
        return state
    if deaths > flock.number_of_layers:
        logger.warning(
            "mortality_exceeds_head_count",
            extra={
                "flock_id": str(flock_id),
                "count": deaths,
                "number_of_layers": flock.number_of_layers,
            },
        )
    return _replace_flock(
        state,
        flock_id,
        mortality=flock.mortality + deaths,
        number_of_layers=max(0, flock.number_of_layers - deaths),
    )


@traced_engine(
    "flocks.bird_purchase", "1.0",
    fingerprint_fields=("breed", "birds", "price_per_bird"),
)
def purchase_birds(
    state: FarmState,
    *,
    breed: str,
    birds: Any,
    price_per_bird: Any,
    purchase_date: date,
    now: datetime,
    age_weeks: Any = 0,
) -> FarmState:
    """Buy a new cohort from the hatchery and register it as an active flock."""
    breed = require_text(breed, "breed")
    count = require_count(birds, "birds", positive=True)
    price = require_positive(price_per_bird, "price_per_bird")
    age = require_count(age_weeks, "age_weeks")

    state, _ = post_transaction(
        state,
        transaction_date=purchase_date,
        type=TransactionType.DEBIT,
        amount=count * price,
        source=f"Bird Purchase - {count} {breed}",
        linked_company=CHICK_SUPPLIER,
        description=f"Bird Purchase - {count} {breed} from {CHICK_SUPPLIER.value}",
        category=TransactionCategory.BIRD_PURCHASE,
        now=now,
    )
    flock = Flock(
        id=uuid4(),
        breed=breed,
        number_of_layers=count,
        age_weeks=age,
        start_date=purchase_date,
    )
    return replace(state, flocks=state.flocks + (flock,))

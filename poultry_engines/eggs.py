"""
Module: poultry_engines.eggs
Responsibility:
    Egg production runs, egg sales and the default egg price.  Keeps the
    egg inventory in Peti (360 eggs) plus loose remaining eggs.

Architecture position:
    Engines -- pure state transitions, zero I/O.

Invariants enforced:
    - total_eggs == total_peti * 360 + remaining_eggs after every operation.
    - Production never produces revenue; each sale posts exactly one
      credit transaction (category egg_sale, linked company External).
    - A production record's peti_count / remaining_eggs are computed from
      the inventory *before* the run and never re-derived.

Failure modes:
    - InvalidQuantityError when broken eggs exceed total eggs, or for
      negative / non-whole counts.
    - InsufficientStockError when selling more Peti than held (under the
      reject policy).  Under the clamp policy the inventory floors at zero.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Any
from uuid import UUID, uuid4

from poultry_engines._validation import require_count, require_positive, require_text
from poultry_engines.ledger import post_transaction
from poultry_engines.tracer import traced_engine
from poultry_kernel.domain.records import EggInventory, EggPrice, EggProduction, EggSale, FarmState
from poultry_kernel.domain.vocabulary import (
    EGGS_PER_PETI,
    LinkedCompany,
    TransactionCategory,
    TransactionType,
    UnderflowPolicy,
)
from poultry_kernel.exceptions import InsufficientStockError, InvalidQuantityError
from poultry_kernel.logging_config import get_logger

logger = get_logger("engines.eggs")


def split_eggs(eggs: int) -> tuple[int, int]:
    """Whole Peti and loose eggs in a non-negative egg count."""
    return divmod(eggs, EGGS_PER_PETI)


@traced_engine(
    "eggs.production", "1.0",
    fingerprint_fields=("flock_id", "total_eggs", "broken_eggs"),
)
def record_egg_production(
    state: FarmState,
    *,
    flock_id: UUID,
    production_date: date,
    total_eggs: Any,
    broken_eggs: Any = 0,
    now: datetime,
) -> FarmState:
    """
    Add a collection run to the inventory.

    The flock reference is not enforced; a run for an unknown flock is
    stored as-is and reported as "Unknown" by readers.
    """
    total = require_count(total_eggs, "total_eggs")
    broken = require_count(broken_eggs if broken_eggs is not None else 0, "broken_eggs")
    if broken > total:
        raise InvalidQuantityError(
            "broken_eggs", broken, f"cannot exceed total_eggs ({total})"
        )
    if state.find_flock(flock_id) is None:
        logger.warning("production_for_unknown_flock", extra={"flock_id": str(flock_id)})

    good = total - broken
    inventory = state.egg_inventory
    peti_count, remaining = split_eggs(inventory.remaining_eggs + good)

    production = EggProduction(
        id=uuid4(),
        production_date=production_date,
        flock_id=flock_id,
        total_eggs=total,
        broken_eggs=broken,
        good_eggs=good,
        peti_count=peti_count,
        remaining_eggs=remaining,
    )
    return replace(
        state,
        egg_productions=state.egg_productions + (production,),
        egg_inventory=EggInventory(
            total_eggs=inventory.total_eggs + good,
            total_peti=inventory.total_peti + peti_count,
            remaining_eggs=remaining,
            last_updated=now,
        ),
    )


@traced_engine(
    "eggs.sale", "1.0",
    fingerprint_fields=("peti_count", "price_per_peti", "buyer_name"),
)
def record_egg_sale(
    state: FarmState,
    *,
    peti_count: Any,
    buyer_name: str,
    sale_date: date,
    now: datetime,
    price_per_peti: Any = None,
    policy: UnderflowPolicy = UnderflowPolicy.REJECT,
) -> FarmState:
    """
    Sell whole Peti to an external buyer.

    ``price_per_peti`` defaults to the current egg price.
    """
    peti = require_count(peti_count, "peti_count", positive=True)
    price = require_positive(
        state.egg_price.price_per_peti if price_per_peti is None else price_per_peti,
        "price_per_peti",
    )
    buyer = require_text(buyer_name, "buyer_name")

    inventory = state.egg_inventory
    if peti > inventory.total_peti:
        if policy == UnderflowPolicy.REJECT:
            raise InsufficientStockError("eggs", peti, inventory.total_peti, "peti")
        logger.warning(
            "egg_oversell_clamped",
            extra={"requested_peti": peti, "available_peti": inventory.total_peti},
        )

    total_amount = peti * price
    new_total = inventory.total_eggs - peti * EGGS_PER_PETI
    if new_total < 0:
        new_total, total_peti, remaining = 0, 0, 0
    else:
        total_peti, remaining = split_eggs(new_total)

    state, txn = post_transaction(
        state,
        transaction_date=sale_date,
        type=TransactionType.CREDIT,
        amount=total_amount,
        source=f"Egg Sale - {peti} Peti to {buyer}",
        linked_company=LinkedCompany.EXTERNAL,
        description=f"Sold {peti} peti at Rs.{price}/peti",
        category=TransactionCategory.EGG_SALE,
        now=now,
    )
    sale = EggSale(
        id=uuid4(),
        sale_date=sale_date,
        peti_count=peti,
        price_per_peti=price,
        total_amount=total_amount,
        buyer_name=buyer,
        transaction_id=txn.id,
    )
    return replace(
        state,
        egg_sales=state.egg_sales + (sale,),
        egg_inventory=EggInventory(
            total_eggs=new_total,
            total_peti=total_peti,
            remaining_eggs=remaining,
            last_updated=now,
        ),
    )


@traced_engine("eggs.price", "1.0", fingerprint_fields=("price_per_peti",))
def update_egg_price(state: FarmState, *, price_per_peti: Any, now: datetime) -> FarmState:
    """Set the default price used by future sales; past sales keep theirs."""
    price = require_positive(price_per_peti, "price_per_peti")
    return replace(state, egg_price=EggPrice(price_per_peti=price, last_updated=now))

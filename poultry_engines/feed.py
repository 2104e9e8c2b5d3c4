"""
Module: poultry_engines.feed
Responsibility:
    Feed purchases (stock in, money out) and feed consumption (stock out).

Architecture position:
    Engines -- pure state transitions, zero I/O.

Invariants enforced:
    - At most one FeedStock per feed type (stocks are keyed by type).
    - A purchase posts exactly one debit (category feed_purchase, linked
      company Chairman Feed) in the same snapshot as the stock update.
    - Latest price wins: a purchase overwrites cost_per_bag and
      last_purchase_date; there is no weighted average.
    - bags_in_stock never goes negative.
    - Consumption never touches the ledger.

Failure modes:
    - InvalidQuantityError for non-positive bags or negative cost.
    - InsufficientStockError / FeedStockNotFoundError on consumption
      under the reject policy.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from poultry_engines._validation import require_non_negative, require_positive, require_text
from poultry_engines.ledger import post_transaction
from poultry_engines.tracer import traced_engine
from poultry_kernel.domain.records import FarmState, FeedConsumption, FeedPurchase, FeedStock
from poultry_kernel.domain.vocabulary import (
    BAG_SIZE_KG,
    FEED_SUPPLIER,
    TransactionCategory,
    TransactionType,
    UnderflowPolicy,
)
from poultry_kernel.exceptions import FeedStockNotFoundError, InsufficientStockError
from poultry_kernel.logging_config import get_logger

logger = get_logger("engines.feed")


@traced_engine(
    "feed.purchase", "1.0",
    fingerprint_fields=("feed_type", "bags", "cost_per_bag"),
)
def purchase_feed(
    state: FarmState,
    *,
    feed_type: str,
    bags: Any,
    cost_per_bag: Any,
    purchase_date: date,
    now: datetime,
) -> FarmState:
    """Buy feed from the feed supplier and add it to stock."""
    feed_type = require_text(feed_type, "feed_type")
    bag_count = require_positive(bags, "bags")
    unit_cost = require_non_negative(cost_per_bag, "cost_per_bag")
    total_cost = bag_count * unit_cost

    transaction_id = None
    # A zero-cost delivery still restocks but moves no money
    if total_cost > 0:
        state, txn = post_transaction(
            state,
            transaction_date=purchase_date,
            type=TransactionType.DEBIT,
            amount=total_cost,
            source=f"Feed Purchase - {bag_count} bags of {feed_type}",
            linked_company=FEED_SUPPLIER,
            description=(
                f"Purchased {bag_count} bags ({BAG_SIZE_KG}kg each) at "
                f"Rs.{unit_cost}/bag from {FEED_SUPPLIER.value} (External Supplier)"
            ),
            category=TransactionCategory.FEED_PURCHASE,
            now=now,
        )
        transaction_id = txn.id

    purchase = FeedPurchase(
        id=uuid4(),
        purchase_date=purchase_date,
        feed_type=feed_type,
        bags=bag_count,
        cost_per_bag=unit_cost,
        total_cost=total_cost,
        transaction_id=transaction_id,
    )

    stocks = dict(state.feed_stocks)
    existing = stocks.get(feed_type)
    if existing is not None:
        stocks[feed_type] = replace(
            existing,
            bags_in_stock=existing.bags_in_stock + bag_count,
            cost_per_bag=unit_cost,
            last_purchase_date=purchase_date,
        )
    else:
        stocks[feed_type] = FeedStock(
            id=uuid4(),
            feed_type=feed_type,
            bags_in_stock=bag_count,
            cost_per_bag=unit_cost,
            last_purchase_date=purchase_date,
            bag_size=BAG_SIZE_KG,
        )

    return replace(
        state,
        feed_purchases=state.feed_purchases + (purchase,),
        feed_stocks=stocks,
    )


@traced_engine(
    "feed.consumption", "1.0",
    fingerprint_fields=("feed_type", "bags_used", "flock_id"),
)
def consume_feed(
    state: FarmState,
    *,
    feed_type: str,
    bags_used: Any,
    flock_id: UUID,
    consumption_date: date,
    policy: UnderflowPolicy = UnderflowPolicy.REJECT,
) -> FarmState:
    """Draw feed from stock for a flock.  ``bags_used`` may be fractional."""
    feed_type = require_text(feed_type, "feed_type")
    used = require_positive(bags_used, "bags_used")

    stocks = dict(state.feed_stocks)
    stock = stocks.get(feed_type)
    if stock is None:
        if policy == UnderflowPolicy.REJECT:
            raise FeedStockNotFoundError(feed_type)
        logger.warning("consumption_of_unknown_feed_type", extra={"feed_type": feed_type})
    else:
        if used > stock.bags_in_stock:
            if policy == UnderflowPolicy.REJECT:
                raise InsufficientStockError(feed_type, used, stock.bags_in_stock, "bags")
            logger.warning(
                "feed_overconsumption_clamped",
                extra={
                    "feed_type": feed_type,
                    "bags_used": used,
                    "bags_in_stock": stock.bags_in_stock,
                },
            )
        stocks[feed_type] = replace(
            stock, bags_in_stock=max(Decimal("0"), stock.bags_in_stock - used)
        )

    consumption = FeedConsumption(
        id=uuid4(),
        consumption_date=consumption_date,
        feed_type=feed_type,
        bags_used=used,
        flock_id=flock_id,
    )
    return replace(
        state,
        feed_consumptions=state.feed_consumptions + (consumption,),
        feed_stocks=stocks,
    )

"""
Poultry Engines - pure state transitions for the layer farm.

Every public function takes the current FarmState (plus the domain event
as keyword arguments) and returns a new FarmState.  None of them read the
clock or touch storage; ``now`` / ``today`` arrive as arguments and the
caller persists the result.
"""

from poultry_engines.eggs import record_egg_production, record_egg_sale, update_egg_price
from poultry_engines.feed import consume_feed, purchase_feed
from poultry_engines.flocks import add_flock, purchase_birds, record_mortality, update_flock
from poultry_engines.health import (
    add_disease_record,
    add_vaccination,
    effective_vaccination_status,
    mark_vaccination_complete,
    present_vaccinations,
    resolve_disease_record,
    update_vaccination,
)
from poultry_engines.labour import add_labour, record_labour_payment, set_labour_status
from poultry_engines.ledger import add_transaction, set_initial_balance

__all__ = [
    "add_disease_record",
    "add_flock",
    "add_labour",
    "add_transaction",
    "add_vaccination",
    "consume_feed",
    "effective_vaccination_status",
    "mark_vaccination_complete",
    "present_vaccinations",
    "purchase_birds",
    "purchase_feed",
    "record_egg_production",
    "record_egg_sale",
    "record_labour_payment",
    "record_mortality",
    "resolve_disease_record",
    "set_initial_balance",
    "set_labour_status",
    "update_egg_price",
    "update_flock",
    "update_vaccination",
]

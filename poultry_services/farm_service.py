"""
poultry_services.farm_service -- read, compute, persist for every farm operation.

Responsibility:
    Hold the last confirmed FarmState, run one engine function against it
    per operation, write the result through a StateStore and only then
    adopt it.  This is the one place that reads the clock and the one
    place that talks to storage.

Architecture position:
    Services -- stateful orchestration over engines + kernel.
    Composes the pure functions in ``poultry_engines`` with a
    ``poultry_kernel.services.state_store.StateStore``.  Read-only
    reports come from ``poultry_reports`` with the farm's own thresholds.

Invariants enforced:
    - Operations are serialized: each one runs against the state left by
      the previous one.
    - A failed ``put`` leaves ``self.state`` unchanged and re-raises.
    - A rejected domain event (ValidationError / StockError / RecordError)
      never reaches the store.

Failure modes:
    - Any PoultryLedgerError raised by an engine propagates unchanged.
    - StateNotSavedError when the store rejects the write.

Audit relevance:
    Every committed operation logs ``state_committed`` with the operation
    name and the resulting balance.  Failed writes log
    ``state_commit_failed``.

Usage:
    store = InMemoryStateStore()
    service = FarmService(store, clock=SystemClock())
    service.set_initial_balance(Decimal("50000"))
    service.record_egg_sale(peti_count=2, buyer_name="Shop")
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from poultry_engines import (
    add_disease_record,
    add_flock,
    add_labour,
    add_transaction,
    add_vaccination,
    consume_feed,
    mark_vaccination_complete,
    present_vaccinations,
    purchase_birds,
    purchase_feed,
    record_egg_production,
    record_egg_sale,
    record_labour_payment,
    record_mortality,
    resolve_disease_record,
    set_initial_balance,
    set_labour_status,
    update_egg_price,
    update_flock,
    update_vaccination,
)
from poultry_kernel.domain.clock import Clock, SystemClock
from poultry_kernel.domain.commands import FlockCommand, VaccinationCommand
from poultry_kernel.domain.records import (
    DEFAULT_EGG_PRICE_PER_PETI,
    FarmState,
    Vaccination,
    default_state,
)
from poultry_kernel.domain.vocabulary import (
    LabourStatus,
    LinkedCompany,
    TransactionCategory,
    TransactionType,
    UnderflowPolicy,
    WageType,
)
from poultry_kernel.exceptions import PersistenceError
from poultry_kernel.logging_config import LogContext, get_logger
from poultry_kernel.services.state_store import StateStore
from poultry_reports.summary import (
    DEFAULT_LOW_FEED_STOCK_BAGS,
    DEFAULT_UPCOMING_VACCINATIONS_LIMIT,
    DashboardSnapshot,
    FlockSummary,
    dashboard,
    flock_summaries,
)

logger = get_logger("services.farm")


class FarmService:
    """
    The application-facing API of the farm ledger.

    Contract:
        Receives a StateStore and a Clock via constructor injection.
        Loads the stored document once, on construction.

    Guarantees:
        - ``state`` always equals the last document the store accepted
          (or the loaded/default document before the first write).
        - Dates default to ``clock.today()`` when not given.

    Non-goals:
        - No multi-document transactions; every operation replaces the
          whole document.
    """

    def __init__(
        self,
        store: StateStore,
        clock: Clock | None = None,
        *,
        underflow_policy: UnderflowPolicy = UnderflowPolicy.REJECT,
        default_egg_price_per_peti: Decimal = DEFAULT_EGG_PRICE_PER_PETI,
        low_feed_stock_bags: Decimal = DEFAULT_LOW_FEED_STOCK_BAGS,
        upcoming_vaccinations_limit: int = DEFAULT_UPCOMING_VACCINATIONS_LIMIT,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self.underflow_policy = underflow_policy
        self._default_egg_price = default_egg_price_per_peti
        self.low_feed_stock_bags = low_feed_stock_bags
        self.upcoming_vaccinations_limit = upcoming_vaccinations_limit
        self._lock = threading.RLock()
        self._state = self._store.get(self._empty_state())

    def _empty_state(self) -> FarmState:
        return default_state(self._clock.now(), self._default_egg_price)

    @property
    def state(self) -> FarmState:
        return self._state

    def reload(self) -> FarmState:
        """Discard the held snapshot and read the store again."""
        with self._lock:
            self._state = self._store.get(self._empty_state())
            return self._state

    def _today(self, value: date | None) -> date:
        return value if value is not None else self._clock.today()

    # =========================================================================
    # Commit cycle
    # =========================================================================

    def _apply(
        self,
        operation: str,
        transition: Callable[[FarmState], FarmState],
        *,
        flock_id: UUID | None = None,
        record_id: UUID | None = None,
    ) -> FarmState:
        with self._lock, LogContext.bind(
            operation=operation,
            document=self._store.document_name,
            flock_id=str(flock_id) if flock_id is not None else None,
            record_id=str(record_id) if record_id is not None else None,
        ):
            new_state = transition(self._state)
            if new_state is self._state:
                logger.debug("state_unchanged")
                return self._state
            try:
                self._store.put(new_state)
            except PersistenceError as exc:
                logger.error(
                    "state_commit_failed",
                    extra={"error_code": exc.code, "error": str(exc)},
                )
                raise
            self._state = new_state
            logger.info(
                "state_committed",
                extra={
                    "balance": new_state.bank_account.balance,
                    "borrowed_amount": new_state.bank_account.borrowed_amount,
                    "transaction_count": len(new_state.transactions),
                },
            )
            return new_state

    # =========================================================================
    # Ledger
    # =========================================================================

    def set_initial_balance(self, amount: Any, transaction_date: date | None = None) -> FarmState:
        now = self._clock.now()
        return self._apply(
            "set_initial_balance",
            lambda s: set_initial_balance(
                s, amount=amount, now=now, transaction_date=self._today(transaction_date)
            ),
        )

    def add_transaction(
        self,
        *,
        type: TransactionType | str,
        amount: Any,
        source: str,
        description: str = "",
        category: TransactionCategory | str = TransactionCategory.OTHER,
        linked_company: LinkedCompany | str = LinkedCompany.EXTERNAL,
        transaction_date: date | None = None,
    ) -> FarmState:
        now = self._clock.now()
        return self._apply(
            "add_transaction",
            lambda s: add_transaction(
                s,
                transaction_date=self._today(transaction_date),
                type=type,
                amount=amount,
                source=source,
                description=description,
                category=category,
                linked_company=linked_company,
                now=now,
            ),
        )

    # =========================================================================
    # Eggs
    # =========================================================================

    def record_egg_production(
        self,
        *,
        flock_id: UUID,
        total_eggs: Any,
        broken_eggs: Any = 0,
        production_date: date | None = None,
    ) -> FarmState:
        now = self._clock.now()
        return self._apply(
            "record_egg_production",
            lambda s: record_egg_production(
                s,
                flock_id=flock_id,
                production_date=self._today(production_date),
                total_eggs=total_eggs,
                broken_eggs=broken_eggs,
                now=now,
            ),
            flock_id=flock_id,
        )

    def record_egg_sale(
        self,
        *,
        peti_count: Any,
        buyer_name: str,
        price_per_peti: Any = None,
        sale_date: date | None = None,
    ) -> FarmState:
        now = self._clock.now()
        return self._apply(
            "record_egg_sale",
            lambda s: record_egg_sale(
                s,
                peti_count=peti_count,
                buyer_name=buyer_name,
                sale_date=self._today(sale_date),
                now=now,
                price_per_peti=price_per_peti,
                policy=self.underflow_policy,
            ),
        )

    def update_egg_price(self, price_per_peti: Any) -> FarmState:
        now = self._clock.now()
        return self._apply(
            "update_egg_price",
            lambda s: update_egg_price(s, price_per_peti=price_per_peti, now=now),
        )

    # =========================================================================
    # Feed
    # =========================================================================

    def purchase_feed(
        self,
        *,
        feed_type: str,
        bags: Any,
        cost_per_bag: Any,
        purchase_date: date | None = None,
    ) -> FarmState:
        now = self._clock.now()
        return self._apply(
            "purchase_feed",
            lambda s: purchase_feed(
                s,
                feed_type=feed_type,
                bags=bags,
                cost_per_bag=cost_per_bag,
                purchase_date=self._today(purchase_date),
                now=now,
            ),
        )

    def consume_feed(
        self,
        *,
        feed_type: str,
        bags_used: Any,
        flock_id: UUID,
        consumption_date: date | None = None,
    ) -> FarmState:
        return self._apply(
            "consume_feed",
            lambda s: consume_feed(
                s,
                feed_type=feed_type,
                bags_used=bags_used,
                flock_id=flock_id,
                consumption_date=self._today(consumption_date),
                policy=self.underflow_policy,
            ),
            flock_id=flock_id,
        )

    # =========================================================================
    # Flocks
    # =========================================================================

    def add_flock(
        self,
        *,
        breed: str,
        number_of_layers: Any,
        age_weeks: Any,
        start_date: date | None = None,
        is_active: bool = True,
    ) -> FarmState:
        return self._apply(
            "add_flock",
            lambda s: add_flock(
                s,
                breed=breed,
                number_of_layers=number_of_layers,
                age_weeks=age_weeks,
                start_date=self._today(start_date),
                is_active=is_active,
            ),
        )

    def update_flock(self, command: FlockCommand) -> FarmState:
        return self._apply(
            "update_flock",
            lambda s: update_flock(s, command),
            flock_id=command.flock_id,
        )

    def record_mortality(self, flock_id: UUID, count: Any) -> FarmState:
        return self._apply(
            "record_mortality",
            lambda s: record_mortality(s, flock_id, count=count),
            flock_id=flock_id,
        )

    def purchase_birds(
        self,
        *,
        breed: str,
        birds: Any,
        price_per_bird: Any,
        age_weeks: Any = 0,
        purchase_date: date | None = None,
    ) -> FarmState:
        now = self._clock.now()
        return self._apply(
            "purchase_birds",
            lambda s: purchase_birds(
                s,
                breed=breed,
                birds=birds,
                price_per_bird=price_per_bird,
                purchase_date=self._today(purchase_date),
                now=now,
                age_weeks=age_weeks,
            ),
        )

    # =========================================================================
    # Health
    # =========================================================================

    def vaccinations(self) -> tuple[Vaccination, ...]:
        """Vaccinations with overdue derived against today's date."""
        return present_vaccinations(self._state, self._clock.today())

    def add_vaccination(
        self,
        *,
        flock_id: UUID,
        vaccine_name: str,
        scheduled_date: date,
        notes: str = "",
    ) -> FarmState:
        return self._apply(
            "add_vaccination",
            lambda s: add_vaccination(
                s,
                flock_id=flock_id,
                vaccine_name=vaccine_name,
                scheduled_date=scheduled_date,
                notes=notes,
            ),
            flock_id=flock_id,
        )

    def update_vaccination(self, command: VaccinationCommand) -> FarmState:
        return self._apply(
            "update_vaccination",
            lambda s: update_vaccination(s, command),
            record_id=command.vaccination_id,
        )

    def mark_vaccination_complete(self, vaccination_id: UUID) -> FarmState:
        today = self._clock.today()
        return self._apply(
            "mark_vaccination_complete",
            lambda s: mark_vaccination_complete(s, vaccination_id, today=today),
            record_id=vaccination_id,
        )

    def add_disease_record(
        self,
        *,
        flock_id: UUID,
        disease_name: str,
        affected_birds: Any,
        treatment: str = "",
        treatment_cost: Any = 0,
        date_detected: date | None = None,
    ) -> FarmState:
        now = self._clock.now()
        return self._apply(
            "add_disease_record",
            lambda s: add_disease_record(
                s,
                flock_id=flock_id,
                disease_name=disease_name,
                date_detected=self._today(date_detected),
                affected_birds=affected_birds,
                treatment=treatment,
                treatment_cost=treatment_cost,
                now=now,
            ),
            flock_id=flock_id,
        )

    def resolve_disease_record(self, record_id: UUID) -> FarmState:
        return self._apply(
            "resolve_disease_record",
            lambda s: resolve_disease_record(s, record_id),
            record_id=record_id,
        )

    # =========================================================================
    # Labour
    # =========================================================================

    def add_labour(
        self,
        *,
        name: str,
        role: str,
        wage_type: WageType | str,
        wage_amount: Any,
        joining_date: date | None = None,
        phone: str = "",
    ) -> FarmState:
        return self._apply(
            "add_labour",
            lambda s: add_labour(
                s,
                name=name,
                role=role,
                wage_type=wage_type,
                wage_amount=wage_amount,
                joining_date=self._today(joining_date),
                phone=phone,
            ),
        )

    def set_labour_status(self, labour_id: UUID, status: LabourStatus | str) -> FarmState:
        return self._apply(
            "set_labour_status",
            lambda s: set_labour_status(s, labour_id, status=status),
            record_id=labour_id,
        )

    def record_labour_payment(
        self,
        labour_id: UUID,
        *,
        amount: Any,
        notes: str = "",
        payment_date: date | None = None,
    ) -> FarmState:
        now = self._clock.now()
        return self._apply(
            "record_labour_payment",
            lambda s: record_labour_payment(
                s,
                labour_id,
                amount=amount,
                payment_date=self._today(payment_date),
                now=now,
                notes=notes,
            ),
            record_id=labour_id,
        )

    # =========================================================================
    # Reports
    # =========================================================================

    def dashboard(self) -> DashboardSnapshot:
        """Dashboard for today using this farm's alert thresholds."""
        return dashboard(
            self._state,
            self._clock.today(),
            low_feed_stock_bags=self.low_feed_stock_bags,
            upcoming_vaccinations_limit=self.upcoming_vaccinations_limit,
        )

    def flock_summaries(self) -> tuple[FlockSummary, ...]:
        return flock_summaries(self._state, self._clock.today())

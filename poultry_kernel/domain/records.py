"""
Records -- Immutable farm records and the FarmState snapshot.

Responsibility:
    Frozen value objects for every noun of the layer farm: the bank
    account, ledger transactions, flocks, egg production and sales, the
    egg inventory, feed stock, purchases and consumption, vaccinations,
    disease records, the egg price, labour and labour payments.  FarmState
    aggregates them into one document-sized snapshot.

Architecture position:
    Kernel > Domain -- pure data, zero I/O.  Engines build new snapshots
    from old ones with ``dataclasses.replace``; nothing here mutates.

Invariants enforced:
    - Collections are tuples in append order (chronological entry order,
      not necessarily record-date order).
    - ``feed_stocks`` is keyed by feed type: at most one stock per type,
      and is exposed as a read-only mapping.
    - Money is Decimal, egg and bird counts are int, feed bags are Decimal.

Audit relevance:
    Transactions are never edited or removed; a FarmState's transaction
    tuple is the complete cash history of the farm.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from types import MappingProxyType
from uuid import UUID

from poultry_kernel.domain.vocabulary import (
    BAG_SIZE_KG,
    EGGS_PER_PETI,
    DiseaseStatus,
    LabourStatus,
    LinkedCompany,
    TransactionCategory,
    TransactionType,
    VaccinationStatus,
    WageType,
)

DEFAULT_EGG_PRICE_PER_PETI = Decimal("2500")


@dataclass(frozen=True)
class BankAccount:
    """
    The farm's single cash account.

    Guarantees:
        - ``borrowed_amount == max(0, -balance)`` after every ledger rule
          application.
    """

    balance: Decimal
    borrowed_amount: Decimal
    last_updated: datetime


@dataclass(frozen=True)
class Transaction:
    """An immutable ledger entry; ``amount`` is always positive."""

    id: UUID
    transaction_date: date
    type: TransactionType
    amount: Decimal
    source: str
    linked_company: LinkedCompany
    description: str
    category: TransactionCategory

    @property
    def signed_amount(self) -> Decimal:
        """Amount with debits negative."""
        return self.amount if self.type == TransactionType.CREDIT else -self.amount


@dataclass(frozen=True)
class Flock:
    """One cohort of layers.  ``age_weeks`` is the age at ``start_date``."""

    id: UUID
    breed: str
    number_of_layers: int
    age_weeks: int
    start_date: date
    mortality: int = 0
    is_active: bool = True

    def age_weeks_on(self, as_of: date) -> int:
        """Age of the cohort in whole weeks on ``as_of``."""
        elapsed = max(0, (as_of - self.start_date).days)
        return self.age_weeks + elapsed // 7


@dataclass(frozen=True)
class EggInventory:
    """
    Cumulative good eggs produced minus sold.

    Invariant:
        ``total_eggs == total_peti * 360 + remaining_eggs``
    """

    total_eggs: int
    total_peti: int
    remaining_eggs: int
    last_updated: datetime

    @property
    def is_consistent(self) -> bool:
        return self.total_eggs == self.total_peti * EGGS_PER_PETI + self.remaining_eggs


@dataclass(frozen=True)
class EggProduction:
    """
    A production run.  ``peti_count`` / ``remaining_eggs`` are snapshots
    computed from the inventory before this run was added.
    """

    id: UUID
    production_date: date
    flock_id: UUID
    total_eggs: int
    broken_eggs: int
    good_eggs: int
    peti_count: int
    remaining_eggs: int


@dataclass(frozen=True)
class EggSale:
    id: UUID
    sale_date: date
    peti_count: int
    price_per_peti: Decimal
    total_amount: Decimal
    buyer_name: str
    transaction_id: UUID | None = None


@dataclass(frozen=True)
class FeedStock:
    """Stock of one feed type.  ``cost_per_bag`` is the latest purchase price."""

    id: UUID
    feed_type: str
    bags_in_stock: Decimal
    cost_per_bag: Decimal
    last_purchase_date: date
    bag_size: int = BAG_SIZE_KG

    @property
    def kilograms_in_stock(self) -> Decimal:
        return self.bags_in_stock * self.bag_size


@dataclass(frozen=True)
class FeedPurchase:
    id: UUID
    purchase_date: date
    feed_type: str
    bags: Decimal
    cost_per_bag: Decimal
    total_cost: Decimal
    transaction_id: UUID | None = None


@dataclass(frozen=True)
class FeedConsumption:
    id: UUID
    consumption_date: date
    feed_type: str
    bags_used: Decimal
    flock_id: UUID


@dataclass(frozen=True)
class Vaccination:
    id: UUID
    flock_id: UUID
    vaccine_name: str
    scheduled_date: date
    administered_date: date | None = None
    status: VaccinationStatus = VaccinationStatus.SCHEDULED
    notes: str = ""


@dataclass(frozen=True)
class DiseaseRecord:
    id: UUID
    flock_id: UUID
    disease_name: str
    date_detected: date
    affected_birds: int
    treatment_cost: Decimal
    treatment: str
    status: DiseaseStatus = DiseaseStatus.ACTIVE
    transaction_id: UUID | None = None


@dataclass(frozen=True)
class EggPrice:
    """Default sale price per Peti; never applied retroactively."""

    price_per_peti: Decimal
    last_updated: datetime


@dataclass(frozen=True)
class Labour:
    id: UUID
    name: str
    role: str
    wage_type: WageType
    wage_amount: Decimal
    joining_date: date
    phone: str = ""
    status: LabourStatus = LabourStatus.ACTIVE


@dataclass(frozen=True)
class LabourPayment:
    id: UUID
    labour_id: UUID
    payment_date: date
    amount: Decimal
    notes: str
    transaction_id: UUID


@dataclass(frozen=True)
class FarmState:
    """
    The whole application state document.

    Contract:
        Treated as an immutable snapshot.  Engine functions return a new
        FarmState; the caller decides when to persist it.
    """

    bank_account: BankAccount
    egg_inventory: EggInventory
    egg_price: EggPrice
    transactions: tuple[Transaction, ...] = ()
    flocks: tuple[Flock, ...] = ()
    egg_productions: tuple[EggProduction, ...] = ()
    egg_sales: tuple[EggSale, ...] = ()
    feed_stocks: Mapping[str, FeedStock] = field(default_factory=dict)
    feed_purchases: tuple[FeedPurchase, ...] = ()
    feed_consumptions: tuple[FeedConsumption, ...] = ()
    vaccinations: tuple[Vaccination, ...] = ()
    disease_records: tuple[DiseaseRecord, ...] = ()
    labour_list: tuple[Labour, ...] = ()
    labour_payments: tuple[LabourPayment, ...] = ()

    def __post_init__(self) -> None:
        # Read-only view over a private copy; engines build a new dict per change
        object.__setattr__(self, "feed_stocks", MappingProxyType(dict(self.feed_stocks)))

    def find_flock(self, flock_id: UUID) -> Flock | None:
        for flock in self.flocks:
            if flock.id == flock_id:
                return flock
        return None

    def find_labour(self, labour_id: UUID) -> Labour | None:
        for labour in self.labour_list:
            if labour.id == labour_id:
                return labour
        return None


def default_state(
    now: datetime,
    egg_price_per_peti: Decimal = DEFAULT_EGG_PRICE_PER_PETI,
) -> FarmState:
    """The document used when nothing has been stored yet."""
    return FarmState(
        bank_account=BankAccount(
            balance=Decimal("0"),
            borrowed_amount=Decimal("0"),
            last_updated=now,
        ),
        egg_inventory=EggInventory(
            total_eggs=0,
            total_peti=0,
            remaining_eggs=0,
            last_updated=now,
        ),
        egg_price=EggPrice(price_per_peti=egg_price_per_peti, last_updated=now),
    )

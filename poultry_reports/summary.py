"""
Read-only aggregates over a FarmState.

Responsibility:
    Profit and loss, cash totals, the dashboard snapshot, monthly
    production and P&L, feed cost by type, egg sales and production
    statistics.  Nothing here mutates state or reads the clock; "today"
    is always an argument.

Invariants enforced:
    - Cost totals only count debit transactions.
    - Overdue vaccinations use the same read-time derivation as
      ``poultry_engines.health``.
    - A dangling flock reference is labelled ``"Unknown"``.
    - Flock ages advance one week per seven days since the start date.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from poultry_engines.health import present_vaccinations
from poultry_kernel.domain.records import FarmState, FeedStock, Transaction, Vaccination
from poultry_kernel.domain.vocabulary import (
    EGGS_PER_PETI,
    DiseaseStatus,
    TransactionCategory,
    TransactionType,
    VaccinationStatus,
)

UNKNOWN_FLOCK = "Unknown"
DEFAULT_LOW_FEED_STOCK_BAGS = Decimal("10")
DEFAULT_UPCOMING_VACCINATIONS_LIMIT = 5
_ZERO = Decimal("0")
_CENT = Decimal("0.01")


@dataclass(frozen=True)
class ProfitAndLoss:
    egg_revenue: Decimal
    feed_cost: Decimal
    medication_cost: Decimal
    labor_cost: Decimal
    utilities_cost: Decimal
    other_cost: Decimal
    bird_purchase_cost: Decimal
    labour_payment_cost: Decimal

    @property
    def total_expenses(self) -> Decimal:
        return (
            self.feed_cost
            + self.medication_cost
            + self.labor_cost
            + self.utilities_cost
            + self.other_cost
            + self.bird_purchase_cost
            + self.labour_payment_cost
        )

    @property
    def net(self) -> Decimal:
        """Revenue minus expenses; negative is a loss."""
        return self.egg_revenue - self.total_expenses


@dataclass(frozen=True)
class CashTotals:
    credits: Decimal
    debits: Decimal


@dataclass(frozen=True)
class MonthlyFigures:
    month: date
    good_eggs: int
    revenue: Decimal
    expenses: Decimal

    @property
    def label(self) -> str:
        return self.month.strftime("%b %Y")

    @property
    def profit(self) -> Decimal:
        return self.revenue - self.expenses


@dataclass(frozen=True)
class SalesStats:
    peti_sold: int
    eggs_sold: int
    average_price_per_peti: Decimal


@dataclass(frozen=True)
class ProductionStats:
    eggs_produced: int
    broken_eggs: int
    good_eggs: int

    @property
    def broken_percentage(self) -> Decimal:
        """Broken share of all eggs collected, rounded to two places."""
        if self.eggs_produced == 0:
            return _ZERO
        ratio = Decimal(self.broken_eggs) * 100 / Decimal(self.eggs_produced)
        return ratio.quantize(_CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class FlockSummary:
    flock_id: UUID
    breed: str
    number_of_layers: int
    mortality: int
    current_age_weeks: int
    is_active: bool


@dataclass(frozen=True)
class DashboardSnapshot:
    active_flocks: int
    active_layers: int
    total_mortality: int
    bags_in_stock: Decimal
    kilograms_in_stock: Decimal
    balance: Decimal
    borrowed_amount: Decimal
    low_feed_stock: tuple[FeedStock, ...]
    upcoming_vaccinations: tuple[Vaccination, ...]
    overdue_vaccinations: tuple[Vaccination, ...]
    active_disease_count: int
    recent_transactions: tuple[Transaction, ...]


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, _ZERO)


def _debits(state: FarmState, category: TransactionCategory) -> Decimal:
    return _sum(
        t.amount
        for t in state.transactions
        if t.type == TransactionType.DEBIT and t.category == category
    )


def flock_label(state: FarmState, flock_id: UUID) -> str:
    """Breed of the referenced flock, or ``"Unknown"`` if it does not exist."""
    flock = state.find_flock(flock_id)
    return flock.breed if flock is not None and flock.breed else UNKNOWN_FLOCK


def profit_and_loss(state: FarmState) -> ProfitAndLoss:
    return ProfitAndLoss(
        egg_revenue=_sum(s.total_amount for s in state.egg_sales),
        feed_cost=_sum(p.total_cost for p in state.feed_purchases),
        medication_cost=_debits(state, TransactionCategory.MEDICATION),
        labor_cost=_debits(state, TransactionCategory.LABOR),
        utilities_cost=_debits(state, TransactionCategory.UTILITIES),
        other_cost=_debits(state, TransactionCategory.OTHER),
        bird_purchase_cost=_debits(state, TransactionCategory.BIRD_PURCHASE),
        labour_payment_cost=_debits(state, TransactionCategory.LABOUR_PAYMENT),
    )


def cash_totals(state: FarmState) -> CashTotals:
    return CashTotals(
        credits=_sum(t.amount for t in state.transactions if t.type == TransactionType.CREDIT),
        debits=_sum(t.amount for t in state.transactions if t.type == TransactionType.DEBIT),
    )


def feed_cost_by_type(state: FarmState) -> dict[str, Decimal]:
    """Total spent per feed type, in first-purchase order."""
    totals: dict[str, Decimal] = {}
    for purchase in state.feed_purchases:
        totals[purchase.feed_type] = totals.get(purchase.feed_type, _ZERO) + purchase.total_cost
    return totals


def sales_stats(state: FarmState) -> SalesStats:
    peti = sum(s.peti_count for s in state.egg_sales)
    revenue = _sum(s.total_amount for s in state.egg_sales)
    return SalesStats(
        peti_sold=peti,
        eggs_sold=peti * EGGS_PER_PETI,
        average_price_per_peti=revenue / peti if peti else _ZERO,
    )


def production_stats(state: FarmState) -> ProductionStats:
    return ProductionStats(
        eggs_produced=sum(p.total_eggs for p in state.egg_productions),
        broken_eggs=sum(p.broken_eggs for p in state.egg_productions),
        good_eggs=sum(p.good_eggs for p in state.egg_productions),
    )


def _month_start(day: date, back: int) -> date:
    index = day.year * 12 + (day.month - 1) - back
    return date(index // 12, index % 12 + 1, 1)


def monthly_breakdown(state: FarmState, today: date, months: int = 6) -> tuple[MonthlyFigures, ...]:
    """
    Good eggs, sales revenue and debit spending per calendar month.

    Covers ``months`` months ending with the month containing ``today``,
    oldest first.
    """
    figures = []
    for back in range(months - 1, -1, -1):
        start = _month_start(today, back)

        def in_month(d: date, start: date = start) -> bool:
            return d.year == start.year and d.month == start.month

        figures.append(
            MonthlyFigures(
                month=start,
                good_eggs=sum(
                    p.good_eggs for p in state.egg_productions if in_month(p.production_date)
                ),
                revenue=_sum(s.total_amount for s in state.egg_sales if in_month(s.sale_date)),
                expenses=_sum(
                    t.amount
                    for t in state.transactions
                    if t.type == TransactionType.DEBIT and in_month(t.transaction_date)
                ),
            )
        )
    return tuple(figures)


def dashboard(
    state: FarmState,
    today: date,
    *,
    low_feed_stock_bags: Decimal = DEFAULT_LOW_FEED_STOCK_BAGS,
    upcoming_vaccinations_limit: int = DEFAULT_UPCOMING_VACCINATIONS_LIMIT,
    recent_transactions_limit: int = 5,
) -> DashboardSnapshot:
    """Headline figures and alerts for ``today``."""
    active = [f for f in state.flocks if f.is_active]
    presented = present_vaccinations(state, today)
    upcoming = [
        v for v in presented
        if v.status == VaccinationStatus.SCHEDULED and v.scheduled_date > today
    ]
    recent = sorted(state.transactions, key=lambda t: t.transaction_date, reverse=True)
    return DashboardSnapshot(
        active_flocks=len(active),
        active_layers=sum(f.number_of_layers for f in active),
        total_mortality=sum(f.mortality for f in state.flocks),
        bags_in_stock=_sum(s.bags_in_stock for s in state.feed_stocks.values()),
        kilograms_in_stock=_sum(s.kilograms_in_stock for s in state.feed_stocks.values()),
        balance=state.bank_account.balance,
        borrowed_amount=state.bank_account.borrowed_amount,
        low_feed_stock=tuple(
            s for s in state.feed_stocks.values() if s.bags_in_stock < low_feed_stock_bags
        ),
        upcoming_vaccinations=tuple(upcoming[:upcoming_vaccinations_limit]),
        overdue_vaccinations=tuple(
            v for v in presented if v.status == VaccinationStatus.OVERDUE
        ),
        active_disease_count=sum(
            1 for d in state.disease_records if d.status == DiseaseStatus.ACTIVE
        ),
        recent_transactions=tuple(recent[:recent_transactions_limit]),
    )


def flock_summaries(state: FarmState, today: date) -> tuple[FlockSummary, ...]:
    """One row per flock, ageing each cohort from its start date to ``today``."""
    return tuple(
        FlockSummary(
            flock_id=f.id,
            breed=f.breed,
            number_of_layers=f.number_of_layers,
            mortality=f.mortality,
            current_age_weeks=f.age_weeks_on(today),
            is_active=f.is_active,
        )
        for f in state.flocks
    )

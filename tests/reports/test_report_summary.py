"""Tests for the read-only report aggregates."""

from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

from poultry_engines import (
    add_disease_record,
    add_flock,
    add_labour,
    add_transaction,
    add_vaccination,
    mark_vaccination_complete,
    purchase_birds,
    purchase_feed,
    record_egg_production,
    record_egg_sale,
    record_labour_payment,
    record_mortality,
    set_initial_balance,
)
from poultry_kernel.domain.vocabulary import VaccinationStatus
from poultry_reports import (
    UNKNOWN_FLOCK,
    cash_totals,
    dashboard,
    feed_cost_by_type,
    flock_label,
    flock_summaries,
    monthly_breakdown,
    production_stats,
    profit_and_loss,
    sales_stats,
)


class TestProfitAndLoss:
    def test_empty_farm(self, empty_state):
        pnl = profit_and_loss(empty_state)
        assert pnl.egg_revenue == Decimal("0")
        assert pnl.total_expenses == Decimal("0")
        assert pnl.net == Decimal("0")

    def test_every_expense_category_counts(self, seeded_state, flock_id, today, now):
        state = record_egg_sale(
            seeded_state, peti_count=5, buyer_name="Shop", sale_date=today, now=now
        )
        state = add_disease_record(
            state, flock_id=flock_id, disease_name="Coryza", date_detected=today,
            affected_birds=3, treatment_cost=1500, now=now,
        )
        state = add_transaction(
            state, transaction_date=today, type="debit", amount=800,
            source="Electricity", category="utilities", now=now,
        )
        state = purchase_birds(
            state, breed="Hy-Line", birds=10, price_per_bird=100,
            purchase_date=today, now=now,
        )
        state = add_labour(
            state, name="Sita", role="Collector", wage_type="daily",
            wage_amount=500, joining_date=today,
        )
        state = record_labour_payment(
            state, state.labour_list[0].id, amount=500, payment_date=today, now=now
        )

        pnl = profit_and_loss(state)
        assert pnl.egg_revenue == Decimal("12500")
        assert pnl.feed_cost == Decimal("40000")
        assert pnl.medication_cost == Decimal("1500")
        assert pnl.utilities_cost == Decimal("800")
        assert pnl.bird_purchase_cost == Decimal("1000")
        assert pnl.labour_payment_cost == Decimal("500")
        assert pnl.total_expenses == Decimal("43800")
        assert pnl.net == Decimal("-31300")

    def test_credits_in_expense_category_are_ignored(self, empty_state, today, now):
        state = add_transaction(
            empty_state, transaction_date=today, type="credit", amount=300,
            source="Refund", category="medication", now=now,
        )
        assert profit_and_loss(state).medication_cost == Decimal("0")


class TestCashTotals:
    def test_seeded(self, seeded_state):
        totals = cash_totals(seeded_state)
        assert totals.credits == Decimal("50000")
        assert totals.debits == Decimal("40000")
        assert totals.credits - totals.debits == seeded_state.bank_account.balance


class TestStatistics:
    def test_sales_stats(self, seeded_state, today, now):
        state = record_egg_sale(
            seeded_state, peti_count=2, buyer_name="A", sale_date=today, now=now
        )
        state = record_egg_sale(
            state, peti_count=2, buyer_name="B", sale_date=today, now=now,
            price_per_peti=3000,
        )
        stats = sales_stats(state)
        assert stats.peti_sold == 4
        assert stats.eggs_sold == 1440
        assert stats.average_price_per_peti == Decimal("2750")

    def test_sales_stats_empty(self, empty_state):
        assert sales_stats(empty_state).average_price_per_peti == Decimal("0")

    def test_production_stats(self, seeded_state):
        stats = production_stats(seeded_state)
        assert stats.eggs_produced == 1900
        assert stats.broken_eggs == 60
        assert stats.good_eggs == 1840
        assert stats.broken_percentage == Decimal("3.16")

    def test_broken_percentage_without_production(self, empty_state):
        assert production_stats(empty_state).broken_percentage == Decimal("0")

    def test_feed_cost_by_type(self, seeded_state, today, now):
        state = purchase_feed(
            seeded_state, feed_type="Grower", bags=4, cost_per_bag=1000,
            purchase_date=today, now=now,
        )
        state = purchase_feed(
            state, feed_type="Layer Mash", bags=1, cost_per_bag=2000,
            purchase_date=today, now=now,
        )
        assert feed_cost_by_type(state) == {
            "Layer Mash": Decimal("42000"),
            "Grower": Decimal("4000"),
        }


class TestFlockLabel:
    def test_known_flock(self, seeded_state, flock_id):
        assert flock_label(seeded_state, flock_id) == "Lohmann Brown"

    def test_dangling_reference(self, seeded_state):
        assert flock_label(seeded_state, uuid4()) == UNKNOWN_FLOCK == "Unknown"


class TestMonthlyBreakdown:
    def test_six_months_ending_this_month(self, seeded_state, today):
        months = monthly_breakdown(seeded_state, today)
        assert [m.label for m in months] == [
            "Oct 2023", "Nov 2023", "Dec 2023", "Jan 2024", "Feb 2024", "Mar 2024",
        ]
        current = months[-1]
        assert current.good_eggs == 1840
        assert current.revenue == Decimal("0")
        assert current.expenses == Decimal("40000")
        assert current.profit == Decimal("-40000")
        assert all(m.expenses == Decimal("0") for m in months[:-1])

    def test_buckets_by_month(self, empty_state, now):
        state = add_flock(
            empty_state, breed="ISA Brown", number_of_layers=100, age_weeks=20,
            start_date=date(2023, 12, 1),
        )
        state = record_egg_production(
            state, flock_id=state.flocks[0].id, production_date=date(2024, 1, 31),
            total_eggs=720, broken_eggs=0, now=now,
        )
        state = record_egg_sale(
            state, peti_count=1, buyer_name="Shop", sale_date=date(2024, 2, 1), now=now
        )
        months = monthly_breakdown(state, date(2024, 2, 10), months=3)
        assert [m.month for m in months] == [date(2023, 12, 1), date(2024, 1, 1), date(2024, 2, 1)]
        assert months[1].good_eggs == 720
        assert months[2].revenue == Decimal("2500")


class TestDashboard:
    def test_headline_figures(self, seeded_state, flock_id, today, now):
        state = record_mortality(seeded_state, flock_id, count=7)
        state = add_flock(
            state, breed="Old", number_of_layers=50, age_weeks=80,
            start_date=date(2022, 1, 1), is_active=False,
        )
        state = set_initial_balance(state, amount=1000, now=now, transaction_date=today + timedelta(days=1))

        snap = dashboard(state, today)
        assert snap.active_flocks == 1
        assert snap.active_layers == 993
        assert snap.total_mortality == 7
        assert snap.bags_in_stock == Decimal("20")
        assert snap.kilograms_in_stock == Decimal("1000")
        assert snap.balance == Decimal("11000")
        assert snap.borrowed_amount == Decimal("0")
        assert snap.low_feed_stock == ()
        assert snap.recent_transactions[0].transaction_date == today + timedelta(days=1)
        assert len(snap.recent_transactions) == 3

    def test_alerts(self, seeded_state, flock_id, today, now):
        state = seeded_state
        for offset in (-3, 2, 5, 9):
            state = add_vaccination(
                state, flock_id=flock_id, vaccine_name=f"V{offset}",
                scheduled_date=today + timedelta(days=offset),
            )
        state = mark_vaccination_complete(state, state.vaccinations[2].id, today=today)
        state = add_disease_record(
            state, flock_id=flock_id, disease_name="Coryza", date_detected=today,
            affected_birds=2, now=now,
        )

        snap = dashboard(state, today, low_feed_stock_bags=Decimal("25"), upcoming_vaccinations_limit=1)
        assert [s.feed_type for s in snap.low_feed_stock] == ["Layer Mash"]
        assert [v.vaccine_name for v in snap.upcoming_vaccinations] == ["V2"]
        assert [v.vaccine_name for v in snap.overdue_vaccinations] == ["V-3"]
        assert snap.overdue_vaccinations[0].status == VaccinationStatus.OVERDUE
        assert snap.active_disease_count == 1


class TestFlockSummaries:
    def test_current_age_counts_whole_weeks(self, seeded_state, flock_id, today):
        # started 2024-01-01 at 22 weeks; 74 days later
        summary = flock_summaries(seeded_state, today)[0]
        assert summary.flock_id == flock_id
        assert summary.current_age_weeks == 32
        assert summary.number_of_layers == 1000
        assert summary.is_active

    def test_future_start_keeps_entry_age(self, empty_state):
        state = add_flock(
            empty_state, breed="ISA Brown", number_of_layers=10, age_weeks=18,
            start_date=date(2024, 4, 1),
        )
        assert flock_summaries(state, date(2024, 3, 1))[0].current_age_weeks == 18

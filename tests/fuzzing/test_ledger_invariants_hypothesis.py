"""
Property-based tests for the farm ledger using Hypothesis.

Generates random event sequences and checks the conservation rules that
must hold after every one of them:
- Egg inventory always splits into whole Peti plus loose eggs.
- Balance equals credits minus debits; borrowing mirrors a negative balance,
  whatever mix of sales, purchases, treatments and wages produced it.
- Layer counts never go negative under any mortality sequence.
- Under the clamp policy no stock ever goes negative.
- Exporting the same records twice yields identical text.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from poultry_engines import (
    add_disease_record,
    add_flock,
    add_labour,
    add_transaction,
    consume_feed,
    purchase_birds,
    purchase_feed,
    record_egg_production,
    record_egg_sale,
    record_labour_payment,
    record_mortality,
)
from poultry_kernel.domain.records import default_state
from poultry_kernel.domain.vocabulary import EGGS_PER_PETI, UnderflowPolicy
from poultry_reports import cash_totals, export_transactions

NOW = datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc)
TODAY = date(2024, 3, 15)

FUZZ_SETTINGS = settings(
    max_examples=50,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)


@composite
def money_amounts(draw):
    """Generate positive money amounts as Decimal."""
    return draw(st.decimals(
        min_value=Decimal("0.01"),
        max_value=Decimal("999999.99"),
        places=2,
        allow_nan=False,
        allow_infinity=False,
    ))


@composite
def productions(draw):
    total = draw(st.integers(min_value=0, max_value=5000))
    broken = draw(st.integers(min_value=0, max_value=total))
    return total, broken


def _farm_with_flock():
    state = default_state(NOW)
    return add_flock(
        state, breed="Lohmann Brown", number_of_layers=1000, age_weeks=20,
        start_date=date(2024, 1, 1),
    )


class TestEggConservation:
    @FUZZ_SETTINGS
    @given(
        batches=st.lists(productions(), min_size=1, max_size=8),
        sales=st.lists(st.integers(min_value=1, max_value=20), max_size=5),
    )
    def test_inventory_splits_and_balances(self, batches, sales):
        state = _farm_with_flock()
        flock_id = state.flocks[0].id
        for total, broken in batches:
            state = record_egg_production(
                state, flock_id=flock_id, production_date=TODAY,
                total_eggs=total, broken_eggs=broken, now=NOW,
            )
        for peti in sales:
            state = record_egg_sale(
                state, peti_count=peti, buyer_name="Shop", sale_date=TODAY,
                now=NOW, policy=UnderflowPolicy.CLAMP,
            )

        inv = state.egg_inventory
        assert inv.total_eggs == inv.total_peti * EGGS_PER_PETI + inv.remaining_eggs
        assert 0 <= inv.remaining_eggs < EGGS_PER_PETI
        assert inv.total_eggs >= 0

    @FUZZ_SETTINGS
    @given(batches=st.lists(productions(), min_size=1, max_size=8))
    def test_good_eggs_accumulate(self, batches):
        state = _farm_with_flock()
        flock_id = state.flocks[0].id
        for total, broken in batches:
            state = record_egg_production(
                state, flock_id=flock_id, production_date=TODAY,
                total_eggs=total, broken_eggs=broken, now=NOW,
            )
        expected = sum(total - broken for total, broken in batches)
        assert state.egg_inventory.total_eggs == expected


class TestLedgerConservation:
    @FUZZ_SETTINGS
    @given(
        entries=st.lists(
            st.tuples(st.sampled_from(["credit", "debit"]), money_amounts()),
            min_size=1,
            max_size=15,
        )
    )
    def test_balance_matches_transactions(self, entries):
        state = default_state(NOW)
        for txn_type, amount in entries:
            state = add_transaction(
                state, transaction_date=TODAY, type=txn_type, amount=amount,
                source="Fuzz", now=NOW,
            )

        totals = cash_totals(state)
        account = state.bank_account
        assert account.balance == totals.credits - totals.debits
        assert account.borrowed_amount == max(Decimal("0"), -account.balance)
        assert account.borrowed_amount >= 0
        assert len(state.transactions) == len(entries)

    @FUZZ_SETTINGS
    @given(
        entries=st.lists(
            st.tuples(st.sampled_from(["credit", "debit"]), money_amounts()),
            max_size=10,
        )
    )
    def test_export_is_idempotent(self, entries):
        state = default_state(NOW)
        for txn_type, amount in entries:
            state = add_transaction(
                state, transaction_date=TODAY, type=txn_type, amount=amount,
                source="Fuzz", description='with "quotes", commas', now=NOW,
            )
        first = export_transactions(state.transactions)
        assert first == export_transactions(state.transactions)
        assert len(first.split("\n")) == len(entries) + 1


farm_events = st.one_of(
    st.tuples(st.just("produce"), st.integers(min_value=0, max_value=2000)),
    st.tuples(st.just("sell"), st.integers(min_value=1, max_value=5)),
    st.tuples(
        st.just("feed"),
        st.tuples(st.integers(min_value=1, max_value=20), st.integers(min_value=0, max_value=5000)),
    ),
    st.tuples(st.just("treat"), st.integers(min_value=0, max_value=3000)),
    st.tuples(
        st.just("birds"),
        st.tuples(st.integers(min_value=1, max_value=100), st.integers(min_value=1, max_value=200)),
    ),
    st.tuples(st.just("wage"), money_amounts()),
    st.tuples(st.just("manual"), st.tuples(st.sampled_from(["credit", "debit"]), money_amounts())),
)


def _apply_event(state, flock_id, labour_id, kind, value):
    """Apply one event; return the new state and whether it moved money."""
    if kind == "produce":
        return record_egg_production(
            state, flock_id=flock_id, production_date=TODAY, total_eggs=value, now=NOW,
        ), False
    if kind == "sell":
        return record_egg_sale(
            state, peti_count=value, buyer_name="Shop", sale_date=TODAY, now=NOW,
            policy=UnderflowPolicy.CLAMP,
        ), True
    if kind == "feed":
        bags, cost = value
        return purchase_feed(
            state, feed_type="Layer Mash", bags=bags, cost_per_bag=cost,
            purchase_date=TODAY, now=NOW,
        ), cost > 0
    if kind == "treat":
        return add_disease_record(
            state, flock_id=flock_id, disease_name="Coryza", date_detected=TODAY,
            affected_birds=1, treatment_cost=value, now=NOW,
        ), value > 0
    if kind == "birds":
        birds, price = value
        return purchase_birds(
            state, breed="Hy-Line", birds=birds, price_per_bird=price,
            purchase_date=TODAY, now=NOW,
        ), True
    if kind == "wage":
        return record_labour_payment(
            state, labour_id, amount=value, payment_date=TODAY, now=NOW,
        ), True
    txn_type, amount = value
    return add_transaction(
        state, transaction_date=TODAY, type=txn_type, amount=amount, source="Fuzz", now=NOW,
    ), True


class TestMixedLedgerConservation:
    @FUZZ_SETTINGS
    @given(events=st.lists(farm_events, min_size=1, max_size=20))
    def test_every_money_event_posts_once_and_balances(self, events):
        state = add_labour(
            _farm_with_flock(), name="Sita", role="Collector", wage_type="monthly",
            wage_amount=12000, joining_date=TODAY,
        )
        flock_id = state.flocks[0].id
        labour_id = state.labour_list[0].id
        postings = 0
        for kind, value in events:
            state, moved_money = _apply_event(state, flock_id, labour_id, kind, value)
            postings += moved_money

            totals = cash_totals(state)
            account = state.bank_account
            assert account.balance == totals.credits - totals.debits
            assert account.borrowed_amount == max(Decimal("0"), -account.balance)

        assert len(state.transactions) == postings
        assert all(t.amount > 0 for t in state.transactions)


class TestFlockHeadCount:
    @FUZZ_SETTINGS
    @given(deaths=st.lists(st.integers(min_value=0, max_value=600), min_size=1, max_size=10))
    def test_layers_never_negative(self, deaths):
        state = _farm_with_flock()
        flock_id = state.flocks[0].id
        for count in deaths:
            state = record_mortality(state, flock_id, count=count)
            assert state.flocks[0].number_of_layers >= 0

        flock = state.flocks[0]
        assert flock.mortality == sum(deaths)
        assert flock.number_of_layers == max(0, 1000 - sum(deaths))


class TestClampedStock:
    @FUZZ_SETTINGS
    @given(
        operations=st.lists(
            st.one_of(
                st.tuples(st.just("buy"), st.integers(min_value=1, max_value=50)),
                st.tuples(
                    st.just("use"),
                    st.decimals(
                        min_value=Decimal("0.5"), max_value=Decimal("80"), places=1,
                        allow_nan=False, allow_infinity=False,
                    ),
                ),
            ),
            min_size=1,
            max_size=12,
        )
    )
    def test_feed_never_negative(self, operations):
        state = _farm_with_flock()
        flock_id = state.flocks[0].id
        for kind, quantity in operations:
            if kind == "buy":
                state = purchase_feed(
                    state, feed_type="Layer Mash", bags=quantity, cost_per_bag=1000,
                    purchase_date=TODAY, now=NOW,
                )
            else:
                state = consume_feed(
                    state, feed_type="Layer Mash", bags_used=quantity,
                    flock_id=flock_id, consumption_date=TODAY,
                    policy=UnderflowPolicy.CLAMP,
                )
        for stock in state.feed_stocks.values():
            assert stock.bags_in_stock >= 0
        assert len(state.feed_consumptions) == sum(1 for k, _ in operations if k == "use")

"""Tests for YAML configuration loading and the config bridges."""

from datetime import timedelta
from decimal import Decimal

import pytest
import yaml

from poultry_config import DEFAULT_CONFIG_PATH, get_active_config
from poultry_config.bridges import build_farm_service, build_state_store
from poultry_config.loader import compute_checksum, parse_farm_config
from poultry_kernel.domain.vocabulary import UnderflowPolicy
from poultry_kernel.exceptions import InsufficientStockError
from poultry_kernel.services.state_store import InMemoryStateStore, SqlStateStore


def _write(tmp_path, data):
    path = tmp_path / "farm.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


class TestDefaults:
    def test_packaged_defaults_load(self):
        config = get_active_config()
        assert config.farm_name == "Layer Farm"
        assert config.storage.database_url == "sqlite:///poultry_farm.db"
        assert config.storage.document_name == "farm"
        assert config.engine.underflow_policy == UnderflowPolicy.REJECT
        assert config.pricing.default_egg_price_per_peti == Decimal("2500")
        assert config.alerts.low_feed_stock_bags == Decimal("10")
        assert config.alerts.upcoming_vaccinations_limit == 5
        assert config.logging.level == "INFO"
        assert len(config.checksum) == 64

    def test_minimal_document_fills_defaults(self):
        config = parse_farm_config({"farm_name": "Hill Farm"})
        assert config.storage.document_name == "farm"
        assert config.engine.underflow_policy == UnderflowPolicy.REJECT

    def test_trace_is_logged(self, captured_logs):
        config = get_active_config(DEFAULT_CONFIG_PATH)
        traces = [r for r in captured_logs() if r["message"] == "POULTRY_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0]["checksum"] == config.checksum
        assert traces[0]["underflow_policy"] == "reject"


class TestCustomFile:
    def test_overrides(self, tmp_path):
        path = _write(tmp_path, {
            "farm_name": "Hill Farm",
            "storage": {"database_url": "sqlite://", "document_name": "hill"},
            "engine": {"underflow_policy": "CLAMP"},
            "pricing": {"default_egg_price_per_peti": "2750.50"},
            "alerts": {"low_feed_stock_bags": 4, "upcoming_vaccinations_limit": 3},
            "logging": {"level": "debug"},
        })
        config = get_active_config(path)
        assert config.storage.document_name == "hill"
        assert config.engine.underflow_policy == UnderflowPolicy.CLAMP
        assert config.pricing.default_egg_price_per_peti == Decimal("2750.50")
        assert config.alerts.upcoming_vaccinations_limit == 3
        assert config.logging.level == "DEBUG"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")

    def test_missing_farm_name(self, tmp_path):
        with pytest.raises(KeyError):
            get_active_config(_write(tmp_path, {"storage": {}}))

    @pytest.mark.parametrize(
        "data",
        [
            {"farm_name": "  "},
            {"farm_name": "F", "engine": {"underflow_policy": "ignore"}},
            {"farm_name": "F", "pricing": {"default_egg_price_per_peti": 0}},
            {"farm_name": "F", "pricing": {"default_egg_price_per_peti": "cheap"}},
            {"farm_name": "F", "alerts": {"low_feed_stock_bags": -1}},
            {"farm_name": "F", "alerts": {"upcoming_vaccinations_limit": "five"}},
            {"farm_name": "F", "logging": {"level": "LOUD"}},
            {"farm_name": "F", "storage": {"database_url": ""}},
            {"farm_name": "F", "alerts": [1, 2]},
            ["farm_name"],
        ],
    )
    def test_invalid_values(self, data):
        with pytest.raises(ValueError):
            parse_farm_config(data)


class TestChecksum:
    def test_deterministic_and_key_order_independent(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})

    def test_changes_with_content(self):
        assert compute_checksum({"a": 1}) != compute_checksum({"a": 2})


class TestBridges:
    def test_state_store_uses_configured_document(self, clock):
        config = parse_farm_config({"farm_name": "F", "storage": {"document_name": "north"}})
        store = build_state_store(config, clock=clock, database_url="sqlite://")
        assert isinstance(store, SqlStateStore)
        assert store.document_name == "north"
        assert store.revision == 0

    def test_farm_service_carries_policy_and_price(self, clock):
        config = parse_farm_config({
            "farm_name": "F",
            "engine": {"underflow_policy": "clamp"},
            "pricing": {"default_egg_price_per_peti": 2600},
        })
        service = build_farm_service(config, store=InMemoryStateStore(), clock=clock)
        assert service.underflow_policy == UnderflowPolicy.CLAMP
        assert service.state.egg_price.price_per_peti == Decimal("2600")

    def test_reject_policy_rejects_oversell(self, clock):
        config = parse_farm_config({"farm_name": "F"})
        service = build_farm_service(config, store=InMemoryStateStore(), clock=clock)
        with pytest.raises(InsufficientStockError):
            service.record_egg_sale(peti_count=1, buyer_name="Shop")

    def test_alert_thresholds_reach_dashboard(self, clock):
        config = parse_farm_config({
            "farm_name": "F",
            "alerts": {"low_feed_stock_bags": 100, "upcoming_vaccinations_limit": 1},
        })
        service = build_farm_service(config, store=InMemoryStateStore(), clock=clock)
        service.purchase_feed(feed_type="Mash", bags=50, cost_per_bag=1000)
        service.add_flock(breed="ISA Brown", number_of_layers=100, age_weeks=20)
        flock_id = service.state.flocks[0].id
        for days in (3, 4):
            service.add_vaccination(
                flock_id=flock_id, vaccine_name=f"V{days}",
                scheduled_date=clock.today() + timedelta(days=days),
            )

        snap = service.dashboard()
        assert [s.feed_type for s in snap.low_feed_stock] == ["Mash"]
        assert [v.vaccine_name for v in snap.upcoming_vaccinations] == ["V3"]

    def test_default_thresholds(self, clock):
        config = parse_farm_config({"farm_name": "F"})
        service = build_farm_service(config, store=InMemoryStateStore(), clock=clock)
        service.purchase_feed(feed_type="Mash", bags=50, cost_per_bag=1000)
        assert service.dashboard().low_feed_stock == ()

"""
Unit tests for adapter wiring from settings.
"""
import pytest
from marketdash.config import Settings
from marketdash.models import AggregationMode, FallbackMode, RecordKind, SlotOutcome
from marketdash.services.coincap import CoinCapAdapter
from marketdash.services.coingecko import CoinGeckoAdapter
from marketdash.services.jsonplaceholder import JSONPlaceholderAdapter
from marketdash.services.registry import build_adapter, build_aggregator, build_geo_adapter
from marketdash.services.static_data import StaticDataAdapter


@pytest.mark.unit
class TestRegistry:
    """Test building adapters and the aggregator from configuration."""

    @pytest.fixture
    def config(self):
        return Settings(table_limit=6, chart_days=7, static_seed=1)

    def test_build_known_adapters(self, config):
        assert isinstance(build_adapter("coingecko", config), CoinGeckoAdapter)
        assert isinstance(build_adapter("CoinCap", config), CoinCapAdapter)
        assert isinstance(build_adapter("jsonplaceholder", config), JSONPlaceholderAdapter)
        assert isinstance(build_adapter("static", config), StaticDataAdapter)

    def test_adapter_receives_settings(self, config):
        adapter = build_adapter("coingecko", config)

        assert adapter.table_limit == 6
        assert adapter.chart_days == 7
        assert adapter.base_url == config.coingecko_base_url

    def test_unknown_source(self, config):
        with pytest.raises(ValueError):
            build_adapter("bloomberg", config)

    def test_source_without_kind_rejected(self):
        with pytest.raises(ValueError):
            build_aggregator(Settings(metrics_source="jsonplaceholder"))

    def test_aggregator_modes_from_settings(self):
        aggregator = build_aggregator(Settings(fallback_mode="raise", aggregation_mode="partial"))

        assert aggregator.policy.mode == FallbackMode.RAISE
        assert aggregator.mode == AggregationMode.PARTIAL
        assert aggregator.slots[RecordKind.CHART].source_name == "jsonplaceholder"
        assert aggregator.slots[RecordKind.TABLE].source_name == "coingecko"

    @pytest.mark.asyncio
    async def test_static_sources_refresh_offline(self):
        aggregator = build_aggregator(Settings(
            metrics_source="static",
            chart_source="static",
            table_source="static",
            channels_source="static",
            table_limit=5,
            chart_days=10,
        ))

        snapshot = await aggregator.refresh()

        assert len(snapshot.table) == 5
        assert len(snapshot.chart) == 10
        assert len(snapshot.metrics) == 4
        assert all(outcome == SlotOutcome.LIVE for outcome in snapshot.sources.values())

    def test_geo_adapter_cities(self):
        adapter = build_geo_adapter(Settings(geo_cities="Paris, Oslo,,", openweather_api_key="k"))

        assert adapter.cities == ["Paris", "Oslo"]
        assert adapter.api_key == "k"

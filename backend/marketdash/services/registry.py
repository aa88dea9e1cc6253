"""
Wiring of source adapters into snapshot slots from configuration.
"""
import random
from typing import Dict, Optional
from marketdash.aggregator import DashboardAggregator, SlotSource
from marketdash.config import Settings, settings as default_settings
from marketdash.fallback import FallbackPolicy
from marketdash.models import RecordKind
from marketdash.services.base import SourceAdapter
from marketdash.services.coincap import CoinCapAdapter
from marketdash.services.coingecko import CoinGeckoAdapter
from marketdash.services.jsonplaceholder import JSONPlaceholderAdapter
from marketdash.services.openweather import OpenWeatherAdapter
from marketdash.services.static_data import StaticDataAdapter

SOURCE_NAMES = ("coingecko", "coincap", "jsonplaceholder", "static")


def build_adapter(name: str, config: Settings) -> SourceAdapter:
    """
    Create a source adapter by name.

    Raises:
        ValueError: If the name is not a known source
    """
    name = name.lower()
    timeout = config.http_timeout_seconds

    if name == "coingecko":
        return CoinGeckoAdapter(
            base_url=config.coingecko_base_url,
            timeout=timeout,
            table_limit=config.table_limit,
            chart_days=config.chart_days,
        )
    if name == "coincap":
        return CoinCapAdapter(
            base_url=config.coincap_base_url,
            timeout=timeout,
            table_limit=config.table_limit,
            metrics_asset_limit=config.metrics_asset_limit,
            chart_days=config.chart_days,
        )
    if name == "jsonplaceholder":
        return JSONPlaceholderAdapter(
            base_url=config.jsonplaceholder_base_url,
            timeout=timeout,
            rng=random.Random(config.static_seed),
        )
    if name == "static":
        return StaticDataAdapter(
            table_limit=config.table_limit,
            chart_days=config.chart_days,
            seed=config.static_seed,
        )

    raise ValueError(f"Unknown data source '{name}'. Expected one of: {', '.join(SOURCE_NAMES)}")


def build_aggregator(config: Optional[Settings] = None) -> DashboardAggregator:
    """Build the aggregator with one adapter per slot and static fallbacks."""
    config = config or default_settings
    configured = {
        RecordKind.METRICS: config.metrics_source,
        RecordKind.CHART: config.chart_source,
        RecordKind.TABLE: config.table_source,
        RecordKind.CHANNELS: config.channels_source,
    }

    static = StaticDataAdapter(table_limit=config.table_limit, chart_days=config.chart_days, seed=config.static_seed)
    adapters: Dict[str, SourceAdapter] = {}
    slots: Dict[RecordKind, SlotSource] = {}

    for kind, name in configured.items():
        if name not in adapters:
            adapters[name] = build_adapter(name, config)
        adapter = adapters[name]
        slots[kind] = SlotSource(
            primary=adapter.fetcher_for(kind),
            fallback=static.generator_for(kind),
            source_name=adapter.get_source_name(),
        )

    return DashboardAggregator(
        slots=slots,
        policy=FallbackPolicy(config.fallback_mode),
        mode=config.aggregation_mode,
    )


def build_geo_adapter(config: Optional[Settings] = None) -> OpenWeatherAdapter:
    config = config or default_settings
    return OpenWeatherAdapter(
        base_url=config.openweather_base_url,
        timeout=config.http_timeout_seconds,
        api_key=config.openweather_api_key,
        cities=config.geo_cities_list,
    )

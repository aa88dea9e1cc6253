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
    format_number,
    format_percent,
    round_percent,
    table_date,
    to_float,
)

logger = logging.getLogger(__name__)

# Marketing channels assigned round-robin to market rows
CAMPAIGN_CHANNELS = ["Google Ads", "Facebook", "Instagram", "LinkedIn", "TikTok", "YouTube", "Email", "Organic"]


class CoinGeckoAdapter(SourceAdapter):
    """CoinGecko public API adapter; crypto market data stands in for campaign performance."""

    provides = frozenset({RecordKind.METRICS, RecordKind.CHART, RecordKind.TABLE, RecordKind.CHANNELS})

    def __init__(
        self,
        base_url: str = "https://api.coingecko.com/api/v3",
        timeout: float = 10.0,
        table_limit: int = 12,
        chart_days: int = 30,
        chart_coin: str = "bitcoin",
    ):
        super().__init__(base_url, timeout)
        self.table_limit = table_limit
        self.chart_days = chart_days
        self.chart_coin = chart_coin

    def get_source_name(self) -> str:
        """Return the source identifier."""
        return "coingecko"

    async def _get_global(self) -> Dict:
        payload = await self._get_json("/global")
        return self._require(payload, "data", "/global")

    async def fetch_metrics(self) -> List[MetricSnapshot]:
        """
        Build the metric cards from global market figures.

        Market cap reads as revenue, 24h volume as active users and BTC
        dominance drives conversions and the growth rate.
        """
        path = "/global"
        data = await self._get_global()

        market_cap = self._require_number(self._require_dict(data, "total_market_cap", path), "usd", path)
        volume = self._require_number(self._require_dict(data, "total_volume", path), "usd", path)
        dominance = self._require_number(self._require_dict(data, "market_cap_percentage", path), "btc", path)
        market_change = round_percent(to_float(data.get("market_cap_change_percentage_24h_usd")))
        growth_rate = round(dominance - 40, 1)

        return [
            self._build(MetricSnapshot, path, title="Total Revenue", value=format_currency(market_cap),
                        change=market_change, icon=MetricIcon.DOLLAR_SIGN),
            self._build(MetricSnapshot, path, title="Active Users", value=format_number(volume),
                        change=market_change, icon=MetricIcon.USERS),
            self._build(MetricSnapshot, path, title="Conversions", value=format_number(round(dominance * 1000)),
                        change=market_change, icon=MetricIcon.TARGET),
            self._build(MetricSnapshot, path, title="Growth Rate", value=format_percent(growth_rate),
                        change=growth_rate, icon=MetricIcon.TRENDING_UP),
        ]

    async def fetch_table(self) -> List[CampaignRow]:
        """Map the top coins by market cap onto campaign rows."""
        path = "/coins/markets"
        params = {
            "vs_currency": "usd",
            "order": "market_cap_desc",
            "per_page": self.table_limit,
            "page": 1,
        }
        coins = self._require_records(await self._get_json(path, params=params), path)
        today = table_date(date.today())

        rows = []
        seen_ids = set()
        for index, coin in enumerate(coins):
            coin_id = str(coin.get("id") or "")
            if coin_id in seen_ids:
                logger.warning(f"Skipping duplicate coin id from CoinGecko: {coin_id}")
                continue
            seen_ids.add(coin_id)

            ctr = round_percent(to_float(coin.get("price_change_percentage_24h")))
            rows.append(self._build(
                CampaignRow, path,
                id=coin_id,
                campaign=f"{coin.get('name') or coin_id} Campaign",
                channel=CAMPAIGN_CHANNELS[index % len(CAMPAIGN_CHANNELS)],
                revenue=round(self._require_number(coin, "current_price", path) * 1000),
                conversions=round(to_float(coin.get("market_cap_rank")) * 50),
                ctr=ctr,
                status=status_for_ctr(ctr),
                date=today,
            ))

        return rows

    async def fetch_chart(self) -> List[ChartPoint]:
        """Daily price history of the chart coin, one point per day, oldest first."""
        path = f"/coins/{self.chart_coin}/market_chart"
        params = {"vs_currency": "usd", "days": self.chart_days, "interval": "daily"}
        payload = await self._get_json(path, params=params)
        prices = self._require_list(self._require(payload, "prices", path), path, "prices")

        # CoinGecko appends the live price as an extra point for today; keep the latest per day
        by_day: Dict[date, float] = {}
        for entry in prices:
            if not isinstance(entry, (list, tuple)) or len(entry) < 2:
                raise MalformedPayloadError(self.get_source_name(), path, "expected [timestamp, price] pairs")
            timestamp = self._as_number(entry[0], path, "timestamp")
            day = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).date()
            by_day[day] = self._as_number(entry[1], path, "price")

        days = sorted(by_day)[-self.chart_days:]
        return [self._price_point(path, day, by_day[day]) for day in days]

    async def fetch_channels(self) -> List[ChannelSlice]:
        """Market-cap share of the four largest coins plus everything else."""
        path = "/global"
        data = await self._get_global()
        shares = self._require_dict(data, "market_cap_percentage", path)
        if not shares:
            raise MalformedPayloadError(self.get_source_name(), path, "empty 'market_cap_percentage'")

        top = sorted(
            ((symbol, self._as_number(share, path, symbol)) for symbol, share in shares.items()),
            key=lambda item: item[1],
            reverse=True,
        )[:len(CHANNEL_COLORS) - 1]
        other = max(0.0, 100 - sum(share for _, share in top))

        slices = [
            self._build(ChannelSlice, path, name=symbol.upper(), value=round_percent(share), color=CHANNEL_COLORS[index])
            for index, (symbol, share) in enumerate(top)
        ]
        slices.append(self._build(ChannelSlice, path, name="Other", value=round_percent(other), color=CHANNEL_COLORS[-1]))
        return slices


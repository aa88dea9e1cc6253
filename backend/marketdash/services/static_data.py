"""
Locally synthesized dashboard data.

Used as the fallback for every slot when a live source fails, and selectable
as a source of its own (``static``) for offline runs. Figures carry random
jitter; pass a seed for reproducible output.
"""
import random
from datetime import date, timedelta
from typing import List, Optional
from marketdash.models import (
    CampaignRow,
    CampaignStatus,
    ChannelSlice,
    ChartPoint,
    MetricIcon,
    MetricSnapshot,
    RecordKind,
)
from marketdash.services.base import CHANNEL_COLORS, SourceAdapter
from marketdash.services.formatting import day_label, format_currency, format_number, format_percent, table_date

CAMPAIGN_NAMES = [
    "Summer Sale", "Black Friday", "Holiday Special", "Spring Launch", "Brand Awareness",
    "Retargeting", "Product Launch", "Back to School", "Flash Sale", "Newsletter Push",
    "Loyalty Rewards", "Cyber Monday",
]
CAMPAIGN_CHANNELS = ["Google Ads", "Facebook", "Instagram", "LinkedIn", "TikTok", "YouTube", "Email", "Organic"]

DEFAULT_CHANNEL_SHARES = [
    ("Google Ads", 35),
    ("Facebook", 25),
    ("Instagram", 20),
    ("LinkedIn", 12),
    ("Other", 8),
]


class StaticDataAdapter(SourceAdapter):
    """Synthetic data generator exposing both sync generators and the async adapter interface."""

    provides = frozenset({RecordKind.METRICS, RecordKind.CHART, RecordKind.TABLE, RecordKind.CHANNELS})

    def __init__(self, table_limit: int = 12, chart_days: int = 30, seed: Optional[int] = None):
        super().__init__()
        self.table_limit = table_limit
        self.chart_days = chart_days
        self.rng = random.Random(seed)

    def get_source_name(self) -> str:
        """Return the source identifier."""
        return "static"

    def _jitter(self, value: float, spread: float) -> float:
        return value * (1 + self.rng.uniform(-spread, spread))

    def generate_metrics(self) -> List[MetricSnapshot]:
        revenue = self._jitter(847_392, 0.02)
        users = self._jitter(24_847, 0.02)
        conversions = self._jitter(18_394, 0.02)
        growth_rate = round(15.2 + self.rng.uniform(-0.5, 0.5), 1)

        return [
            MetricSnapshot(title="Total Revenue", value=format_currency(revenue),
                           change=round(12.5 + self.rng.uniform(-1, 1), 2), icon=MetricIcon.DOLLAR_SIGN),
            MetricSnapshot(title="Active Users", value=format_number(users),
                           change=round(8.2 + self.rng.uniform(-1, 1), 2), icon=MetricIcon.USERS),
            MetricSnapshot(title="Conversions", value=format_number(conversions),
                           change=round(-2.4 + self.rng.uniform(-1, 1), 2), icon=MetricIcon.TARGET),
            MetricSnapshot(title="Growth Rate", value=format_percent(growth_rate),
                           change=growth_rate, icon=MetricIcon.TRENDING_UP),
        ]

    def generate_chart(self) -> List[ChartPoint]:
        today = date.today()
        points = []
        for offset in range(self.chart_days - 1, -1, -1):
            users = 1000 + self.rng.uniform(0, 500)
            points.append(ChartPoint(
                date=day_label(today - timedelta(days=offset)),
                revenue=20_000 + self.rng.uniform(0, 15_000),
                users=users,
                conversions=round(users * 0.15),
                impressions=round(users * 8),
                clicks=round(users * 0.8),
            ))
        return points

    def generate_table(self) -> List[CampaignRow]:
        today = date.today()
        statuses = list(CampaignStatus)
        return [
            CampaignRow(
                id=f"campaign-{index + 1}",
                campaign=CAMPAIGN_NAMES[index % len(CAMPAIGN_NAMES)],
                channel=CAMPAIGN_CHANNELS[index % len(CAMPAIGN_CHANNELS)],
                revenue=round(self.rng.uniform(1_000, 50_000)),
                conversions=self.rng.randint(10, 1_000),
                ctr=round(self.rng.uniform(0.5, 8.0), 2),
                status=self.rng.choice(statuses),
                date=table_date(today - timedelta(days=index)),
            )
            for index in range(self.table_limit)
        ]

    def generate_channels(self) -> List[ChannelSlice]:
        return [
            ChannelSlice(name=name, value=value, color=CHANNEL_COLORS[index])
            for index, (name, value) in enumerate(DEFAULT_CHANNEL_SHARES)
        ]

    def generator_for(self, kind: RecordKind):
        """Synchronous generator for one record kind, usable as a fallback."""
        generators = {
            RecordKind.METRICS: self.generate_metrics,
            RecordKind.CHART: self.generate_chart,
            RecordKind.TABLE: self.generate_table,
            RecordKind.CHANNELS: self.generate_channels,
        }
        return generators[kind]

    async def fetch_metrics(self) -> List[MetricSnapshot]:
        return self.generate_metrics()

    async def fetch_chart(self) -> List[ChartPoint]:
        return self.generate_chart()

    async def fetch_table(self) -> List[CampaignRow]:
        return self.generate_table()

    async def fetch_channels(self) -> List[ChannelSlice]:
        return self.generate_channels()

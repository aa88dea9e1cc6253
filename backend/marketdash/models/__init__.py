from marketdash.models.enums import (
    AggregationMode,
    CampaignStatus,
    FallbackMode,
    MetricIcon,
    RecordKind,
    SlotOutcome,
    Trend,
)
from marketdash.models.records import (
    CampaignRow,
    ChannelSlice,
    ChartPoint,
    GeoPerformance,
    MetricSnapshot,
    status_for_ctr,
    trend_for_change,
)
from marketdash.models.snapshot import Snapshot

__all__ = [
    "AggregationMode",
    "CampaignRow",
    "CampaignStatus",
    "ChannelSlice",
    "ChartPoint",
    "FallbackMode",
    "GeoPerformance",
    "MetricIcon",
    "MetricSnapshot",
    "RecordKind",
    "SlotOutcome",
    "Snapshot",
    "Trend",
    "status_for_ctr",
    "trend_for_change",
]

from enum import Enum


class RecordKind(str, Enum):
    """The four record slots that make up a dashboard snapshot."""
    METRICS = "metrics"
    CHART = "chart"
    TABLE = "table"
    CHANNELS = "channels"


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"


class MetricIcon(str, Enum):
    DOLLAR_SIGN = "DollarSign"
    USERS = "Users"
    TARGET = "Target"
    TRENDING_UP = "TrendingUp"


class CampaignStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class SlotOutcome(str, Enum):
    """How a snapshot slot was filled during a refresh tick."""
    LIVE = "live"
    FALLBACK = "fallback"
    FAILED = "failed"


class FallbackMode(str, Enum):
    STATIC = "static"
    RAISE = "raise"


class AggregationMode(str, Enum):
    ALL_OR_NOTHING = "all_or_nothing"
    PARTIAL = "partial"

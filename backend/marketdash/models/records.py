from typing import Any, Optional
from pydantic import BaseModel, Field, model_validator
from marketdash.models.enums import CampaignStatus, MetricIcon, Trend


def trend_for_change(change: float) -> Trend:
    """Zero counts as an upward trend."""
    return Trend.UP if change >= 0 else Trend.DOWN


def status_for_ctr(ctr: float) -> CampaignStatus:
    """Live sources mark a campaign active while its CTR is positive."""
    return CampaignStatus.ACTIVE if ctr > 0 else CampaignStatus.PAUSED


class MetricSnapshot(BaseModel):
    title: str = Field(..., description="Card title")
    value: str = Field(..., description="Display-formatted value (e.g., '$1.50b', '52.30%')")
    change: float = Field(..., allow_inf_nan=False, description="Signed percent change")
    trend: Trend = Field(..., description="Direction of the change")
    icon: MetricIcon = Field(..., description="Icon tag resolved by the view")

    @model_validator(mode="before")
    @classmethod
    def _derive_trend(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("trend") is None and data.get("change") is not None:
            data = dict(data)
            data["trend"] = trend_for_change(float(data["change"]))
        return data

    @model_validator(mode="after")
    def _check_trend(self) -> "MetricSnapshot":
        if self.trend != trend_for_change(self.change):
            raise ValueError(f"trend '{self.trend.value}' disagrees with change {self.change}")
        return self


class ChartPoint(BaseModel):
    date: str = Field(..., description="Calendar-day label (e.g., 'Jan 05')")
    revenue: float = Field(..., ge=0, allow_inf_nan=False)
    users: float = Field(..., ge=0, allow_inf_nan=False)
    conversions: float = Field(..., ge=0, allow_inf_nan=False)
    impressions: float = Field(..., ge=0, allow_inf_nan=False)
    clicks: float = Field(..., ge=0, allow_inf_nan=False)


class CampaignRow(BaseModel):
    id: str = Field(..., min_length=1, description="Row identifier, unique within a snapshot")
    campaign: str = Field(..., description="Campaign name")
    channel: str = Field(..., description="Marketing channel")
    revenue: float = Field(..., ge=0, allow_inf_nan=False)
    conversions: float = Field(..., ge=0, allow_inf_nan=False)
    ctr: float = Field(..., allow_inf_nan=False, description="Signed percent")
    status: CampaignStatus = Field(..., description="Campaign status")
    date: str = Field(..., description="Formatted date (e.g., 'Jan 01, 2024')")


class ChannelSlice(BaseModel):
    name: str = Field(..., description="Channel name")
    value: float = Field(..., allow_inf_nan=False, description="Share or absolute value; not normalized")
    color: str = Field(..., pattern=r"^#[0-9A-Fa-f]{6}$", description="Hex color")


class GeoPerformance(BaseModel):
    city: str
    temperature: int = Field(..., description="Current temperature in Celsius")
    performance: int = Field(..., description="Weather-derived campaign performance score")
    country: Optional[str] = None

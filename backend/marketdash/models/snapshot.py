from datetime import datetime, timezone
from typing import Dict, List, Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator
from marketdash.models.enums import RecordKind, SlotOutcome
from marketdash.models.records import CampaignRow, ChannelSlice, ChartPoint, MetricSnapshot


class Snapshot(BaseModel):
    """
    One complete bundle of the four record lists as of one refresh tick.

    Snapshots are frozen: a refresh produces a new one which replaces the old
    one wholesale in the dashboard state.
    """

    model_config = ConfigDict(frozen=True)

    metrics: Tuple[MetricSnapshot, ...] = ()
    chart: Tuple[ChartPoint, ...] = ()
    table: Tuple[CampaignRow, ...] = ()
    channels: Tuple[ChannelSlice, ...] = ()
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    sources: Dict[RecordKind, SlotOutcome] = Field(default_factory=dict, description="How each slot was filled")
    errors: Dict[RecordKind, str] = Field(default_factory=dict, description="Error text for failed or substituted slots")

    @model_validator(mode="after")
    def _unique_row_ids(self) -> "Snapshot":
        seen = set()
        for row in self.table:
            if row.id in seen:
                raise ValueError(f"duplicate table row id '{row.id}'")
            seen.add(row.id)
        return self

    @property
    def degraded(self) -> bool:
        """True when any slot was not filled from its live source."""
        return any(outcome != SlotOutcome.LIVE for outcome in self.sources.values())

    @property
    def degraded_slots(self) -> List[RecordKind]:
        return [kind for kind, outcome in self.sources.items() if outcome != SlotOutcome.LIVE]

    def records(self, kind: RecordKind) -> tuple:
        """Return the record tuple for one slot."""
        return getattr(self, kind.value)

"""
Snapshot assembly.

Each refresh tick resolves all four slots concurrently and then builds one
Snapshot. The aggregation mode decides what a failed slot does to the tick:
``all_or_nothing`` fails the whole tick, ``partial`` leaves that slot empty and
flags it in the snapshot. The mode applies to every slot alike.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional
from marketdash.errors import FetchError, FetchResult, RefreshError
from marketdash.fallback import Fallback, FallbackPolicy, Primary
from marketdash.models import AggregationMode, RecordKind, SlotOutcome, Snapshot

logger = logging.getLogger(__name__)


@dataclass
class SlotSource:
    """Where one slot's records come from, and its substitute."""
    primary: Primary
    fallback: Optional[Fallback] = None
    source_name: str = ""


class DashboardAggregator:
    """Produce one Snapshot per refresh tick."""

    def __init__(
        self,
        slots: Dict[RecordKind, SlotSource],
        policy: Optional[FallbackPolicy] = None,
        mode: AggregationMode = AggregationMode.ALL_OR_NOTHING,
    ):
        missing = [kind.value for kind in RecordKind if kind not in slots]
        if missing:
            raise ValueError(f"No source configured for: {', '.join(missing)}")

        self.slots = slots
        self.policy = policy or FallbackPolicy()
        self.mode = AggregationMode(mode)

    async def refresh(self) -> Snapshot:
        """
        Fetch all four slots concurrently and assemble a snapshot.

        Returns:
            Snapshot: Fresh snapshot; in partial mode failed slots are empty
            and listed in ``snapshot.errors``

        Raises:
            RefreshError: In all_or_nothing mode, when any slot failed
        """
        kinds = list(RecordKind)
        results: List[FetchResult] = await asyncio.gather(*(
            self.policy.resolve(kind, self.slots[kind].primary, self.slots[kind].fallback)
            for kind in kinds
        ))
        by_kind = dict(zip(kinds, results))

        failures: Dict[RecordKind, FetchError] = {
            kind: result.error for kind, result in by_kind.items() if not result.ok
        }
        if failures and self.mode == AggregationMode.ALL_OR_NOTHING:
            raise RefreshError(failures)

        records = {}
        sources: Dict[RecordKind, SlotOutcome] = {}
        errors: Dict[RecordKind, str] = {}
        for kind, result in by_kind.items():
            if not result.ok:
                records[kind.value] = ()
                sources[kind] = SlotOutcome.FAILED
            else:
                records[kind.value] = tuple(result.records)
                sources[kind] = SlotOutcome.FALLBACK if result.used_fallback else SlotOutcome.LIVE
            if result.error is not None:
                errors[kind] = str(result.error)

        snapshot = Snapshot(sources=sources, errors=errors, **records)

        if snapshot.degraded:
            slots = ", ".join(f"{kind.value}={sources[kind].value}" for kind in snapshot.degraded_slots)
            logger.warning(f"Snapshot assembled with degraded slots: {slots}")
        else:
            logger.info(
                f"✓ Snapshot assembled: {len(snapshot.metrics)} metrics, {len(snapshot.chart)} chart points, "
                f"{len(snapshot.table)} rows, {len(snapshot.channels)} channels"
            )

        return snapshot

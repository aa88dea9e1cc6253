"""
Unit tests for the dashboard view state.
"""
import pytest
from datetime import timedelta
from marketdash.models import RecordKind, SlotOutcome, Snapshot
from marketdash.state import DashboardState, DashboardStatus


@pytest.mark.unit
class TestDashboardState:
    """Test status transitions and the last-update label."""

    @pytest.fixture
    def state(self):
        return DashboardState()

    def test_initial_state_loading(self, state):
        assert state.status == DashboardStatus.LOADING
        assert state.is_connected is False
        assert state.last_update_label() == "Never"

    def test_apply_makes_ready(self, state, sample_snapshot):
        state.apply(sample_snapshot)

        assert state.status == DashboardStatus.READY
        assert state.is_connected is True
        assert state.last_updated == sample_snapshot.fetched_at

    def test_failure_without_snapshot(self, state):
        state.record_failure(RuntimeError("network down"))

        assert state.status == DashboardStatus.ERROR
        assert state.last_error == "network down"
        assert state.is_connected is False

    def test_failure_with_snapshot_is_stale(self, state, sample_snapshot):
        state.apply(sample_snapshot)
        state.record_failure(RuntimeError("network down"))

        assert state.snapshot is sample_snapshot
        assert state.status == DashboardStatus.STALE
        assert state.is_connected is False

    def test_degraded_snapshot_not_connected(self, state, sample_rows):
        state.apply(Snapshot(
            table=tuple(sample_rows),
            sources={kind: SlotOutcome.FALLBACK for kind in RecordKind},
        ))

        assert state.status == DashboardStatus.READY
        assert state.is_connected is False

    def test_reset(self, state, sample_snapshot):
        state.apply(sample_snapshot)
        state.reset()

        assert state.snapshot is None
        assert state.status == DashboardStatus.LOADING

    @pytest.mark.parametrize("age,label", [
        (timedelta(seconds=0), "0s ago"),
        (timedelta(seconds=12), "12s ago"),
        (timedelta(seconds=59), "59s ago"),
        (timedelta(minutes=3, seconds=10), "3m ago"),
        (timedelta(hours=2, minutes=5), "2h ago"),
    ])
    def test_last_update_label(self, state, sample_snapshot, age, label):
        state.apply(sample_snapshot)

        assert state.last_update_label(now=sample_snapshot.fetched_at + age) == label

    def test_last_update_label_clock_skew(self, state, sample_snapshot):
        state.apply(sample_snapshot)

        assert state.last_update_label(now=sample_snapshot.fetched_at - timedelta(seconds=5)) == "0s ago"

"""
Shared fixtures for all tests.
"""
import pytest
import httpx
from unittest.mock import Mock, AsyncMock, patch
from fastapi.testclient import TestClient
from marketdash.main import app
from marketdash.models import (
    CampaignRow,
    ChannelSlice,
    ChartPoint,
    MetricIcon,
    MetricSnapshot,
    RecordKind,
    SlotOutcome,
    Snapshot,
)
from marketdash.scheduler import refresh_scheduler
from marketdash.state import dashboard_state


@pytest.fixture(autouse=True)
def reset_dashboard_state():
    """Every test starts with an empty dashboard state."""
    dashboard_state.reset()
    yield
    dashboard_state.reset()


@pytest.fixture
def client():
    """FastAPI test client; the refresh task is not started."""
    with patch.object(refresh_scheduler, "start"):
        with TestClient(app) as c:
            yield c


def make_response(status_code=200, json_data=None, json_error=None):
    """Mock httpx response with a status code and a JSON body."""
    response = Mock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def http_response():
    """Factory for mock httpx responses."""
    return make_response


@pytest.fixture
def mock_http():
    """
    Patch httpx.AsyncClient and route GET requests by URL suffix.

    Yields the route table and the mocked ``get``. Route values are either a
    mock response or an exception instance to raise.
    """
    routes = {}

    async def fake_get(url, params=None, **kwargs):
        for suffix, outcome in routes.items():
            if url.endswith(suffix):
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        raise httpx.ConnectError(f"No route for {url}")

    with patch('httpx.AsyncClient') as mock_client:
        mock_context = AsyncMock()
        mock_context.__aenter__.return_value.get = AsyncMock(side_effect=fake_get)
        mock_client.return_value = mock_context
        yield routes, mock_context.__aenter__.return_value.get


@pytest.fixture
def sample_metric():
    return MetricSnapshot(title="Total Revenue", value="$1.50b", change=2.5, icon=MetricIcon.DOLLAR_SIGN)


@pytest.fixture
def sample_chart_point():
    return ChartPoint(date="Jan 01", revenue=42000, users=2100, conversions=420, impressions=84000, clicks=8400)


@pytest.fixture
def sample_rows():
    """Campaign rows with mixed statuses, channels and dates."""
    return [
        CampaignRow(id="c1", campaign="Summer Sale", channel="Google Ads", revenue=1000, conversions=50,
                    ctr=2.5, status="active", date="Jan 01, 2024"),
        CampaignRow(id="c2", campaign="Black Friday", channel="Facebook", revenue=5000, conversions=120,
                    ctr=3.1, status="completed", date="Nov 24, 2023"),
        CampaignRow(id="c3", campaign="Spring Launch", channel="Instagram", revenue=2500, conversions=80,
                    ctr=-0.4, status="paused", date="Mar 01, 2024"),
        CampaignRow(id="c4", campaign="Retargeting", channel="Google Ads", revenue=750, conversions=30,
                    ctr=1.2, status="active", date="Feb 15, 2024"),
    ]


@pytest.fixture
def sample_channel():
    return ChannelSlice(name="Google Ads", value=35, color="#3B82F6")


@pytest.fixture
def sample_snapshot(sample_metric, sample_chart_point, sample_rows, sample_channel):
    """Snapshot with every slot filled live."""
    return Snapshot(
        metrics=(sample_metric,),
        chart=(sample_chart_point,),
        table=tuple(sample_rows),
        channels=(sample_channel,),
        sources={kind: SlotOutcome.LIVE for kind in RecordKind},
    )

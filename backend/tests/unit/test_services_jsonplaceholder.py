"""
Unit tests for the JSONPlaceholder adapter.
"""
import random
import pytest
from datetime import date, timedelta
from marketdash.errors import MalformedPayloadError
from marketdash.models import RecordKind
from marketdash.services.formatting import day_label
from marketdash.services.jsonplaceholder import JSONPlaceholderAdapter


@pytest.mark.unit
class TestJSONPlaceholderAdapter:
    """Test chart and channel data simulated from posts and users."""

    @pytest.fixture
    def adapter(self):
        return JSONPlaceholderAdapter(base_url="https://api.test", rng=random.Random(7))

    @pytest.fixture
    def mock_posts(self):
        """100 posts, 10 per user."""
        return [{"userId": user_id, "id": user_id * 10 + n, "title": "t"} for user_id in range(1, 11) for n in range(10)]

    @pytest.fixture
    def mock_users(self):
        return [{"id": user_id, "name": f"User {user_id}"} for user_id in range(1, 11)]

    def test_provides_chart_and_channels_only(self, adapter):
        assert adapter.provides == frozenset({RecordKind.CHART, RecordKind.CHANNELS})
        with pytest.raises(ValueError):
            adapter.fetcher_for(RecordKind.METRICS)

    @pytest.mark.asyncio
    async def test_fetch_metrics_not_provided(self, adapter):
        with pytest.raises(ValueError, match="does not provide metrics"):
            await adapter.fetch_metrics()

    @pytest.mark.asyncio
    async def test_fetch_chart(self, adapter, mock_posts, mock_http, http_response):
        routes, _ = mock_http
        routes["/posts"] = http_response(json_data=mock_posts)

        points = await adapter.fetch_chart()

        today = date.today()
        assert [p.date for p in points] == [day_label(today - timedelta(days=9 - i)) for i in range(10)]
        for point in points:
            assert 50_000 <= point.revenue < 60_000
            assert 1_000 <= point.users < 1_200
            assert point.conversions == 150
            assert point.impressions == 8_000
            assert point.clicks == 800

    @pytest.mark.asyncio
    async def test_fetch_chart_limits_points(self, mock_http, http_response):
        adapter = JSONPlaceholderAdapter(base_url="https://api.test", chart_points=3, rng=random.Random(1))
        routes, _ = mock_http
        routes["/posts"] = http_response(json_data=[{"userId": n} for n in range(1, 8)])

        points = await adapter.fetch_chart()

        assert len(points) == 3
        assert points[-1].date == day_label(date.today())

    @pytest.mark.asyncio
    async def test_fetch_chart_same_seed_same_values(self, mock_posts, mock_http, http_response):
        routes, _ = mock_http
        routes["/posts"] = http_response(json_data=mock_posts)

        first = await JSONPlaceholderAdapter(base_url="https://api.test", rng=random.Random(3)).fetch_chart()
        second = await JSONPlaceholderAdapter(base_url="https://api.test", rng=random.Random(3)).fetch_chart()

        assert first == second

    @pytest.mark.asyncio
    async def test_fetch_channels(self, adapter, mock_users, mock_http, http_response):
        routes, _ = mock_http
        routes["/users"] = http_response(json_data=mock_users)

        channels = await adapter.fetch_channels()

        assert [c.name for c in channels] == ["Google Ads", "Facebook", "Instagram", "LinkedIn", "Other"]
        assert [c.value for c in channels] == [35, 28, 21, 14, 7]

    @pytest.mark.asyncio
    async def test_fetch_channels_never_negative(self, adapter, mock_http, http_response):
        routes, _ = mock_http
        routes["/users"] = http_response(json_data=[{"id": 1}, {"id": 2}])

        channels = await adapter.fetch_channels()

        assert [c.value for c in channels] == [7, 0, 0, 0, 0]

    @pytest.mark.asyncio
    async def test_posts_not_a_list(self, adapter, mock_http, http_response):
        routes, _ = mock_http
        routes["/posts"] = http_response(json_data={"posts": []})

        with pytest.raises(MalformedPayloadError):
            await adapter.fetch_chart()

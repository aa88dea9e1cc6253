import random
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Optional
from marketdash.models import ChannelSlice, ChartPoint, RecordKind
from marketdash.services.base import CHANNEL_COLORS, SourceAdapter
from marketdash.services.formatting import day_label

CHANNEL_NAMES = ["Google Ads", "Facebook", "Instagram", "LinkedIn", "Other"]


class JSONPlaceholderAdapter(SourceAdapter):
    """
    JSONPlaceholder adapter simulating engagement from fake blog data.

    Posts grouped per author become one day of the chart each (with random
    jitter on revenue and users); the user count drives the channel split.
    """

    provides = frozenset({RecordKind.CHART, RecordKind.CHANNELS})

    def __init__(
        self,
        base_url: str = "https://jsonplaceholder.typicode.com",
        timeout: float = 10.0,
        chart_points: int = 10,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(base_url, timeout)
        self.chart_points = chart_points
        self.rng = rng or random.Random()

    def get_source_name(self) -> str:
        """Return the source identifier."""
        return "jsonplaceholder"

    async def fetch_chart(self) -> List[ChartPoint]:
        """
        Build one chart point per author for the most recent days.

        Returns:
            List[ChartPoint]: At most ``chart_points`` points, the last one dated today
        """
        path = "/posts"
        posts = self._require_records(await self._get_json(path), path, "posts")

        posts_per_user: Dict[str, int] = defaultdict(int)
        for post in posts:
            posts_per_user[str(post.get("userId"))] += 1

        counts = list(posts_per_user.values())[:self.chart_points]
        today = date.today()

        points = []
        for index, post_count in enumerate(counts):
            day = today - timedelta(days=len(counts) - 1 - index)
            base_users = post_count * 100
            points.append(self._build(
                ChartPoint, path,
                date=day_label(day),
                revenue=post_count * 5000 + self.rng.random() * 10000,
                users=base_users + self.rng.random() * 200,
                conversions=round(base_users * 0.15),
                impressions=round(base_users * 8),
                clicks=round(base_users * 0.8),
            ))

        return points

    async def fetch_channels(self) -> List[ChannelSlice]:
        """Spread the user count over the fixed channel list."""
        path = "/users"
        users = self._require_records(await self._get_json(path), path, "users")

        return [
            self._build(
                ChannelSlice, path,
                name=name,
                value=max(0, round((len(users) - index * 2) * 3.5)),
                color=CHANNEL_COLORS[index],
            )
            for index, name in enumerate(CHANNEL_NAMES)
        ]

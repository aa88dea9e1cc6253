import asyncio
import logging
from typing import List, Optional
from marketdash.errors import FetchError
from marketdash.models import GeoPerformance
from marketdash.services.base import SourceAdapter

logger = logging.getLogger(__name__)

DEFAULT_CITIES = ["London", "New York", "Tokyo", "Sydney", "Berlin"]


class OpenWeatherAdapter(SourceAdapter):
    """Current weather per city, turned into a simulated campaign performance score."""

    def __init__(
        self,
        base_url: str = "https://api.openweathermap.org/data/2.5",
        timeout: float = 10.0,
        api_key: str = "demo",
        cities: Optional[List[str]] = None,
    ):
        super().__init__(base_url, timeout)
        self.api_key = api_key
        self.cities = cities or list(DEFAULT_CITIES)

    def get_source_name(self) -> str:
        """Return the source identifier."""
        return "openweathermap"

    async def _fetch_city(self, city: str) -> Optional[GeoPerformance]:
        path = "/weather"
        try:
            payload = await self._get_json(path, params={"q": city, "appid": self.api_key, "units": "metric"})
            main = self._require_dict(payload, "main", path)
            temperature = round(self._require_number(main, "temp", path))
        except FetchError as e:
            logger.warning(f"Skipping weather for {city}: {e}")
            return None

        return GeoPerformance(
            city=payload.get("name") or city,
            temperature=temperature,
            performance=round(50 + temperature * 2),
            country=(payload.get("sys") or {}).get("country"),
        )

    async def fetch_geographic_data(self) -> List[GeoPerformance]:
        """
        Fetch all configured cities concurrently.

        Cities whose request fails are left out, so the result may be empty.
        """
        results = await asyncio.gather(*(self._fetch_city(city) for city in self.cities))
        return [result for result in results if result is not None]

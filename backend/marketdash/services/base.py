import logging
import math
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Awaitable, Callable, Dict, FrozenSet, List, Optional, Type, TypeVar
import httpx
from pydantic import BaseModel, ValidationError
from marketdash.errors import MalformedPayloadError, UpstreamHTTPError, UpstreamUnavailableError
from marketdash.models import CampaignRow, ChannelSlice, ChartPoint, MetricSnapshot, RecordKind
from marketdash.services.formatting import day_label

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# Shared palette for channel slices, in slice order
CHANNEL_COLORS = ["#3B82F6", "#10B981", "#F59E0B", "#8B5CF6", "#6B7280"]


class SourceAdapter(ABC):
    """
    Abstract base class for dashboard data sources.

    Each adapter normalizes one external API (or a local generator) into the
    canonical record shapes. An adapter declares in ``provides`` which of the
    four record kinds it can produce; the remaining fetch methods raise
    ValueError, the same error ``fetcher_for`` raises at wiring time.
    """

    provides: FrozenSet[RecordKind] = frozenset()

    def __init__(self, base_url: str = "", timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @abstractmethod
    def get_source_name(self) -> str:
        """
        Get the name of the data source.

        Returns:
            str: Source identifier (e.g., 'coingecko', 'coincap', 'static')
        """
        pass

    async def fetch_metrics(self) -> List[MetricSnapshot]:
        """Retrieve the metric cards."""
        raise self._unsupported(RecordKind.METRICS)

    async def fetch_chart(self) -> List[ChartPoint]:
        """Retrieve the daily chart series, ascending by day."""
        raise self._unsupported(RecordKind.CHART)

    async def fetch_table(self) -> List[CampaignRow]:
        """Retrieve the campaign table rows."""
        raise self._unsupported(RecordKind.TABLE)

    async def fetch_channels(self) -> List[ChannelSlice]:
        """Retrieve the channel breakdown."""
        raise self._unsupported(RecordKind.CHANNELS)

    def fetcher_for(self, kind: RecordKind) -> Callable[[], Awaitable[list]]:
        """
        Get the fetch coroutine function for one record kind.

        Raises:
            ValueError: If this adapter does not provide the kind
        """
        if kind not in self.provides:
            raise self._unsupported(kind)
        fetchers: Dict[RecordKind, Callable[[], Awaitable[list]]] = {
            RecordKind.METRICS: self.fetch_metrics,
            RecordKind.CHART: self.fetch_chart,
            RecordKind.TABLE: self.fetch_table,
            RecordKind.CHANNELS: self.fetch_channels,
        }
        return fetchers[kind]

    def _unsupported(self, kind: RecordKind) -> ValueError:
        return ValueError(f"Source '{self.get_source_name()}' does not provide {kind.value}")

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET one JSON endpoint.

        Raises:
            UpstreamUnavailableError: On transport errors and timeouts
            UpstreamHTTPError: On a non-2xx response
            MalformedPayloadError: If the body is not JSON
        """
        url = f"{self.base_url}{path}"
        source = self.get_source_name()

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            logger.error(f"{source} request timed out: {path}")
            raise UpstreamUnavailableError(source, path, "request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"{source} request failed: {path} - {str(e)}")
            raise UpstreamUnavailableError(source, path, str(e)) from e

        if not 200 <= response.status_code < 300:
            logger.error(f"{source} API error: {response.status_code} on {path}")
            raise UpstreamHTTPError(source, path, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise MalformedPayloadError(source, path, "response body is not valid JSON") from e

    def _require(self, payload: Any, key: str, path: str) -> Any:
        """Return ``payload[key]`` or raise MalformedPayloadError when it is absent."""
        if not isinstance(payload, dict) or payload.get(key) is None:
            raise MalformedPayloadError(self.get_source_name(), path, f"missing '{key}' field")
        return payload[key]

    def _require_dict(self, payload: Any, key: str, path: str) -> dict:
        value = self._require(payload, key, path)
        if not isinstance(value, dict):
            raise MalformedPayloadError(self.get_source_name(), path, f"expected '{key}' to be an object")
        return value

    def _require_list(self, value: Any, path: str, what: str = "data") -> list:
        if not isinstance(value, list):
            raise MalformedPayloadError(self.get_source_name(), path, f"expected '{what}' to be a list")
        return value

    def _require_records(self, value: Any, path: str, what: str = "data") -> List[dict]:
        """A list whose items are all JSON objects."""
        records = self._require_list(value, path, what)
        if any(not isinstance(item, dict) for item in records):
            raise MalformedPayloadError(self.get_source_name(), path, f"expected '{what}' items to be objects")
        return records

    def _as_number(self, value: Any, path: str, what: str) -> float:
        """Parse a required upstream number (JSON number or numeric string); absent or non-finite is malformed."""
        if value is None or isinstance(value, bool):
            raise MalformedPayloadError(self.get_source_name(), path, f"missing numeric '{what}'")
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise MalformedPayloadError(self.get_source_name(), path, f"'{what}' is not numeric: {value!r}") from e
        if math.isnan(number) or math.isinf(number):
            raise MalformedPayloadError(self.get_source_name(), path, f"'{what}' is not finite")
        return number

    def _require_number(self, payload: Any, key: str, path: str) -> float:
        """Return ``payload[key]`` as a float or raise MalformedPayloadError."""
        if not isinstance(payload, dict):
            raise MalformedPayloadError(self.get_source_name(), path, f"expected an object with '{key}'")
        return self._as_number(payload.get(key), path, key)

    def _build(self, model: Type[M], path: str, **fields: Any) -> M:
        """Build one record, reporting invalid upstream values as a malformed payload."""
        try:
            return model(**fields)
        except ValidationError as e:
            raise MalformedPayloadError(self.get_source_name(), path, f"invalid {model.__name__}: {e}") from e

    def _price_point(self, path: str, day: date, price: float) -> ChartPoint:
        """Chart point whose secondary series are fixed fractions of a daily price."""
        return self._build(
            ChartPoint, path,
            date=day_label(day),
            revenue=price,
            users=price / 20,
            conversions=price / 100,
            impressions=price * 2,
            clicks=price / 5,
        )

"""
Error taxonomy for the data-refresh pipeline.

Adapters raise FetchError subclasses; the fallback policy turns them into
FetchResult values; the aggregator raises RefreshError when a tick cannot
produce a snapshot.
"""
from dataclasses import dataclass, field
from typing import Dict, Generic, List, Optional, TypeVar
from marketdash.models.enums import RecordKind

T = TypeVar("T")


class FetchError(Exception):
    """An upstream source could not produce a record list."""

    def __init__(self, source: str, endpoint: str, message: str):
        self.source = source
        self.endpoint = endpoint
        self.message = message
        super().__init__(f"{source} {endpoint}: {message}")


class UpstreamHTTPError(FetchError):
    """The upstream answered with a non-2xx status."""

    def __init__(self, source: str, endpoint: str, status_code: int, message: str = ""):
        self.status_code = status_code
        super().__init__(source, endpoint, message or f"HTTP {status_code}")


class UpstreamUnavailableError(FetchError):
    """The request never got an answer (connection error, timeout)."""


class MalformedPayloadError(FetchError):
    """The upstream answered but the body is not what the adapter expects."""


class RefreshError(Exception):
    """A refresh tick failed as a whole; no snapshot was produced."""

    def __init__(self, failures: Dict[RecordKind, FetchError]):
        self.failures = failures
        slots = ", ".join(kind.value for kind in failures)
        super().__init__(f"refresh failed for: {slots}")


@dataclass
class FetchResult(Generic[T]):
    """Outcome of one slot fetch: either records or the error that prevented them."""
    records: Optional[List[T]] = None
    error: Optional[FetchError] = None
    used_fallback: bool = False

    @property
    def ok(self) -> bool:
        return self.records is not None

    def unwrap(self) -> List[T]:
        if self.records is None:
            raise self.error
        return self.records

    @classmethod
    def success(cls, records: List[T], used_fallback: bool = False, error: Optional[FetchError] = None) -> "FetchResult[T]":
        return cls(records=records, error=error, used_fallback=used_fallback)

    @classmethod
    def failure(cls, error: FetchError) -> "FetchResult[T]":
        return cls(records=None, error=error)

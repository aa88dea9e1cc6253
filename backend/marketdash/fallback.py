"""
Fallback policy applied to each slot fetch.

A failed primary is attempted exactly once per tick; the policy then either
substitutes synchronously generated data or hands the error back.
"""
import logging
from typing import Awaitable, Callable, List, Optional, TypeVar
from marketdash.errors import FetchError, FetchResult
from marketdash.models import FallbackMode, RecordKind

logger = logging.getLogger(__name__)

T = TypeVar("T")

Primary = Callable[[], Awaitable[List[T]]]
Fallback = Callable[[], List[T]]


class FallbackPolicy:
    """Decide what a slot resolves to when its source fails."""

    def __init__(self, mode: FallbackMode = FallbackMode.STATIC):
        self.mode = FallbackMode(mode)

    async def resolve(
        self,
        kind: Optional[RecordKind],
        primary: Primary,
        fallback: Optional[Fallback] = None,
    ) -> FetchResult:
        """
        Run the primary fetch and apply the policy.

        Args:
            kind: Slot being filled, used in log messages
            primary: Async source fetch
            fallback: Synchronous substitute; None means the slot has no substitute

        Returns:
            FetchResult: Records (live or substituted) or the fetch error. Only
            FetchError is absorbed; any other exception propagates.
        """
        label = kind.value if kind is not None else "data"
        try:
            records = await primary()
        except FetchError as e:
            if self.mode == FallbackMode.STATIC and fallback is not None:
                logger.warning(f"{label} source failed, using static data: {e}")
                return FetchResult.success(fallback(), used_fallback=True, error=e)
            logger.error(f"{label} source failed: {e}")
            return FetchResult.failure(e)

        return FetchResult.success(records)


async def with_fallback(
    primary: Primary,
    fallback: Optional[Fallback],
    mode: FallbackMode = FallbackMode.STATIC,
    kind: Optional[RecordKind] = None,
) -> List[T]:
    """
    Await ``primary``; on failure return ``fallback()`` or re-raise, per ``mode``.

    Raises:
        FetchError: When the primary fails and no substitute applies
    """
    result = await FallbackPolicy(mode).resolve(kind, primary, fallback)
    return result.unwrap()

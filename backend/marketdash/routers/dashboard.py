"""
Read-only dashboard endpoints consumed by the view layer.
"""
import logging
from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response
from marketdash.config import settings
from marketdash.errors import FetchError
from marketdash.models import Snapshot
from marketdash.scheduler import refresh_scheduler
from marketdash.services.registry import build_geo_adapter
from marketdash.state import DashboardStatus, dashboard_state
from marketdash.table import CSV_FILENAME, SortDirection, SortField, TableQuery, export_csv, filter_and_sort, query_table

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def _current_snapshot() -> Snapshot:
    """Current snapshot, or 503 while loading or after a failed first load."""
    if dashboard_state.snapshot is not None:
        return dashboard_state.snapshot

    if dashboard_state.status == DashboardStatus.ERROR:
        raise HTTPException(status_code=503, detail=f"Dashboard data unavailable: {dashboard_state.last_error}")
    raise HTTPException(status_code=503, detail="Dashboard data is loading")


@router.get("")
async def get_dashboard():
    """
    Get the current dashboard snapshot.

    Returns:
        Metrics, chart points, table rows and channel slices of the latest tick
    """
    return _current_snapshot()


@router.get("/status")
async def get_dashboard_status():
    """
    Get refresh status for the live-data indicator.

    Returns:
        Dashboard status, connection flag, last update label and degraded slots
    """
    snapshot = dashboard_state.snapshot
    return {
        "status": dashboard_state.status.value,
        "is_connected": dashboard_state.is_connected,
        "last_update": dashboard_state.last_update_label(),
        "last_error": dashboard_state.last_error,
        "degraded_slots": [kind.value for kind in snapshot.degraded_slots] if snapshot else [],
        "scheduler": refresh_scheduler.status.value,
    }


@router.get("/table")
async def get_table(
    search: str = Query(default="", description="Search campaign or channel"),
    status: str = Query(default="all", description="all, active, paused or completed"),
    sort_field: SortField = Query(default=SortField.DATE),
    sort_direction: SortDirection = Query(default=SortDirection.DESC),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=settings.table_page_size, ge=1, le=100),
):
    """
    Get one page of the filtered and sorted campaign table.

    Returns:
        Table page with rows and pagination totals
    """
    query = _build_query(search, status, sort_field, sort_direction, page, page_size)
    return query_table(_current_snapshot().table, query)


@router.get("/table/export")
async def export_table(
    search: str = Query(default=""),
    status: str = Query(default="all"),
    sort_field: SortField = Query(default=SortField.DATE),
    sort_direction: SortDirection = Query(default=SortDirection.DESC),
):
    """
    Download the filtered and sorted campaign table as CSV.
    """
    query = _build_query(search, status, sort_field, sort_direction)
    content = export_csv(filter_and_sort(_current_snapshot().table, query))
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={CSV_FILENAME}"},
    )


@router.get("/geo")
async def get_geographic_data():
    """
    Get weather-derived performance per city.

    Returns:
        List of city performance entries (empty if every city failed)
    """
    if not settings.geo_enabled:
        raise HTTPException(status_code=404, detail="Geographic data is disabled")

    try:
        return await build_geo_adapter(settings).fetch_geographic_data()
    except FetchError as e:
        raise HTTPException(status_code=502, detail=f"Failed to fetch geographic data: {str(e)}") from e


def _build_query(search, status, sort_field, sort_direction, page=1, page_size=None) -> TableQuery:
    try:
        return TableQuery(
            search=search,
            status=status,
            sort_field=sort_field,
            sort_direction=sort_direction,
            page=page,
            page_size=page_size or settings.table_page_size,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid table query: {str(e)}") from e

"""
Campaign table pipeline: filter, sort, paginate and CSV export.
"""
import math
from datetime import date
from enum import Enum
from typing import Any, Iterable, List, Sequence
from pydantic import BaseModel, Field, field_validator
from marketdash.models import CampaignRow, CampaignStatus
from marketdash.services.formatting import parse_table_date, plain_number

CSV_FILENAME = "campaign-data.csv"
CSV_HEADER = ["Campaign", "Channel", "Revenue", "Conversions", "CTR", "Status", "Date"]

DEFAULT_PAGE_SIZE = 8


class SortField(str, Enum):
    CAMPAIGN = "campaign"
    CHANNEL = "channel"
    REVENUE = "revenue"
    CONVERSIONS = "conversions"
    CTR = "ctr"
    STATUS = "status"
    DATE = "date"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class TableQuery(BaseModel):
    search: str = Field("", description="Case-insensitive match on campaign or channel")
    status: str = Field("all", description="'all' or a campaign status")
    sort_field: SortField = Field(SortField.DATE, description="Column to sort by")
    sort_direction: SortDirection = Field(SortDirection.DESC, description="Sort direction")
    page: int = Field(1, ge=1, description="1-based page number")
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1, description="Rows per page")

    @field_validator("status", mode="before")
    @classmethod
    def _check_status(cls, value: Any) -> str:
        if isinstance(value, CampaignStatus):
            return value.value
        value = str(value).strip().lower()
        if value != "all" and value not in {status.value for status in CampaignStatus}:
            raise ValueError(f"unknown status filter '{value}'")
        return value


class TablePage(BaseModel):
    rows: List[CampaignRow] = Field(default_factory=list)
    page: int = 1
    total_pages: int = 1
    total_items: int = 0


def _sort_key(row: CampaignRow, field: SortField) -> Any:
    value = getattr(row, field.value)
    if field == SortField.DATE:
        try:
            return parse_table_date(value)
        except ValueError:
            return date.min
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, str):
        return value.lower()
    return value


def filter_and_sort(rows: Iterable[CampaignRow], query: TableQuery) -> List[CampaignRow]:
    """Apply search, status filter and sort. The sort is stable."""
    term = query.search.strip().lower()
    status = query.status

    filtered = [
        row for row in rows
        if (not term or term in row.campaign.lower() or term in row.channel.lower())
        and (status == "all" or row.status.value == status)
    ]

    return sorted(
        filtered,
        key=lambda row: _sort_key(row, query.sort_field),
        reverse=query.sort_direction == SortDirection.DESC,
    )


def paginate(rows: Sequence[CampaignRow], page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> TablePage:
    """Slice one page out of ``rows``; out-of-range pages are clamped."""
    total_items = len(rows)
    total_pages = max(1, math.ceil(total_items / page_size))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * page_size
    return TablePage(
        rows=list(rows[start:start + page_size]),
        page=page,
        total_pages=total_pages,
        total_items=total_items,
    )


def query_table(rows: Iterable[CampaignRow], query: TableQuery) -> TablePage:
    return paginate(filter_and_sort(rows, query), query.page, query.page_size)


def export_csv(rows: Iterable[CampaignRow]) -> str:
    """
    Render rows as CSV text: header line, then one line per row.

    Fields are joined with a plain comma and never quoted, so the date label
    ("Jan 01, 2024") spans two columns exactly as the dashboard download does.
    Lines are joined with '\\n' and there is no trailing newline.
    """
    lines = [",".join(CSV_HEADER)]
    for row in rows:
        lines.append(",".join([
            row.campaign,
            row.channel,
            plain_number(row.revenue),
            plain_number(row.conversions),
            plain_number(row.ctr),
            row.status.value,
            row.date,
        ]))
    return "\n".join(lines)

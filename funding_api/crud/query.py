"""Filter, sort and pagination plan for the public card listing.

Every filter value reaches the database as a bound parameter. The only
identifiers taken from the request are the sort column and direction, and
both go through enums before they touch a statement.
"""

import math
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import ColumnElement, Select, func, select

from funding_api.db.models import Card

PUBLIC_VISIBILITY = "PUBLIC"

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100
# Largest page whose OFFSET still fits a Postgres bigint at the maximum page size
MAX_PAGE = (2**63 - 1) // MAX_PER_PAGE


class SortField(str, Enum):
    LAST_UPDATED = "last_updated"
    PRIORITY = "priority"
    PERCENT_FUNDED = "percent_funded"
    DATE = "date"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _positive_int(raw: str | int | None, default: int, maximum: int | None = None) -> int:
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    if value <= 0 or (maximum is not None and value > maximum):
        return default
    return value


def _choice(enum_cls: type[Enum], raw: str | None, default: Enum) -> Enum:
    try:
        return enum_cls(raw)
    except ValueError:
        return default


def split_tags(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def public_only() -> ColumnElement[bool]:
    return Card.visibility == PUBLIC_VISIBILITY


@dataclass(frozen=True)
class CardQuery:
    conditions: tuple[ColumnElement[bool], ...]
    sort_by: SortField
    sort_dir: SortDirection
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def order_by(self) -> tuple[ColumnElement, ...]:
        column = getattr(Card, self.sort_by.value)
        primary = column.asc() if self.sort_dir is SortDirection.ASC else column.desc()
        # id breaks ties so consecutive pages never overlap
        return primary, Card.id.asc()

    def count_statement(self) -> Select:
        return select(func.count()).select_from(Card).where(*self.conditions)

    def page_statement(self) -> Select:
        return (
            select(Card)
            .where(*self.conditions)
            .order_by(*self.order_by())
            .limit(self.limit)
            .offset(self.offset)
        )


def build_card_query(
    *,
    page: str | int | None = None,
    per_page: str | int | None = None,
    sort_by: str | None = None,
    sort_dir: str | None = None,
    priority: str | None = None,
    status: str | None = None,
    stage: str | None = None,
    tags: str | None = None,
) -> CardQuery:
    """Turn raw query-string values into a :class:`CardQuery`.

    Nothing here raises: unknown sort values, non-numeric or non-positive
    page numbers and out-of-range page sizes all fall back to defaults.
    """
    conditions: list[ColumnElement[bool]] = [public_only()]
    if priority:
        conditions.append(Card.priority == priority)
    if status:
        conditions.append(Card.status == status)
    if stage:
        conditions.append(Card.stage == stage)
    tag_list = split_tags(tags)
    if tag_list:
        conditions.append(Card.tags.overlap(tag_list))

    return CardQuery(
        conditions=tuple(conditions),
        sort_by=_choice(SortField, sort_by, SortField.LAST_UPDATED),
        sort_dir=_choice(SortDirection, sort_dir, SortDirection.DESC),
        page=_positive_int(page, DEFAULT_PAGE, maximum=MAX_PAGE),
        limit=min(_positive_int(per_page, DEFAULT_PER_PAGE), MAX_PER_PAGE),
    )


def total_pages(total_rows: int, limit: int) -> int:
    return math.ceil(total_rows / limit) if total_rows > 0 else 0

"""Offset pagination and sort parsing shared by the list endpoints."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from clubhouse.core.config import get_settings
from clubhouse.core.errors import ServiceError, bad_request


@dataclass(frozen=True)
class PageRequest:
    offset: int
    limit: int

    @property
    def page(self) -> int:
        return self.offset // self.limit + 1

    def meta(self, total: int) -> dict[str, int]:
        return {"page": self.page, "limit": self.limit, "total": total}


def resolve_page(limit: int | None, offset: int | None, page: int | None) -> PageRequest:
    """Build a page request; ``offset`` wins over ``page`` when both are given."""

    settings = get_settings()
    resolved_limit = min(limit or settings.default_page_limit, settings.max_page_limit)
    if offset is not None:
        return PageRequest(offset=offset, limit=resolved_limit)
    if page is not None:
        return PageRequest(offset=(page - 1) * resolved_limit, limit=resolved_limit)
    return PageRequest(offset=0, limit=resolved_limit)


def resolve_sort(
    sort: str | None,
    columns: Mapping[str, Any],
    default: Sequence[Any],
) -> tuple[list[Any] | None, ServiceError | None]:
    """Translate ``field`` / ``-field`` into ORDER BY clauses."""

    if sort is None:
        return list(default), None

    descending = sort.startswith("-")
    field_name = sort.removeprefix("-")
    column = columns.get(field_name)
    if column is None:
        return None, bad_request(
            "invalid_sort",
            f"Unsupported sort field: {field_name}",
            {"allowed": sorted(columns)},
        )
    return [column.desc() if descending else column.asc(), *default], None

"""The JSON envelope every route answers with."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from fastapi import Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Keeps the row offset inside a 32-bit database integer.
MAX_PAGE = 1_000_000


def _positive_int(raw: str | None, default: int, maximum: int | None = None) -> int:
    try:
        value = int(raw) if raw is not None else default
    except (TypeError, ValueError):
        return default
    if value < 1 or (maximum is not None and value > maximum):
        return default
    return value


@dataclass(frozen=True)
class PageParams:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    search: str | None = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    search: str | None = Query(default=None),
) -> PageParams:
    """Parse ``page``/``limit``/``search`` leniently, falling back to defaults."""
    return PageParams(
        page=_positive_int(page, DEFAULT_PAGE, MAX_PAGE),
        limit=min(_positive_int(limit, DEFAULT_LIMIT), MAX_LIMIT),
        search=search.strip() if search and search.strip() else None,
    )


def serialize(schema: type[BaseModel], obj: Any) -> dict[str, Any]:
    return schema.model_validate(obj).model_dump(mode="json", by_alias=True)


def success_body(message: str, data: Any = None) -> dict[str, Any]:
    return {"success": True, "message": message, "data": jsonable_encoder(data)}


def success_response(message: str, data: Any = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=success_body(message, data))


def paginate_items(items: Iterable[dict[str, Any]], params: PageParams) -> list[dict[str, Any]]:
    return [{"no": params.offset + index + 1, **item} for index, item in enumerate(items)]


def paginated_body(message: str, items: Iterable[dict[str, Any]], params: PageParams, total: int) -> dict[str, Any]:
    return {
        "success": True,
        "message": message,
        "currentPage": params.page,
        "totalData": total,
        "totalPages": math.ceil(total / params.limit),
        "data": jsonable_encoder(paginate_items(items, params)),
    }


def paginated_response(
    message: str,
    items: Iterable[dict[str, Any]],
    params: PageParams,
    total: int,
) -> JSONResponse:
    return JSONResponse(status_code=200, content=paginated_body(message, items, params, total))

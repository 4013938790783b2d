"""
Response envelopes, pagination metadata, and exception handlers.

Every response body has the same outer shape:

    {"success": true,  "message": "...", "data": ...}
    {"success": false, "message": "...", "errors": {...}}   # errors: 422 only

List responses also carry page metadata next to ``data``:
current_page, per_page, total, last_page, from, to, path and the
first/last/next/prev page URLs plus a ``links`` list for page pickers.
"""

import logging
import math
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from manual_api.errors import ManualError
from manual_api.models import UserManual
from manual_api.schemas.manuals import ErrorEnvelope, ManualResponse, PageLink
from manual_api.services.store import Page

logger = logging.getLogger(__name__)

# Page numbers shown on each side of the current page in ``links``
ON_EACH_SIDE = 3


def serialize_manual(manual: UserManual) -> dict:
    return ManualResponse.model_validate(manual).model_dump(mode="json")


def success_response(message: str, data: Any = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "message": message, "data": jsonable_encoder(data)},
    )


def manual_response(manual: UserManual, message: str, status_code: int = 200) -> JSONResponse:
    return success_response(message, serialize_manual(manual), status_code=status_code)


def error_response(
    status_code: int,
    message: str,
    errors: Optional[dict[str, list[str]]] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    body = ErrorEnvelope(message=message, errors=errors).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


# ------------------------------------------------------------------
# Pagination
# ------------------------------------------------------------------

def last_page_for(total: int, per_page: int) -> int:
    """Number of the last page. An empty listing still has page 1."""
    return max(1, math.ceil(total / per_page))


def page_window(current: int, last: int, on_each_side: int = ON_EACH_SIDE) -> list[Optional[int]]:
    """Page numbers for the ``links`` list; None marks a "..." gap.

    Short listings show every page. Long ones show the first two, the
    last two, and ``on_each_side`` pages around the current one.
    """
    if last <= on_each_side * 2 + 7:
        return list(range(1, last + 1))

    shown = {1, 2, last - 1, last}
    shown.update(range(max(1, current - on_each_side), min(last, current + on_each_side) + 1))

    numbers: list[Optional[int]] = []
    previous = None
    for number in sorted(shown):
        if previous is not None and number - previous > 1:
            numbers.append(None)
        numbers.append(number)
        previous = number
    return numbers


def pagination_meta(page: Page, request: Request) -> dict:
    """Page metadata for a listing.

    Page URLs keep the caller's other query parameters (per_page, search)
    and only swap ``page``.
    """
    last_page = last_page_for(page.total, page.per_page)

    def url_for_page(number: int) -> str:
        return str(request.url.include_query_params(page=number))

    first_item = (page.page - 1) * page.per_page + 1 if page.items else None
    last_item = first_item + len(page.items) - 1 if first_item is not None else None

    prev_url = url_for_page(page.page - 1) if page.page > 1 else None
    next_url = url_for_page(page.page + 1) if page.page < last_page else None

    links = [PageLink(url=prev_url, label="&laquo; Previous", active=False)]
    for number in page_window(page.page, last_page):
        if number is None:
            links.append(PageLink(url=None, label="...", active=False))
        else:
            links.append(PageLink(
                url=url_for_page(number),
                label=str(number),
                active=number == page.page,
            ))
    links.append(PageLink(url=next_url, label="Next &raquo;", active=False))

    return {
        "current_page": page.page,
        "per_page": page.per_page,
        "total": page.total,
        "last_page": last_page,
        "from": first_item,
        "to": last_item,
        "path": str(request.url.replace(query="")),
        "first_page_url": url_for_page(1),
        "last_page_url": url_for_page(last_page),
        "next_page_url": next_url,
        "prev_page_url": prev_url,
        "links": [link.model_dump() for link in links],
    }


def paginated_response(page: Page, request: Request, message: str) -> JSONResponse:
    body = {
        "success": True,
        "message": message,
        "data": [serialize_manual(manual) for manual in page.items],
    }
    body.update(pagination_meta(page, request))
    return JSONResponse(status_code=200, content=body)


# ------------------------------------------------------------------
# Exception handlers
# ------------------------------------------------------------------

async def manual_error_handler(request: Request, exc: ManualError) -> JSONResponse:
    return error_response(
        exc.status_code,
        exc.message,
        errors=getattr(exc, "errors", None),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(
        exc.status_code,
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed requests (bad JSON, non-object body, bad query types)."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        field = ".".join(loc[1:]) or (loc[0] if loc else "request")
        errors.setdefault(field, []).append(error.get("msg", "Invalid value."))
    return error_response(422, "The given data was invalid.", errors=errors)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ManualError, manual_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

"""
User manual API endpoints.

Two routers, one resource:
1. Public (no auth) - list with search/pagination, fetch one
   GET  /api/admin/public/user-manual
   GET  /api/admin/public/user-manual/{id}
2. Admin (bearer token) - create, update, soft-delete, fetch incl. deleted
   POST         /api/admin/auth/v1/user-manual
   GET          /api/admin/auth/v1/user-manual/{id}?include_deleted=true
   PUT | PATCH  /api/admin/auth/v1/user-manual/{id}
   DELETE       /api/admin/auth/v1/user-manual/{id}

Design notes:
- Routers are THIN - they parse HTTP requests and call ManualService
- The auth dependency runs before the body is read (see read_payload),
  so an unauthenticated write never reaches validation or the database
- Failures are raised as domain errors and shaped by manual_api.responses
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from manual_api.config import settings
from manual_api.database import get_db
from manual_api.errors import ManualValidationError
from manual_api.responses import manual_response, paginated_response, success_response
from manual_api.security import Identity, require_writer
from manual_api.services.manuals import ManualService
from manual_api.services.store import ManualStore

public_router = APIRouter(prefix="/api/admin/public/user-manual", tags=["user-manuals"])
admin_router = APIRouter(prefix="/api/admin/auth/v1/user-manual", tags=["user-manuals-admin"])


def get_manual_service(db: AsyncSession = Depends(get_db)) -> ManualService:
    return ManualService(
        ManualStore(db),
        not_found_status=settings.MUTATION_NOT_FOUND_STATUS,
    )


async def read_payload(request: Request) -> dict[str, Any]:
    """Decode the JSON body as an object.

    Read inside the handler rather than declared as a Body parameter, so
    the auth dependency has already run and a guest gets 401 whatever
    they sent.
    """
    try:
        payload = await request.json()
    except ValueError:
        raise ManualValidationError({"body": ["The request body must be valid JSON."]})
    if not isinstance(payload, dict):
        raise ManualValidationError({"body": ["The request body must be a JSON object."]})
    return payload


# --- Public reads ---

@public_router.get("")
async def list_manuals(
    request: Request,
    page: int = 1,
    per_page: Optional[int] = None,
    search: Optional[str] = None,
    service: ManualService = Depends(get_manual_service),
):
    """List live manuals, oldest first.

    Args:
        page: Page number (1-indexed; anything lower is treated as 1)
        per_page: Results per page (default 15, max 100)
        search: Case-insensitive substring of the title
    """
    page = max(page, 1)
    if per_page is None:
        per_page = settings.DEFAULT_PER_PAGE
    per_page = min(max(per_page, 1), settings.MAX_PER_PAGE)
    search = search.strip() if search else None

    result = await service.list(page=page, per_page=per_page, search=search or None)
    return paginated_response(result, request, "User manuals retrieved successfully")


@public_router.get("/{manual_id}")
async def get_manual(
    manual_id: int,
    service: ManualService = Depends(get_manual_service),
):
    """Get one live manual. Soft-deleted manuals are not found here."""
    manual = await service.get(manual_id)
    return manual_response(manual, "User manual retrieved successfully")


# --- Admin writes ---

@admin_router.post("", status_code=201)
async def create_manual(
    request: Request,
    identity: Identity = Depends(require_writer),
    service: ManualService = Depends(get_manual_service),
):
    """Create a manual. Title is required; everything else is optional."""
    payload = await read_payload(request)
    manual = await service.create(payload)
    return manual_response(manual, "User manual created successfully", status_code=201)


@admin_router.get("/{manual_id}")
async def get_manual_admin(
    manual_id: int,
    include_deleted: bool = False,
    identity: Identity = Depends(require_writer),
    service: ManualService = Depends(get_manual_service),
):
    """Get one manual, optionally including soft-deleted ones."""
    manual = await service.get(manual_id, include_deleted=include_deleted)
    return manual_response(manual, "User manual retrieved successfully")


@admin_router.api_route("/{manual_id}", methods=["PUT", "PATCH"])
async def update_manual(
    manual_id: int,
    request: Request,
    identity: Identity = Depends(require_writer),
    service: ManualService = Depends(get_manual_service),
):
    """Update a manual. Only the keys present in the body are changed.

    PUT and PATCH behave the same; a full replacement simply sends
    every field.
    """
    payload = await read_payload(request)
    manual = await service.update(manual_id, payload)
    return manual_response(manual, "User manual updated successfully")


@admin_router.delete("/{manual_id}")
async def delete_manual(
    manual_id: int,
    identity: Identity = Depends(require_writer),
    service: ManualService = Depends(get_manual_service),
):
    """Soft-delete a manual. The row stays, with deleted_at set."""
    await service.delete(manual_id)
    return success_response("User manual deleted successfully")

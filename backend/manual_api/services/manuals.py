"""
User manual service: validation -> store -> errors.

Routers stay thin and call this. The order of work for mutations is:
1. Validate the payload (nothing touches the database on failure)
2. Strip it down to known fields
3. Hand it to the store

Not-found on update/delete is re-raised with ``not_found_status`` so the
status code for that case is a deployment decision, not a hard-coded one.
"""

import logging
from typing import Any, Optional

from manual_api.errors import ManualNotFound, ManualValidationError
from manual_api.models import UserManual
from manual_api.services import links
from manual_api.services.store import ManualStore, Page
from manual_api.services.validation import Mode, clean_fields, validate_manual

logger = logging.getLogger(__name__)


class ManualService:
    """Orchestrates validation and persistence of user manuals."""

    def __init__(self, store: ManualStore, not_found_status: int = 404):
        self.store = store
        self.not_found_status = not_found_status

    @staticmethod
    def _validated(payload: dict[str, Any], mode: Mode) -> dict[str, Any]:
        errors = validate_manual(payload, mode)
        if errors:
            logger.info("Rejected %s payload: %s", mode, sorted(errors))
            raise ManualValidationError(errors)
        return clean_fields(payload)

    async def create(self, payload: dict[str, Any]) -> UserManual:
        fields = self._validated(payload, "create")
        manual = await self.store.create(fields)
        logger.info(
            "Created user manual %s (video=%s)",
            manual.id,
            links.extract_video_id(manual.video_link) if manual.video_link else None,
        )
        return manual

    async def update(self, manual_id: int, payload: dict[str, Any]) -> UserManual:
        """Patch a manual. PUT and PATCH both land here.

        A full update is just a patch that happens to carry every field.
        """
        fields = self._validated(payload, "update")
        try:
            manual = await self.store.update(manual_id, fields)
        except ManualNotFound:
            logger.warning("Update of missing user manual %s", manual_id)
            raise ManualNotFound(manual_id, status_code=self.not_found_status)
        logger.info("Updated user manual %s fields=%s", manual_id, sorted(fields))
        return manual

    async def delete(self, manual_id: int) -> None:
        try:
            await self.store.soft_delete(manual_id)
        except ManualNotFound:
            logger.warning("Delete of missing user manual %s", manual_id)
            raise ManualNotFound(manual_id, status_code=self.not_found_status)
        logger.info("Soft-deleted user manual %s", manual_id)

    async def get(self, manual_id: int, include_deleted: bool = False) -> UserManual:
        return await self.store.find_by_id(manual_id, include_deleted=include_deleted)

    async def list(
        self,
        page: int,
        per_page: int,
        search: Optional[str] = None,
        include_deleted: bool = False,
    ) -> Page:
        return await self.store.list(
            page=page,
            per_page=per_page,
            search=search,
            include_deleted=include_deleted,
        )

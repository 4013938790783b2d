"""
Persistence for user manuals.

``ManualStore`` owns every query against the ``user_manuals`` table:
create, lookup, patch-style update, soft delete, and the paginated
title search used by the public listing.

Soft-deleted rows are excluded unless the caller passes
``include_deleted=True``. There is no implicit global scope: every read
goes through ``_scoped`` so the decision is always explicit.
"""

from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from manual_api.errors import ManualNotFound
from manual_api.models import UserManual
from manual_api.models.models import utcnow

# Largest value of the Integer primary key column
MAX_ID = 2**31 - 1


@dataclass
class Page:
    """One page of a listing plus the numbers needed to paginate it."""
    items: list[UserManual]
    total: int
    page: int
    per_page: int


class ManualStore:
    """CRUD + soft delete + search/pagination over one async session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _scoped(query: Select, include_deleted: bool) -> Select:
        if include_deleted:
            return query
        return query.where(UserManual.deleted_at.is_(None))

    async def create(self, fields: dict[str, Any]) -> UserManual:
        """Insert a manual and return it with id and timestamps assigned."""
        now = utcnow()
        manual = UserManual(**fields, created_at=now, updated_at=now)
        self.db.add(manual)
        await self.db.commit()
        await self.db.refresh(manual)
        return manual

    async def find_by_id(self, manual_id: int, include_deleted: bool = False) -> UserManual:
        """Fetch one manual or raise ManualNotFound."""
        # Ids outside the Integer column can't exist; the driver would
        # overflow on them
        if not 1 <= manual_id <= MAX_ID:
            raise ManualNotFound(manual_id)
        query = self._scoped(
            select(UserManual).where(UserManual.id == manual_id), include_deleted
        )
        result = await self.db.execute(query)
        manual = result.scalar_one_or_none()
        if manual is None:
            raise ManualNotFound(manual_id)
        return manual

    async def update(self, manual_id: int, fields: dict[str, Any]) -> UserManual:
        """Apply only the provided fields to a live manual.

        Keys absent from ``fields`` are left untouched. ``updated_at`` is
        bumped even when the values didn't change.
        """
        manual = await self.find_by_id(manual_id)
        for key, value in fields.items():
            setattr(manual, key, value)
        manual.updated_at = utcnow()
        await self.db.commit()
        await self.db.refresh(manual)
        return manual

    async def soft_delete(self, manual_id: int) -> None:
        """Stamp deleted_at. Deleting an already-deleted manual is not found."""
        manual = await self.find_by_id(manual_id)
        manual.deleted_at = utcnow()
        await self.db.commit()

    async def list(
        self,
        page: int = 1,
        per_page: int = 15,
        search: Optional[str] = None,
        include_deleted: bool = False,
    ) -> Page:
        """Return one page of manuals in insertion order (oldest first).

        Args:
            page: 1-indexed page number.
            per_page: Page size.
            search: Optional case-insensitive substring of the title.
            include_deleted: Include soft-deleted manuals.
        """
        query = self._scoped(select(UserManual), include_deleted)
        count_query = self._scoped(
            select(func.count()).select_from(UserManual), include_deleted
        )

        if search:
            # autoescape so "%" and "_" in the term match literally
            condition = func.lower(UserManual.title).contains(
                search.lower(), autoescape=True
            )
            query = query.where(condition)
            count_query = count_query.where(condition)

        total_result = await self.db.execute(count_query)
        total = total_result.scalar() or 0

        offset = (page - 1) * per_page
        if offset >= total:
            # Past the end: nothing to fetch, and huge offsets overflow the driver
            return Page(items=[], total=total, page=page, per_page=per_page)

        query = query.order_by(UserManual.id.asc()).offset(offset).limit(per_page)
        result = await self.db.execute(query)
        items = list(result.scalars().all())

        return Page(items=items, total=total, page=page, per_page=per_page)

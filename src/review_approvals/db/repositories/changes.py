"""
review_approvals.db.repositories.changes

Repository for `Change` and `PatchSet` entities.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from review_approvals.db.models import Change, PatchSet, PatchSetId


class ChangeRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, owner_account_id: int, subject: str) -> Change:
        change = Change(owner_account_id=owner_account_id, subject=subject)
        self._session.add(change)
        await self._session.flush()
        return change

    async def get(self, change_id: int, *, for_update: bool = False) -> Change | None:
        return await self._session.get(Change, change_id, with_for_update=for_update)

    async def get_patch_set(self, ps_id: PatchSetId) -> PatchSet | None:
        return await self._session.get(PatchSet, (ps_id.change_id, ps_id.number))

    async def insert_patch_set(self, change: Change, *, draft: bool = False) -> PatchSet:
        """
        Append the next patch set to `change` and make it current.
        """

        number = (change.current_patch_set_number or 0) + 1
        ps = PatchSet(change_id=change.id, number=number, draft=draft)
        self._session.add(ps)
        change.current_patch_set_number = number
        change.updated_at = datetime.now(tz=UTC).replace(tzinfo=None)
        await self._session.flush()
        return ps

"""
review_approvals.db.repositories.approvals

Repository for `PatchSetApproval` entities.

Responsibilities:
- Fetch approvals by change or by patch set, in a stable order.
- Insert batches of approvals (flush only; the caller commits).
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from review_approvals.db.models import PatchSetApproval, PatchSetId


class PatchSetApprovalRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def by_change(self, change_id: int) -> list[PatchSetApproval]:
        stmt = (
            select(PatchSetApproval)
            .where(PatchSetApproval.change_id == change_id)
            .order_by(PatchSetApproval.patch_set_number, PatchSetApproval.granted)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def by_patch_set(self, ps_id: PatchSetId) -> list[PatchSetApproval]:
        stmt = (
            select(PatchSetApproval)
            .where(
                PatchSetApproval.change_id == ps_id.change_id,
                PatchSetApproval.patch_set_number == ps_id.number,
            )
            .order_by(PatchSetApproval.granted)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def insert(self, approvals: Iterable[PatchSetApproval]) -> None:
        rows = list(approvals)
        if not rows:
            return
        self._session.add_all(rows)
        await self._session.flush()

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from review_approvals.db.models import ApprovalCategory


class ApprovalCategoryRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def upsert(self, *, category_id: str, name: str, position: int = 0) -> ApprovalCategory:
        existing = await self._session.get(ApprovalCategory, category_id)
        if existing is not None:
            existing.name = name
            existing.position = position
            await self._session.flush()
            return existing

        category = ApprovalCategory(category_id, name, position)
        self._session.add(category)
        await self._session.flush()
        return category

    async def list_ordered(self) -> list[ApprovalCategory]:
        # Same ordering the approvals table uses: position, then name.
        stmt = select(ApprovalCategory).order_by(ApprovalCategory.position, ApprovalCategory.name)
        return list((await self._session.execute(stmt)).scalars().all())

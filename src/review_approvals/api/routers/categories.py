"""
review_approvals.api.routers.categories

Read API for approval categories.

Categories with a negative position are actions (e.g. submit) and are listed
separately from the score columns.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from review_approvals.api.deps import db_session
from review_approvals.db.repositories.categories import ApprovalCategoryRepo

router = APIRouter(prefix="/v1/approval-categories", tags=["approval-categories"])


class ApprovalCategoryResponse(BaseModel):
    id: str
    name: str
    position: int


class ApprovalCategoriesResponse(BaseModel):
    columns: list[ApprovalCategoryResponse]
    actions: list[ApprovalCategoryResponse]


@router.get("", response_model=ApprovalCategoriesResponse)
async def list_categories(
    session: AsyncSession = Depends(db_session),
) -> ApprovalCategoriesResponse:
    columns: list[ApprovalCategoryResponse] = []
    actions: list[ApprovalCategoryResponse] = []
    for category in await ApprovalCategoryRepo(session).list_ordered():
        item = ApprovalCategoryResponse(
            id=category.category_id, name=category.name, position=category.position
        )
        (actions if category.is_action else columns).append(item)
    return ApprovalCategoriesResponse(columns=columns, actions=actions)

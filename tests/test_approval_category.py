from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from review_approvals.db.models import SUBMIT, ApprovalCategory
from review_approvals.db.repositories.categories import ApprovalCategoryRepo


def test_negative_position_is_an_action() -> None:
    submit = ApprovalCategory(SUBMIT, "Submit", -1)
    assert submit.category_id == "SUBM"
    assert submit.is_action


@pytest.mark.parametrize("position", [0, 1, 7])
def test_non_negative_position_is_displayed(position: int) -> None:
    assert not ApprovalCategory("CRVW", "Code Review", position).is_action


def test_name_and_position_are_mutable() -> None:
    category = ApprovalCategory("VRIF", "Verified")
    assert category.position == 0
    category.name = "Verified-By-CI"
    category.position = -2
    assert category.name == "Verified-By-CI"
    assert category.is_action


def test_id_is_fixed_after_construction() -> None:
    category = ApprovalCategory("VRIF", "Verified")
    with pytest.raises(ValueError, match="fixed"):
        category.category_id = "CRVW"
    assert category.category_id == "VRIF"


@pytest.mark.parametrize("bad", ["", "TOOLONG"])
def test_invalid_id(bad: str) -> None:
    with pytest.raises(ValueError):
        ApprovalCategory(bad, "Broken")


@pytest.mark.asyncio
async def test_list_ordered_by_position_then_name(session: AsyncSession) -> None:
    repo = ApprovalCategoryRepo(session)
    await repo.upsert(category_id="VRIF", name="Verified", position=0)
    await repo.upsert(category_id="CRVW", name="Code Review", position=1)
    await repo.upsert(category_id="IFPL", name="Ignore", position=0)
    await repo.upsert(category_id=SUBMIT, name="Submit", position=-1)
    await session.commit()

    ordered = await repo.list_ordered()
    assert [c.category_id for c in ordered] == [SUBMIT, "IFPL", "VRIF", "CRVW"]

    updated = await repo.upsert(category_id="CRVW", name="Code Review", position=-3)
    assert updated.is_action

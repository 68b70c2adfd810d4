"""
review_approvals.api.routers.changes

Change endpoints.

Responsibilities:
- Create a change (patch set 1) and upload follow-up patch sets.
- List reviewers/CCs of a change and add reviewers to it.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from starlette.status import HTTP_201_CREATED, HTTP_404_NOT_FOUND

from review_approvals.api.deps import change_service
from review_approvals.change_kind import ChangeKind
from review_approvals.db.models import PatchSetApproval, PatchSetInfo
from review_approvals.services.change_service import ChangeNotFoundError, ChangeService

router = APIRouter(prefix="/v1/changes", tags=["changes"])


class PatchSetUpload(BaseModel):
    draft: bool = False
    author_account_id: int | None = None
    committer_account_id: int | None = None
    reviewers: list[int] = Field(default_factory=list)

    def info(self) -> PatchSetInfo:
        return PatchSetInfo(
            author_account_id=self.author_account_id,
            committer_account_id=self.committer_account_id,
        )


class ChangeCreateRequest(PatchSetUpload):
    owner_account_id: int
    subject: str = Field(default="", max_length=255)


class PatchSetCreateRequest(PatchSetUpload):
    change_kind: ChangeKind = ChangeKind.rework


class PatchSetResponse(BaseModel):
    change_id: int
    patch_set: int


class AddReviewersRequest(BaseModel):
    reviewers: list[int] = Field(min_length=1)


class ApprovalResponse(BaseModel):
    change_id: int
    patch_set: int
    account_id: int
    label: str
    value: int

    @classmethod
    def of(cls, psa: PatchSetApproval) -> ApprovalResponse:
        return cls(
            change_id=psa.change_id,
            patch_set=psa.patch_set_number,
            account_id=psa.account_id,
            label=psa.label_id,
            value=psa.value,
        )


class AddReviewersResponse(BaseModel):
    added: list[ApprovalResponse]


def _not_found(e: ChangeNotFoundError) -> HTTPException:
    return HTTPException(status_code=HTTP_404_NOT_FOUND, detail=str(e))


@router.post("", response_model=PatchSetResponse, status_code=HTTP_201_CREATED)
async def create_change(
    body: ChangeCreateRequest,
    svc: ChangeService = Depends(change_service),
) -> PatchSetResponse:
    change = await svc.create_change(
        owner_account_id=body.owner_account_id,
        subject=body.subject,
        info=body.info(),
        draft=body.draft,
        reviewers=body.reviewers,
    )
    return PatchSetResponse(change_id=change.id, patch_set=change.current_patch_set_number or 1)


@router.post(
    "/{change_id}/patch-sets", response_model=PatchSetResponse, status_code=HTTP_201_CREATED
)
async def upload_patch_set(
    change_id: int,
    body: PatchSetCreateRequest,
    svc: ChangeService = Depends(change_service),
) -> PatchSetResponse:
    try:
        ps_id = await svc.upload_patch_set(
            change_id=change_id,
            info=body.info(),
            change_kind=body.change_kind,
            draft=body.draft,
            reviewers=body.reviewers,
        )
    except ChangeNotFoundError as e:
        raise _not_found(e) from e
    return PatchSetResponse(change_id=ps_id.change_id, patch_set=ps_id.number)


@router.get("/{change_id}/reviewers")
async def list_reviewers(
    change_id: int,
    svc: ChangeService = Depends(change_service),
) -> dict[str, list[int]]:
    try:
        reviewers = await svc.reviewers(change_id=change_id)
    except ChangeNotFoundError as e:
        raise _not_found(e) from e
    return {state.value: sorted(accounts) for state, accounts in reviewers.items()}


@router.post("/{change_id}/reviewers", response_model=AddReviewersResponse)
async def add_reviewers(
    change_id: int,
    body: AddReviewersRequest,
    svc: ChangeService = Depends(change_service),
) -> AddReviewersResponse:
    try:
        added = await svc.add_reviewers(change_id=change_id, reviewers=body.reviewers)
    except ChangeNotFoundError as e:
        raise _not_found(e) from e
    return AddReviewersResponse(added=[ApprovalResponse.of(psa) for psa in added])

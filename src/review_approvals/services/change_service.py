"""
review_approvals.services.change_service

Change lifecycle service (transaction + persistence owner).

Responsibilities:
- Create changes and upload new patch sets.
- Copy labels forward and backfill reviewer placeholders on each upload.
- Add reviewers to an existing change.
- Commit once per workflow; store errors propagate to the caller.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from review_approvals.approvals import ApprovalsUtil, Reviewers
from review_approvals.change_kind import ChangeKind
from review_approvals.db.models import Change, PatchSetApproval, PatchSetId, PatchSetInfo
from review_approvals.db.repositories.changes import ChangeRepo
from review_approvals.labels import LabelTypes
from review_approvals.observability.logging import get_logger

log = get_logger(__name__)


class ChangeNotFoundError(LookupError):
    def __init__(self, change_id: int) -> None:
        super().__init__(f"change {change_id} not found")
        self.change_id = change_id


class ChangeService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        label_types: LabelTypes,
        approvals: ApprovalsUtil | None = None,
    ) -> None:
        self._session = session
        self._label_types = label_types
        self._approvals = approvals or ApprovalsUtil()
        self._changes = ChangeRepo(session)

    async def create_change(
        self,
        *,
        owner_account_id: int,
        subject: str,
        info: PatchSetInfo,
        draft: bool = False,
        reviewers: Iterable[int] = (),
    ) -> Change:
        change = await self._changes.create(owner_account_id=owner_account_id, subject=subject)
        ps = await self._changes.insert_patch_set(change, draft=draft)
        added = await self._approvals.add_reviewers_for_patch_set(
            self._session, self._label_types, change, ps, info, reviewers, ()
        )
        await self._session.commit()
        log.info("change_created", change_id=change.id, reviewers=len(added), draft=draft)
        return change

    async def upload_patch_set(
        self,
        *,
        change_id: int,
        info: PatchSetInfo,
        change_kind: ChangeKind,
        draft: bool = False,
        reviewers: Iterable[int] = (),
    ) -> PatchSetId:
        change = await self._require_change(change_id, for_update=True)
        prior = change.current_patch_set_id

        # Accounts already on the change stay there; they are not given new placeholders.
        old = await self._approvals.get_reviewers(self._session, change_id)
        existing = set().union(*old.values())

        ps = await self._changes.insert_patch_set(change, draft=draft)
        if prior is not None:
            await self._approvals.copy_labels(
                self._session, self._label_types, prior, ps.id, change_kind
            )
        await self._approvals.add_reviewers_for_patch_set(
            self._session, self._label_types, change, ps, info, reviewers, existing
        )
        await self._session.commit()
        log.info(
            "patch_set_uploaded",
            patch_set=str(ps.id),
            prior=str(prior) if prior else None,
            change_kind=change_kind.value,
        )
        return ps.id

    async def add_reviewers(
        self, *, change_id: int, reviewers: Iterable[int]
    ) -> tuple[PatchSetApproval, ...]:
        change = await self._require_change(change_id)
        added = await self._approvals.add_reviewers(
            self._session, self._label_types, change, reviewers
        )
        await self._session.commit()
        return added

    async def reviewers(self, *, change_id: int) -> Reviewers:
        await self._require_change(change_id)
        return await self._approvals.get_reviewers(self._session, change_id)

    async def _require_change(self, change_id: int, *, for_update: bool = False) -> Change:
        change = await self._changes.get(change_id, for_update=for_update)
        if change is None:
            raise ChangeNotFoundError(change_id)
        return change


# --- Module Notes -----------------------------------------------------------
# This service is the transaction boundary. `ApprovalsUtil` only flushes; commits happen here.

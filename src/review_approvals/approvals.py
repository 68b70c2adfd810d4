"""
review_approvals.approvals

Utility functions to manipulate patch set approvals.

Approvals are overloaded: they represent both scores and the reviewers who
should be CCed on a change. To keep reviewers from being lost there must
always be an approval on each patch set for each reviewer, even if the
reviewer has not actually scored the change. The "no score" case is marked
by a placeholder approval with value 0, which may live in any configured
label.

Nothing here begins or commits transactions; callers own the session scope.
"""

from __future__ import annotations

import enum
from collections.abc import Collection, Iterable, Mapping
from types import MappingProxyType

from sqlalchemy.ext.asyncio import AsyncSession

from review_approvals.change_kind import ChangeKind
from review_approvals.db.models import (
    Change,
    PatchSet,
    PatchSetApproval,
    PatchSetId,
    PatchSetInfo,
)
from review_approvals.db.repositories.approvals import PatchSetApprovalRepo
from review_approvals.labels import LabelTypes
from review_approvals.observability.logging import get_logger

log = get_logger(__name__)


class ReviewerState(enum.StrEnum):
    REVIEWER = "REVIEWER"
    CC = "CC"


Reviewers = Mapping[ReviewerState, frozenset[int]]


class ApprovalsUtil:
    async def get_reviewers(self, session: AsyncSession, change_id: int) -> Reviewers:
        """
        Get all reviewers for a change.

        Returns a read-only mapping keyed by state, where each account appears
        under exactly one state.
        """

        approvals = await PatchSetApprovalRepo(session).by_change(change_id)
        return self.reviewers_from_approvals(approvals)

    @staticmethod
    def reviewers_from_approvals(approvals: Iterable[PatchSetApproval]) -> Reviewers:
        """
        Classify accounts from approvals that must all belong to the same change.

        Any non-zero score makes the account a REVIEWER, evicting an earlier CC
        marking; a zero score marks CC only if the account is not a REVIEWER.
        """

        first: PatchSetApproval | None = None
        reviewers: dict[int, None] = {}
        cc: dict[int, None] = {}
        for psa in approvals:
            if first is None:
                first = psa
            elif first.change_id != psa.change_id:
                raise ValueError(f"multiple change IDs: {first.key}, {psa.key}")

            account_id = psa.account_id
            if psa.value != 0:
                reviewers[account_id] = None
                cc.pop(account_id, None)
            elif account_id not in reviewers:
                cc[account_id] = None

        return MappingProxyType(
            {
                ReviewerState.REVIEWER: frozenset(reviewers),
                ReviewerState.CC: frozenset(cc),
            }
        )

    async def copy_labels(
        self,
        session: AsyncSession,
        label_types: LabelTypes,
        source: PatchSetId,
        dest: PatchSetId,
        change_kind: ChangeKind,
    ) -> list[PatchSetApproval]:
        """
        Copy min/max scores from one patch set to another.
        """

        source_approvals = await PatchSetApprovalRepo(session).by_patch_set(source)
        return await self.copy_labels_from(
            session, label_types, source_approvals, source, dest, change_kind
        )

    async def copy_labels_from(
        self,
        session: AsyncSession,
        label_types: LabelTypes,
        source_approvals: Iterable[PatchSetApproval],
        source: PatchSetId,
        dest: PatchSetId,
        change_kind: ChangeKind,
    ) -> list[PatchSetApproval]:
        """
        Copy a set's min/max scores from one patch set to another.

        Only approvals on `source` are considered. For each one the first
        matching rule wins: copy-min, copy-max, copy-all on trivial rebase,
        copy-all on no code change.
        """

        copied: list[PatchSetApproval] = []
        for psa in source_approvals:
            if psa.patch_set_id != source:
                continue
            label = label_types.by_label(psa.label_id)
            if label is None:
                continue
            elif label.copy_min_score and label.is_max_negative(psa):
                copied.append(psa.copy_to(dest))
            elif label.copy_max_score and label.is_max_positive(psa):
                copied.append(psa.copy_to(dest))
            elif (
                label.copy_all_scores_on_trivial_rebase
                and change_kind == ChangeKind.trivial_rebase
            ):
                copied.append(psa.copy_to(dest))
            elif (
                label.copy_all_scores_if_no_code_change
                and change_kind == ChangeKind.no_code_change
            ):
                copied.append(psa.copy_to(dest))

        await PatchSetApprovalRepo(session).insert(copied)
        log.info(
            "labels_copied",
            source=str(source),
            dest=str(dest),
            change_kind=change_kind.value,
            count=len(copied),
        )
        return copied

    async def add_reviewers_for_patch_set(
        self,
        session: AsyncSession,
        label_types: LabelTypes,
        change: Change,
        patch_set: PatchSet,
        info: PatchSetInfo,
        want_reviewers: Iterable[int],
        existing_reviewers: Collection[int],
    ) -> tuple[PatchSetApproval, ...]:
        return await self._add_reviewers(
            session,
            label_types,
            change,
            patch_set.id,
            patch_set.draft,
            info.author_account_id,
            info.committer_account_id,
            want_reviewers,
            existing_reviewers,
        )

    async def add_reviewers(
        self,
        session: AsyncSession,
        label_types: LabelTypes,
        change: Change,
        want_reviewers: Iterable[int],
    ) -> tuple[PatchSetApproval, ...]:
        ps_id = change.current_patch_set_id
        if ps_id is None:
            raise ValueError(f"change {change.id} has no patch sets")
        current = await PatchSetApprovalRepo(session).by_patch_set(ps_id)
        existing = {psa.account_id for psa in current}
        return await self._add_reviewers(
            session, label_types, change, ps_id, False, None, None, want_reviewers, existing
        )

    async def _add_reviewers(
        self,
        session: AsyncSession,
        label_types: LabelTypes,
        change: Change,
        ps_id: PatchSetId,
        is_draft: bool,
        author_id: int | None,
        committer_id: int | None,
        want_reviewers: Iterable[int],
        existing_reviewers: Collection[int],
    ) -> tuple[PatchSetApproval, ...]:
        all_types = label_types.label_types
        if not all_types:
            return ()

        # Insertion-ordered set.
        need = dict.fromkeys(want_reviewers)
        if author_id is not None and not is_draft:
            need[author_id] = None
        if committer_id is not None and not is_draft:
            need[committer_id] = None
        need.pop(change.owner_account_id, None)
        for account_id in existing_reviewers:
            need.pop(account_id, None)
        if not need:
            return ()

        label_id = all_types[-1].label_id
        cells = [PatchSetApproval.placeholder(ps_id, account_id, label_id) for account_id in need]
        await PatchSetApprovalRepo(session).insert(cells)
        log.info(
            "reviewers_added",
            patch_set=str(ps_id),
            label=label_id,
            accounts=list(need),
        )
        return tuple(cells)


# --- Module Notes -----------------------------------------------------------
# Reviewer/CC status is not stored on its own; it is derived from approvals on every read.

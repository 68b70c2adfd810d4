"""
review_approvals.db.models

Core persistence schema for review bookkeeping.

Responsibilities:
- Define ORM models:
  - Change: a proposed change and its current revision pointer
  - PatchSet: one revision of a change
  - PatchSetApproval: a (patch set, account, label) score; zero marks a CC placeholder
  - ApprovalCategory: a kind of approval and its display ordering
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    ForeignKey,
    ForeignKeyConstraint,
    Index,
    Integer,
    SmallInteger,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, validates

from review_approvals.db.base import Base


def _utcnow() -> datetime:
    # Persist naive UTC timestamps; SQLite drops tzinfo anyway.
    return datetime.now(tz=UTC).replace(tzinfo=None)


@dataclass(frozen=True, slots=True)
class PatchSetId:
    change_id: int
    number: int

    def __str__(self) -> str:
        return f"{self.change_id},{self.number}"


@dataclass(frozen=True, slots=True)
class PatchSetInfo:
    """
    Commit metadata for a patch set. Identities are resolved upstream; either
    account may be unknown.
    """

    author_account_id: int | None = None
    committer_account_id: int | None = None


class Change(Base):
    __tablename__ = "changes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    # Null until the first patch set is inserted.
    current_patch_set_number: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    @property
    def current_patch_set_id(self) -> PatchSetId | None:
        if self.current_patch_set_number is None:
            return None
        return PatchSetId(self.id, self.current_patch_set_number)


class PatchSet(Base):
    __tablename__ = "patch_sets"

    change_id: Mapped[int] = mapped_column(ForeignKey("changes.id"), primary_key=True)
    number: Mapped[int] = mapped_column(Integer, primary_key=True)
    draft: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    @property
    def id(self) -> PatchSetId:
        return PatchSetId(self.change_id, self.number)


class PatchSetApproval(Base):
    __tablename__ = "patch_set_approvals"

    change_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    patch_set_number: Mapped[int] = mapped_column(Integer, primary_key=True)
    account_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    label_id: Mapped[str] = mapped_column(String(64), primary_key=True)

    value: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
    granted: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    __table_args__ = (
        ForeignKeyConstraint(
            ["change_id", "patch_set_number"],
            ["patch_sets.change_id", "patch_sets.number"],
        ),
        Index("ix_approvals_change", "change_id"),
    )

    @classmethod
    def placeholder(cls, ps_id: PatchSetId, account_id: int, label_id: str) -> PatchSetApproval:
        # Zero score: keeps the account attached to the change without voting.
        return cls(
            change_id=ps_id.change_id,
            patch_set_number=ps_id.number,
            account_id=account_id,
            label_id=label_id,
            value=0,
            granted=_utcnow(),
        )

    @property
    def patch_set_id(self) -> PatchSetId:
        return PatchSetId(self.change_id, self.patch_set_number)

    @property
    def key(self) -> str:
        return f"{self.patch_set_id},{self.account_id},{self.label_id}"

    def copy_to(self, dest: PatchSetId) -> PatchSetApproval:
        return PatchSetApproval(
            change_id=dest.change_id,
            patch_set_number=dest.number,
            account_id=self.account_id,
            label_id=self.label_id,
            value=self.value,
            granted=self.granted,
        )

    def __repr__(self) -> str:
        return f"PatchSetApproval({self.key}={self.value})"


# Id of the special "Submit" action (and category).
SUBMIT = "SUBM"


class ApprovalCategory(Base):
    """
    A type of approval that can be associated with a change.

    `position` orders the category within the approvals table. A negative
    position means the category is not displayed as a score column but is an
    action the user may perform, e.g. submit.
    """

    __tablename__ = "approval_categories"

    category_id: Mapped[str] = mapped_column(String(4), primary_key=True)
    name: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    position: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)

    def __init__(self, category_id: str, name: str, position: int = 0) -> None:
        super().__init__(category_id=category_id, name=name, position=position)

    @validates("category_id")
    def _validate_category_id(self, _key: str, value: str) -> str:
        if self.category_id is not None and value != self.category_id:
            raise ValueError(f"category id is fixed: {self.category_id}")
        if not value or len(value) > 4:
            raise ValueError(f"invalid category id: {value!r}")
        return value

    @property
    def is_action(self) -> bool:
        return self.position < 0


# --- Module Notes -----------------------------------------------------------
# Approvals double as reviewer/CC markers: a zero value on any label keeps the account on
# the change. See `review_approvals.approvals` for how they are interpreted.

"""
review_approvals.labels

Label-type registry.

Responsibilities:
- Model a label (scoring dimension) with its allowed values and copy rules.
- Look up label types by label id, preserving configured order.
- Build the registry from `Settings.labels`.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from review_approvals.db.models import PatchSetApproval
    from review_approvals.settings import Settings


@dataclass(frozen=True, slots=True)
class LabelValue:
    value: int
    text: str = ""


@dataclass(frozen=True, slots=True)
class LabelType:
    name: str
    values: tuple[LabelValue, ...] = field(default_factory=tuple)

    copy_min_score: bool = False
    copy_max_score: bool = False
    copy_all_scores_on_trivial_rebase: bool = False
    copy_all_scores_if_no_code_change: bool = False

    def __post_init__(self) -> None:
        # Keep values sorted so the ends are the extreme scores.
        object.__setattr__(self, "values", tuple(sorted(self.values, key=lambda v: v.value)))

    @property
    def label_id(self) -> str:
        return self.name

    @property
    def max_negative(self) -> int:
        return self.values[0].value if self.values else 0

    @property
    def max_positive(self) -> int:
        return self.values[-1].value if self.values else 0

    def is_max_negative(self, approval: PatchSetApproval) -> bool:
        return approval.value == self.max_negative

    def is_max_positive(self, approval: PatchSetApproval) -> bool:
        return approval.value == self.max_positive


class LabelTypes:
    """
    Ordered collection of label types.

    Order is significant: the last type has the lowest priority and is the one
    used for placeholder approvals.
    """

    def __init__(self, label_types: Iterable[LabelType] = ()) -> None:
        self._types = tuple(label_types)
        self._by_id = {t.label_id.lower(): t for t in self._types}

    @property
    def label_types(self) -> tuple[LabelType, ...]:
        return self._types

    def by_label(self, label_id: str) -> LabelType | None:
        # Label ids are matched case-insensitively.
        return self._by_id.get(label_id.lower())

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"LabelTypes({[t.name for t in self._types]!r})"


def label_types_from_settings(settings: Settings) -> LabelTypes:
    return LabelTypes(
        LabelType(
            name=cfg.name,
            values=tuple(LabelValue(value=k, text=v) for k, v in cfg.values.items()),
            copy_min_score=cfg.copy_min_score,
            copy_max_score=cfg.copy_max_score,
            copy_all_scores_on_trivial_rebase=cfg.copy_all_scores_on_trivial_rebase,
            copy_all_scores_if_no_code_change=cfg.copy_all_scores_if_no_code_change,
        )
        for cfg in settings.labels
    )

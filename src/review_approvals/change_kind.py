"""
review_approvals.change_kind

How a new patch set relates to its predecessor.

Classification itself happens upstream (the caller compares trees/parents);
this module only names the outcomes.
"""

from __future__ import annotations

import enum


class ChangeKind(enum.StrEnum):
    # Values are accepted over the API; treat as stable contract.
    rework = "REWORK"
    trivial_rebase = "TRIVIAL_REBASE"
    no_code_change = "NO_CODE_CHANGE"

from __future__ import annotations

from review_approvals.db.models import PatchSetApproval
from review_approvals.labels import LabelType, LabelTypes, LabelValue, label_types_from_settings
from review_approvals.settings import LabelSettings, Settings


def test_values_are_sorted_and_bounded() -> None:
    label = LabelType("Verified", (LabelValue(1), LabelValue(-1), LabelValue(0)))
    assert [v.value for v in label.values] == [-1, 0, 1]
    assert label.max_negative == -1
    assert label.max_positive == 1

    vote = PatchSetApproval(change_id=1, patch_set_number=1, account_id=5, label_id="Verified", value=-1)
    assert label.is_max_negative(vote)
    assert not label.is_max_positive(vote)


def test_label_without_values() -> None:
    label = LabelType("Empty")
    assert label.max_negative == 0
    assert label.max_positive == 0


def test_lookup_by_label_id(label_types: LabelTypes) -> None:
    assert label_types.by_label("Code-Review") is label_types.label_types[0]
    assert label_types.by_label("code-review") is label_types.label_types[0]
    assert label_types.by_label("Library-Compliance") is None
    assert len(label_types) == 3


def test_default_settings_labels() -> None:
    types = label_types_from_settings(Settings())
    assert [t.name for t in types.label_types] == ["Code-Review", "Verified"]
    code_review = types.by_label("Code-Review")
    assert code_review is not None
    assert code_review.copy_min_score
    assert code_review.copy_all_scores_on_trivial_rebase
    assert not code_review.copy_max_score
    assert (code_review.max_negative, code_review.max_positive) == (-2, 2)


def test_configured_labels_keep_order() -> None:
    settings = Settings(
        labels=[
            LabelSettings(name="Verified", values={-1: "Fails", 1: "Ok"}),
            LabelSettings(name="Code-Style", values={0: "", 1: "Clean"}, copy_max_score=True),
        ]
    )
    types = label_types_from_settings(settings)
    assert [t.label_id for t in types.label_types] == ["Verified", "Code-Style"]
    assert types.label_types[-1].copy_max_score


def test_labels_from_environment(monkeypatch) -> None:
    monkeypatch.setenv(
        "RA_LABELS",
        '[{"name": "Verified", "values": {"-1": "Fails", "1": "Ok"}, '
        '"copy_all_scores_if_no_code_change": true}]',
    )
    types = label_types_from_settings(Settings())
    verified = types.by_label("Verified")
    assert verified is not None
    assert verified.max_negative == -1
    assert verified.copy_all_scores_if_no_code_change

"""검색/치환 패치 엔진의 단일 일치, 모호성, 미발견 처리를 검증합니다."""

from studio.schemas.mutation import PatchOperation
from studio.services.patch_engine import AMBIGUOUS_MATCH, SEARCH_NOT_FOUND, VALIDATION_ERROR, apply_patch


def test_unique_match_is_replaced_once():
    outcome = apply_patch("cat dog", [PatchOperation(search="cat", replace="mouse")])
    assert outcome.success
    assert outcome.body == "mouse dog"
    assert outcome.operations_applied == 1


def test_operations_run_in_order_against_running_body():
    outcome = apply_patch(
        "alpha beta",
        [
            {"search": "alpha", "replace": "gamma"},
            {"search": "gamma beta", "replace": "delta"},
        ],
    )
    assert outcome.success
    assert outcome.body == "delta"
    assert outcome.operations_applied == 2


def test_empty_replace_deletes_match():
    outcome = apply_patch("keep remove keep2", [{"search": " remove", "replace": ""}])
    assert outcome.body == "keep keep2"


def test_duplicate_match_is_ambiguous():
    outcome = apply_patch("cat cat", [{"search": "cat", "replace": "dog"}])
    assert not outcome.success
    assert outcome.error_code == AMBIGUOUS_MATCH
    assert outcome.body == "cat cat"
    assert "Operation 1 failed" in outcome.error


def test_overlapping_match_is_ambiguous():
    outcome = apply_patch("aaa", [{"search": "aa", "replace": "b"}])
    assert outcome.error_code == AMBIGUOUS_MATCH


def test_missing_search_reports_running_body():
    outcome = apply_patch(
        "A and C",
        [{"search": "A", "replace": "X"}, {"search": "B", "replace": "Y"}],
        read_tool="get_document",
    )
    assert not outcome.success
    assert outcome.error_code == SEARCH_NOT_FOUND
    assert outcome.operations_applied == 1
    assert outcome.body == "X and C"
    assert "Operation 2 failed" in outcome.error
    assert "get_document" in outcome.error


def test_empty_search_is_rejected():
    outcome = apply_patch("text", [{"search": "", "replace": "x"}])
    assert outcome.error_code == VALIDATION_ERROR


def test_none_body_is_treated_as_empty():
    outcome = apply_patch(None, [{"search": "x", "replace": "y"}])
    assert outcome.error_code == SEARCH_NOT_FOUND
    assert outcome.body == ""

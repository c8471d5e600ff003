"""정확히 일치하는 검색/치환 연산 목록을 본문에 원자적으로 적용합니다."""

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from studio.schemas.mutation import PatchOperation

SEARCH_NOT_FOUND = "search_not_found"
AMBIGUOUS_MATCH = "ambiguous_match"
VALIDATION_ERROR = "validation_error"


@dataclass(frozen=True)
class PatchOutcome:
    success: bool
    body: str
    operations_applied: int = 0
    error_code: Optional[str] = None
    error: Optional[str] = None


def _operation_parts(op: Union[PatchOperation, dict]) -> tuple:
    if isinstance(op, dict):
        return op["search"], op.get("replace", "")
    return op.search, op.replace


def apply_patch(body: Optional[str], operations: Iterable, *, subject: str = "content", read_tool: str = "the read tool") -> PatchOutcome:
    """연산을 순서대로 메모리 사본에 적용한다.

    하나라도 실패하면 그 시점의 작업 본문과 함께 실패를 돌려준다. 호출자는 실패 시
    아무것도 저장하지 않으므로 앞선 연산의 치환도 반영되지 않는다.
    """
    patched = body or ""
    applied = 0
    for index, op in enumerate(operations, start=1):
        search, replacement = _operation_parts(op)
        if not search:
            return PatchOutcome(
                success=False,
                body=patched,
                operations_applied=applied,
                error_code=VALIDATION_ERROR,
                error=f"Operation {index} failed: search string must not be empty.",
            )
        first = patched.find(search)
        if first == -1:
            return PatchOutcome(
                success=False,
                body=patched,
                operations_applied=applied,
                error_code=SEARCH_NOT_FOUND,
                error=(
                    f"Operation {index} failed: search string not found in {subject}. "
                    f"Call {read_tool} to see the current content and try again with the exact text."
                ),
            )
        # 겹치는 일치도 모호한 것으로 본다.
        if patched.find(search, first + 1) != -1:
            return PatchOutcome(
                success=False,
                body=patched,
                operations_applied=applied,
                error_code=AMBIGUOUS_MATCH,
                error=(
                    f"Operation {index} failed: search string matches multiple locations. "
                    "Include more surrounding context to uniquely identify the location."
                ),
            )
        patched = patched[:first] + replacement + patched[first + len(search):]
        applied += 1
    return PatchOutcome(success=True, body=patched, operations_applied=applied)

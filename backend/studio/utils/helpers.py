from datetime import datetime, timezone

from fastapi.responses import JSONResponse

# 결과 값으로 반환되는 실패를 HTTP 상태로 옮길 때 사용한다.
MUTATION_ERROR_STATUS = {
    "stale_context": 409,
    "structural_change_rejected": 409,
    "search_not_found": 422,
    "ambiguous_match": 422,
    "validation_error": 422,
}


def utcnow() -> datetime:
    # SQLite DateTime 컬럼은 naive 값을 저장하므로 UTC 기준 naive datetime으로 통일한다.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def iso_or_never(value) -> str:
    return value.isoformat() if value else "never"


def mutation_response(result):
    if result.success:
        return result
    status_code = MUTATION_ERROR_STATUS.get(result.error_code, 400)
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))

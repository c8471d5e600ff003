"""템플릿 필드 정의로부터 Pydantic 모델을 만들어 액티비티 데이터를 검증합니다."""

from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, ValidationError, create_model


class ImageValue(BaseModel):
    assetId: StrictStr
    imageId: StrictStr


class VideoValue(BaseModel):
    source: Literal["youtube", "vimeo", "upload"]
    url: StrictStr
    assetId: Optional[StrictStr] = None
    videoId: Optional[StrictStr] = None


def _get(field: Any, key: str):
    if isinstance(field, dict):
        return field.get(key)
    return getattr(field, key, None)


def _field_annotation(field: Any, path: str):
    field_type = _get(field, "type")
    if field_type in ("text", "textarea", "color"):
        return StrictStr
    if field_type == "number":
        return Annotated[float, Field(strict=True, ge=_get(field, "min"), le=_get(field, "max"))]
    if field_type == "checkbox":
        return StrictBool
    if field_type == "dropdown":
        options = _get(field, "options") or []
        if options:
            return Literal[tuple(options)]
        return StrictStr
    if field_type == "image":
        return Optional[ImageValue]
    if field_type == "video":
        return Optional[VideoValue]
    if field_type == "array":
        nested = _get(field, "fields") or []
        if nested:
            return List[build_data_model(nested, name=f"{path}Item")]
        return List[Any]
    return Any


def build_data_model(fields: Optional[List[Any]], *, name: str = "ActivityData") -> type:
    definitions: Dict[str, Tuple[Any, Any]] = {}
    for index, field in enumerate(fields or []):
        field_id = str(_get(field, "id"))
        annotation = _field_annotation(field, f"{name}_{index}")
        # 필드 ID가 파이썬 식별자가 아닐 수 있어 alias로 매핑한다.
        if _get(field, "required"):
            definitions[f"f_{index}"] = (annotation, Field(alias=field_id))
        else:
            definitions[f"f_{index}"] = (Optional[annotation], Field(default=None, alias=field_id))
    return create_model(name, __config__=ConfigDict(extra="ignore"), **definitions)


def validate_data_against_schema(data: Any, fields: Optional[List[Any]]) -> List[str]:
    """검증 오류 메시지 목록을 반환한다. 빈 목록이면 통과."""
    model = build_data_model(fields)
    try:
        model.model_validate(data if data is not None else {})
    except ValidationError as exc:
        errors = []
        for issue in exc.errors():
            location = ".".join(str(part) for part in issue.get("loc", ()))
            message = issue.get("msg", "invalid value")
            errors.append(f"{location}: {message}" if location else message)
        return errors
    return []

"""읽기/교체/패치 요청과 결과 값을 위한 Pydantic 스키마입니다."""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from studio.schemas.template import TemplateDependency, TemplateField

MutationErrorCode = Literal[
    "stale_context",
    "search_not_found",
    "ambiguous_match",
    "structural_change_rejected",
    "validation_error",
]


class PatchOperation(BaseModel):
    search: str = Field(min_length=1, description="Exact string to find. Must match exactly, including whitespace.")
    replace: str = Field(description="Replacement string. Empty string deletes the matched text.")


class DocumentReplace(BaseModel):
    content: str
    title: Optional[str] = Field(default=None, min_length=1)


class DocumentPatch(BaseModel):
    operations: List[PatchOperation] = Field(min_length=1)
    title: Optional[str] = Field(default=None, min_length=1)


class ActivityReplace(BaseModel):
    # 포함된 키만 기존 값을 대체한다.
    data: Optional[Dict[str, Any]] = None
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None


class TemplateReplace(BaseModel):
    component: str
    input_schema: Optional[List[TemplateField]] = None
    sample_data: Optional[Dict[str, Any]] = None
    dependencies: Optional[List[TemplateDependency]] = None
    tools: Optional[List[str]] = None


class TemplatePatch(BaseModel):
    operations: List[PatchOperation] = Field(min_length=1)
    input_schema: Optional[List[TemplateField]] = None
    sample_data: Optional[Dict[str, Any]] = None
    dependencies: Optional[List[TemplateDependency]] = None
    tools: Optional[List[str]] = None


class ActivityMigrate(BaseModel):
    data: Dict[str, Any]


class MutationResult(BaseModel):
    """쓰기 결과. 에이전트가 읽고 복구할 수 있도록 실패도 예외가 아닌 값으로 반환한다."""

    success: bool
    error_code: Optional[MutationErrorCode] = None
    error: Optional[str] = None
    current_content: Optional[str] = None
    operations_applied: Optional[int] = None
    content_length: Optional[int] = None
    schema_version: Optional[int] = None
    warnings: List[str] = Field(default_factory=list)

    @classmethod
    def ok(cls, **kwargs) -> "MutationResult":
        return cls(success=True, **kwargs)

    @classmethod
    def fail(cls, error_code: str, error: str, **kwargs) -> "MutationResult":
        return cls(success=False, error_code=error_code, error=error, **kwargs)


class ContentOut(BaseModel):
    kind: str
    record_id: int
    title: Optional[str] = None
    content: Any = None
    extra: Dict[str, Any] = Field(default_factory=dict)
    content_read_at: Optional[datetime] = None


class ActivityTemplateOut(BaseModel):
    activity_id: int
    template_id: int
    template_name: str
    activity_name: str
    activity_description: Optional[str] = None
    current_data: Dict[str, Any]
    input_schema: Optional[List[Dict[str, Any]]] = None
    component: Optional[str] = None
    sample_data: Optional[Dict[str, Any]] = None
    data_schema_version: int
    latest_template_version: int
    upgrade_available: bool

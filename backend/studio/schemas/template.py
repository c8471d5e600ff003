"""템플릿과 스키마 버전 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

FieldType = Literal["text", "textarea", "dropdown", "checkbox", "number", "color", "array", "image", "video"]
TemplateKind = Literal["activity", "interface"]


class TemplateField(BaseModel):
    id: str = Field(min_length=1)
    type: FieldType
    label: str = ""
    required: bool = False
    placeholder: Optional[str] = None
    options: Optional[List[str]] = None
    default: Any = None
    min: Optional[float] = None
    max: Optional[float] = None
    fields: Optional[List[TemplateField]] = None


class TemplateDependency(BaseModel):
    name: str
    url: str
    global_name: str = Field(alias="global")

    model_config = {"populate_by_name": True}


class TemplateCreate(BaseModel):
    kind: TemplateKind = "activity"
    name: str = Field(min_length=1)
    description: Optional[str] = ""
    input_schema: List[TemplateField] = Field(default_factory=list)
    component: Optional[str] = None
    sample_data: Optional[Dict[str, Any]] = None
    dependencies: List[TemplateDependency] = Field(default_factory=list)
    tools: List[str] = Field(default_factory=list)


class TemplateUpdate(BaseModel):
    """사람이 직접 수정하는 메타데이터 경로. 스키마/컴포넌트는 content 경로를 사용한다."""

    kind: Optional[TemplateKind] = None
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    status: Optional[Literal["draft", "published"]] = None
    messages: Optional[List[Dict[str, Any]]] = None


class TemplateOut(BaseModel):
    template_id: int
    kind: str
    name: str
    description: Optional[str] = None
    input_schema: Optional[List[Dict[str, Any]]] = None
    component: Optional[str] = None
    sample_data: Optional[Dict[str, Any]] = None
    dependencies: Optional[List[Dict[str, Any]]] = None
    tools: Optional[List[str]] = None
    messages: Optional[List[Dict[str, Any]]] = None
    thumbnail: Optional[str] = None
    status: str
    schema_version: int
    content_modified_at: Optional[datetime] = None
    content_read_at: Optional[datetime] = None
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


class TemplateSchemaUpdate(BaseModel):
    fields: List[TemplateField]


class TemplateVersionCreate(BaseModel):
    """구조적 변경을 새 버전으로 기록하는 권한 경로의 입력."""

    input_schema: List[TemplateField]
    component: Optional[str] = None
    sample_data: Optional[Dict[str, Any]] = None
    dependencies: Optional[List[TemplateDependency]] = None
    tools: Optional[List[str]] = None


class TemplateVersionSummary(BaseModel):
    version: int
    created_at: Optional[datetime]


class TemplateVersionListOut(BaseModel):
    template_id: int
    current_version: int
    versions: List[TemplateVersionSummary]


class TemplateVersionOut(BaseModel):
    template_id: int
    version: int
    input_schema: Optional[List[Dict[str, Any]]] = None
    component: Optional[str] = None
    sample_data: Optional[Dict[str, Any]] = None
    dependencies: Optional[List[Dict[str, Any]]] = None
    tools: Optional[List[str]] = None
    created_at: Optional[datetime] = None
    is_latest_version: bool
    latest_version: int

"""Course Section/Activity 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Optional, List, Any, Dict
from datetime import datetime


class CourseSectionCreate(BaseModel):
    title: str = Field(min_length=1)
    sort_order: int = 0


class CourseSectionOut(CourseSectionCreate):
    section_id: int
    created_at: Optional[datetime]

    model_config = {"from_attributes": True}


class ActivityCreate(BaseModel):
    template_id: int
    name: str = Field(min_length=1)
    description: Optional[str] = ""
    data: Optional[Dict[str, Any]] = None
    sort_order: int = 0


class ActivityUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    sort_order: Optional[int] = None
    messages: Optional[List[Dict[str, Any]]] = None


class ActivityOut(BaseModel):
    activity_id: int
    section_id: int
    template_id: int
    name: str
    description: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    messages: Optional[List[Dict[str, Any]]] = None
    data_schema_version: int
    content_modified_at: Optional[datetime] = None
    content_read_at: Optional[datetime] = None
    sort_order: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}

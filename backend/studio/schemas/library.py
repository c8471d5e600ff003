"""Library/Document 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Optional, List, Any, Dict
from datetime import datetime


class LibraryBase(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = ""


class LibraryCreate(LibraryBase):
    pass


class LibraryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None


class LibraryOut(LibraryBase):
    library_id: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


class DocumentBase(BaseModel):
    title: str = Field(min_length=1)
    source_type: str = "text"
    body: str = ""


class DocumentCreate(DocumentBase):
    pass


class DocumentUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    body: Optional[str] = None
    summary: Optional[str] = None
    # 빈 리스트를 보내면 대화 이력과 staleness 타임스탬프가 함께 초기화된다.
    messages: Optional[List[Dict[str, Any]]] = None


class DocumentOut(DocumentBase):
    doc_id: int
    library_id: int
    summary: Optional[str] = None
    status: str
    messages: Optional[List[Dict[str, Any]]] = None
    content_modified_at: Optional[datetime] = None
    content_read_at: Optional[datetime] = None
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}

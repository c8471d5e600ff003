"""문서/액티비티/템플릿을 하나의 콘텐츠 레코드 인터페이스로 다루기 위한 접근자입니다."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from studio.database import Base
from studio.models.course import Activity
from studio.models.library import Document
from studio.models.template import Template
from studio.services.staleness_guard import ContentStamps


@dataclass(frozen=True)
class ContentAccessor:
    kind: str
    model: type
    id_attr: str
    content_attr: str
    title_attr: str
    subject: str
    read_tool: str
    not_found_detail: str
    text_content: bool = True

    def get(self, db: Session, record_id: int) -> Base:
        row = db.query(self.model).filter(getattr(self.model, self.id_attr) == record_id).first()
        if not row:
            raise HTTPException(status_code=404, detail=self.not_found_detail)
        return row

    def record_id(self, row) -> int:
        return getattr(row, self.id_attr)

    def get_body(self, row) -> Any:
        return getattr(row, self.content_attr)

    def set_body(self, row, value: Any) -> None:
        setattr(row, self.content_attr, value)

    def get_title(self, row) -> Optional[str]:
        return getattr(row, self.title_attr)

    def set_title(self, row, value: str) -> None:
        setattr(row, self.title_attr, value)

    def get_stamps(self, row) -> ContentStamps:
        return ContentStamps(modified_at=row.content_modified_at, read_at=row.content_read_at)

    def set_stamps(self, row, stamps: ContentStamps) -> None:
        row.content_modified_at = stamps.modified_at
        row.content_read_at = stamps.read_at


DOCUMENT = ContentAccessor(
    kind="document",
    model=Document,
    id_attr="doc_id",
    content_attr="body",
    title_attr="title",
    subject="Document",
    read_tool="get_document",
    not_found_detail="문서를 찾을 수 없습니다.",
)

ACTIVITY = ContentAccessor(
    kind="activity",
    model=Activity,
    id_attr="activity_id",
    content_attr="data",
    title_attr="name",
    subject="Activity data",
    read_tool="get_template",
    not_found_detail="액티비티를 찾을 수 없습니다.",
    text_content=False,
)

TEMPLATE = ContentAccessor(
    kind="template",
    model=Template,
    id_attr="template_id",
    content_attr="component",
    title_attr="name",
    subject="Template",
    read_tool="get_template",
    not_found_detail="템플릿을 찾을 수 없습니다.",
)

ACCESSORS: Dict[str, ContentAccessor] = {
    DOCUMENT.kind: DOCUMENT,
    ACTIVITY.kind: ACTIVITY,
    TEMPLATE.kind: TEMPLATE,
}


def get_accessor(kind: str) -> ContentAccessor:
    accessor = ACCESSORS.get(kind)
    if accessor is None:
        raise HTTPException(status_code=404, detail="지원하지 않는 콘텐츠 종류입니다.")
    return accessor

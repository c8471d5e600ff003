"""템플릿 도메인 서비스 레이어입니다. 생성 시 버전 1 스냅샷을 함께 기록합니다."""

from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from studio.models.course import Activity
from studio.models.template import Template
from studio.schemas.template import TemplateCreate, TemplateUpdate
from studio.services import version_service
from studio.services.content_records import TEMPLATE
from studio.services.mutation_service import MutationService, dump_dependencies, dump_fields


def get_templates(db: Session, kind: str = None) -> List[Template]:
    q = db.query(Template)
    if kind:
        q = q.filter(Template.kind == kind)
    return q.order_by(Template.created_at.desc()).all()


def get_template(db: Session, template_id: int) -> Template:
    return TEMPLATE.get(db, template_id)


def create_template(db: Session, data: TemplateCreate) -> Template:
    row = Template(
        kind=data.kind,
        name=data.name,
        description=data.description,
        input_schema=dump_fields(data.input_schema),
        component=data.component,
        sample_data=data.sample_data,
        dependencies=dump_dependencies(data.dependencies),
        tools=list(data.tools),
        status="draft",
        schema_version=1,
    )
    db.add(row)
    db.flush()
    version_service.SqlVersionStore(db).create_initial_version(
        row.template_id, version_service.versioned_fields_of(row),
    )
    db.commit()
    db.refresh(row)
    return row


def update_template(db: Session, template_id: int, data: TemplateUpdate) -> Template:
    row = get_template(db, template_id)
    payload = data.model_dump(exclude_none=True)
    messages = payload.pop("messages", None)
    for k, v in payload.items():
        setattr(row, k, v)
    if messages is not None:
        MutationService(db).apply_messages(TEMPLATE.kind, row, messages)
    db.commit()
    db.refresh(row)
    return row


def delete_template(db: Session, template_id: int):
    row = get_template(db, template_id)
    in_use = db.query(Activity.activity_id).filter(Activity.template_id == template_id).first()
    if in_use:
        raise HTTPException(status_code=409, detail="이 템플릿을 사용하는 액티비티가 있어 삭제할 수 없습니다.")
    db.delete(row)
    db.commit()

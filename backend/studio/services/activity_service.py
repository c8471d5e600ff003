"""Course Section/Activity 도메인 서비스 레이어입니다. 액티비티 생성 시 템플릿 스키마 버전에 바인딩합니다."""

import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from studio.models.course import CourseSection, Activity
from studio.models.template import Template
from studio.schemas.course import CourseSectionCreate, ActivityCreate, ActivityUpdate
from studio.services.content_records import ACTIVITY, TEMPLATE
from studio.services.mutation_service import MutationService

logger = logging.getLogger(__name__)


def get_sections(db: Session) -> List[CourseSection]:
    return db.query(CourseSection).order_by(CourseSection.sort_order, CourseSection.section_id).all()


def get_section(db: Session, section_id: int) -> CourseSection:
    row = db.query(CourseSection).filter(CourseSection.section_id == section_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="섹션을 찾을 수 없습니다.")
    return row


def create_section(db: Session, data: CourseSectionCreate) -> CourseSection:
    row = CourseSection(**data.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def delete_section(db: Session, section_id: int):
    row = get_section(db, section_id)
    db.delete(row)
    db.commit()


def get_activities(db: Session, section_id: int) -> List[Activity]:
    get_section(db, section_id)
    return (
        db.query(Activity)
        .filter(Activity.section_id == section_id)
        .order_by(Activity.sort_order, Activity.activity_id)
        .all()
    )


def get_activity(db: Session, activity_id: int) -> Activity:
    return ACTIVITY.get(db, activity_id)


def create_activity(db: Session, section_id: int, data: ActivityCreate) -> Activity:
    get_section(db, section_id)
    template: Template = TEMPLATE.get(db, data.template_id)
    payload = data.model_dump()
    if payload.get("data") is None:
        payload["data"] = dict(template.sample_data or {})
    # 생성 시점의 템플릿 스키마 버전에 고정한다. 이후에는 명시적 마이그레이션으로만 올라간다.
    row = Activity(section_id=section_id, data_schema_version=template.schema_version or 1, **payload)
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info(
        "[activity] created activity=%s bound to template=%s version=%s",
        row.activity_id,
        template.template_id,
        row.data_schema_version,
    )
    return row


def update_activity(db: Session, activity_id: int, data: ActivityUpdate) -> Activity:
    row = get_activity(db, activity_id)
    payload = data.model_dump(exclude_none=True)
    messages = payload.pop("messages", None)
    for k, v in payload.items():
        setattr(row, k, v)
    if messages is not None:
        MutationService(db).apply_messages(ACTIVITY.kind, row, messages)
    db.commit()
    db.refresh(row)
    return row


def delete_activity(db: Session, activity_id: int):
    row = get_activity(db, activity_id)
    db.delete(row)
    db.commit()

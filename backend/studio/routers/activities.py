"""Course Sections/Activities 기능 API 라우터입니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from studio.database import get_db
from studio.schemas.course import CourseSectionCreate, CourseSectionOut, ActivityCreate, ActivityUpdate, ActivityOut
from studio.schemas.mutation import ActivityMigrate, ActivityReplace, ActivityTemplateOut, ContentOut, MutationResult
from studio.services import activity_service
from studio.services.mutation_service import MutationService
from studio.utils.helpers import mutation_response

router = APIRouter(tags=["activities"])


@router.get("/api/sections", response_model=List[CourseSectionOut])
def list_sections(db: Session = Depends(get_db)):
    return activity_service.get_sections(db)


@router.post("/api/sections", response_model=CourseSectionOut)
def create_section(data: CourseSectionCreate, db: Session = Depends(get_db)):
    return activity_service.create_section(db, data)


@router.delete("/api/sections/{section_id}")
def delete_section(section_id: int, db: Session = Depends(get_db)):
    activity_service.delete_section(db, section_id)
    return {"message": "삭제되었습니다."}


@router.get("/api/sections/{section_id}/activities", response_model=List[ActivityOut])
def list_activities(section_id: int, db: Session = Depends(get_db)):
    return activity_service.get_activities(db, section_id)


@router.post("/api/sections/{section_id}/activities", response_model=ActivityOut)
def create_activity(section_id: int, data: ActivityCreate, db: Session = Depends(get_db)):
    return activity_service.create_activity(db, section_id, data)


@router.get("/api/activities/{activity_id}", response_model=ActivityOut)
def get_activity(activity_id: int, db: Session = Depends(get_db)):
    return activity_service.get_activity(db, activity_id)


@router.patch("/api/activities/{activity_id}", response_model=ActivityOut)
def update_activity(activity_id: int, data: ActivityUpdate, db: Session = Depends(get_db)):
    return activity_service.update_activity(db, activity_id, data)


@router.delete("/api/activities/{activity_id}")
def delete_activity(activity_id: int, db: Session = Depends(get_db)):
    activity_service.delete_activity(db, activity_id)
    return {"message": "삭제되었습니다."}


@router.get("/api/activities/{activity_id}/content", response_model=ContentOut)
def get_activity_content(activity_id: int, db: Session = Depends(get_db)):
    return MutationService(db).read("activity", activity_id)


@router.put("/api/activities/{activity_id}/content", response_model=MutationResult)
def replace_activity_content(activity_id: int, data: ActivityReplace, db: Session = Depends(get_db)):
    return mutation_response(MutationService(db).replace_activity(activity_id, data))


@router.get("/api/activities/{activity_id}/template", response_model=ActivityTemplateOut)
def get_template_for_activity(activity_id: int, db: Session = Depends(get_db)):
    return MutationService(db).get_template_for_activity(activity_id)


@router.post("/api/activities/{activity_id}/migrate", response_model=MutationResult)
def migrate_activity(activity_id: int, data: ActivityMigrate, db: Session = Depends(get_db)):
    return mutation_response(MutationService(db).migrate_activity(activity_id, data.data))

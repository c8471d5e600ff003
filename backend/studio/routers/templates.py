"""Templates 기능 API 라우터입니다. 컴포넌트 편집, 스키마 변경, 버전 이력 조회를 제공합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from studio.database import get_db
from studio.schemas.mutation import ContentOut, MutationResult, TemplatePatch, TemplateReplace
from studio.schemas.template import (
    TemplateCreate, TemplateUpdate, TemplateOut,
    TemplateSchemaUpdate, TemplateVersionCreate, TemplateVersionListOut, TemplateVersionOut,
)
from studio.services import template_service
from studio.services.mutation_service import MutationService
from studio.utils.helpers import mutation_response

router = APIRouter(tags=["templates"])


@router.get("/api/templates", response_model=List[TemplateOut])
def list_templates(kind: Optional[str] = None, db: Session = Depends(get_db)):
    return template_service.get_templates(db, kind)


@router.post("/api/templates", response_model=TemplateOut)
def create_template(data: TemplateCreate, db: Session = Depends(get_db)):
    return template_service.create_template(db, data)


@router.get("/api/templates/{template_id}", response_model=TemplateOut)
def get_template(template_id: int, db: Session = Depends(get_db)):
    return template_service.get_template(db, template_id)


@router.patch("/api/templates/{template_id}", response_model=TemplateOut)
def update_template(template_id: int, data: TemplateUpdate, db: Session = Depends(get_db)):
    return template_service.update_template(db, template_id, data)


@router.delete("/api/templates/{template_id}")
def delete_template(template_id: int, db: Session = Depends(get_db)):
    template_service.delete_template(db, template_id)
    return {"message": "삭제되었습니다."}


@router.get("/api/templates/{template_id}/content", response_model=ContentOut)
def get_template_content(template_id: int, db: Session = Depends(get_db)):
    return MutationService(db).read("template", template_id)


@router.put("/api/templates/{template_id}/content", response_model=MutationResult)
def replace_template_content(template_id: int, data: TemplateReplace, db: Session = Depends(get_db)):
    return mutation_response(MutationService(db).replace_template(template_id, data))


@router.post("/api/templates/{template_id}/patch", response_model=MutationResult)
def patch_template_content(template_id: int, data: TemplatePatch, db: Session = Depends(get_db)):
    return mutation_response(MutationService(db).patch_template(template_id, data))


@router.patch("/api/templates/{template_id}/schema", response_model=MutationResult)
def update_template_schema(template_id: int, data: TemplateSchemaUpdate, db: Session = Depends(get_db)):
    return mutation_response(MutationService(db).update_schema(template_id, data.fields))


@router.get("/api/templates/{template_id}/versions", response_model=TemplateVersionListOut)
def list_template_versions(template_id: int, db: Session = Depends(get_db)):
    return MutationService(db).list_versions(template_id)


@router.post("/api/templates/{template_id}/versions", response_model=MutationResult)
def create_template_version(template_id: int, data: TemplateVersionCreate, db: Session = Depends(get_db)):
    return mutation_response(MutationService(db).create_version(template_id, data))


@router.get("/api/templates/{template_id}/versions/{version}", response_model=TemplateVersionOut)
def get_template_version(template_id: int, version: int, db: Session = Depends(get_db)):
    return MutationService(db).get_version(template_id, version)

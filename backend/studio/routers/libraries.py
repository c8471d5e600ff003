"""Libraries/Documents 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from studio.database import get_db
from studio.schemas.library import (
    LibraryCreate, LibraryUpdate, LibraryOut,
    DocumentCreate, DocumentUpdate, DocumentOut,
)
from studio.schemas.mutation import ContentOut, DocumentReplace, DocumentPatch, MutationResult
from studio.services import library_service
from studio.services.mutation_service import MutationService
from studio.utils.helpers import mutation_response

router = APIRouter(tags=["libraries"])


@router.get("/api/libraries", response_model=List[LibraryOut])
def list_libraries(db: Session = Depends(get_db)):
    return library_service.get_libraries(db)


@router.post("/api/libraries", response_model=LibraryOut)
def create_library(data: LibraryCreate, db: Session = Depends(get_db)):
    return library_service.create_library(db, data)


@router.get("/api/libraries/{library_id}", response_model=LibraryOut)
def get_library(library_id: int, db: Session = Depends(get_db)):
    return library_service.get_library(db, library_id)


@router.patch("/api/libraries/{library_id}", response_model=LibraryOut)
def update_library(library_id: int, data: LibraryUpdate, db: Session = Depends(get_db)):
    return library_service.update_library(db, library_id, data)


@router.delete("/api/libraries/{library_id}")
def delete_library(library_id: int, db: Session = Depends(get_db)):
    library_service.delete_library(db, library_id)
    return {"message": "삭제되었습니다."}


@router.get("/api/libraries/{library_id}/documents", response_model=List[DocumentOut])
def list_documents(library_id: int, db: Session = Depends(get_db)):
    return library_service.get_documents(db, library_id)


@router.post("/api/libraries/{library_id}/documents", response_model=DocumentOut)
def create_document(library_id: int, data: DocumentCreate, db: Session = Depends(get_db)):
    return library_service.create_document(db, library_id, data)


@router.get("/api/documents/{doc_id}", response_model=DocumentOut)
def get_document(doc_id: int, db: Session = Depends(get_db)):
    return library_service.get_document(db, doc_id)


@router.patch("/api/documents/{doc_id}", response_model=DocumentOut)
def update_document(doc_id: int, data: DocumentUpdate, db: Session = Depends(get_db)):
    return library_service.update_document(db, doc_id, data)


@router.delete("/api/documents/{doc_id}")
def delete_document(doc_id: int, db: Session = Depends(get_db)):
    library_service.delete_document(db, doc_id)
    return {"message": "삭제되었습니다."}


@router.get("/api/documents/{doc_id}/content", response_model=ContentOut)
def get_document_content(doc_id: int, db: Session = Depends(get_db)):
    return MutationService(db).read("document", doc_id)


@router.put("/api/documents/{doc_id}/content", response_model=MutationResult)
def replace_document_content(doc_id: int, data: DocumentReplace, db: Session = Depends(get_db)):
    result = MutationService(db).replace("document", doc_id, data.content, title=data.title)
    return mutation_response(result)


@router.post("/api/documents/{doc_id}/patch", response_model=MutationResult)
def patch_document_content(doc_id: int, data: DocumentPatch, db: Session = Depends(get_db)):
    result = MutationService(db).patch("document", doc_id, data.operations, title=data.title)
    return mutation_response(result)

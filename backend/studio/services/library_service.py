"""Library/Document 도메인 서비스 레이어입니다. 사람이 직접 수행하는 CRUD 흐름을 캡슐화합니다."""

from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from studio.models.library import Library, Document
from studio.schemas.library import LibraryCreate, LibraryUpdate, DocumentCreate, DocumentUpdate
from studio.services.content_records import DOCUMENT
from studio.services.mutation_service import MutationService


def get_libraries(db: Session) -> List[Library]:
    return db.query(Library).order_by(Library.created_at.desc()).all()


def get_library(db: Session, library_id: int) -> Library:
    row = db.query(Library).filter(Library.library_id == library_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="라이브러리를 찾을 수 없습니다.")
    return row


def create_library(db: Session, data: LibraryCreate) -> Library:
    row = Library(**data.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_library(db: Session, library_id: int, data: LibraryUpdate) -> Library:
    row = get_library(db, library_id)
    for k, v in data.model_dump(exclude_none=True).items():
        setattr(row, k, v)
    db.commit()
    db.refresh(row)
    return row


def delete_library(db: Session, library_id: int):
    row = get_library(db, library_id)
    db.delete(row)
    db.commit()


def get_documents(db: Session, library_id: int) -> List[Document]:
    get_library(db, library_id)
    return (
        db.query(Document)
        .filter(Document.library_id == library_id)
        .order_by(Document.created_at.desc())
        .all()
    )


def get_document(db: Session, doc_id: int) -> Document:
    return DOCUMENT.get(db, doc_id)


def create_document(db: Session, library_id: int, data: DocumentCreate) -> Document:
    get_library(db, library_id)
    doc = Document(library_id=library_id, status="ready", **data.model_dump())
    db.add(doc)
    db.commit()
    db.refresh(doc)
    return doc


def update_document(db: Session, doc_id: int, data: DocumentUpdate) -> Document:
    doc = get_document(db, doc_id)
    service = MutationService(db)
    payload = data.model_dump(exclude_none=True)
    messages = payload.pop("messages", None)
    for k, v in payload.items():
        setattr(doc, k, v)
    if "body" in payload:
        service.record_external_write(DOCUMENT.kind, doc)
    if messages is not None:
        service.apply_messages(DOCUMENT.kind, doc, messages)
    db.commit()
    db.refresh(doc)
    return doc


def delete_document(db: Session, doc_id: int):
    doc = get_document(db, doc_id)
    db.delete(doc)
    db.commit()

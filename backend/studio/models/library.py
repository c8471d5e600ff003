"""라이브러리/문서 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from studio.database import Base


class Library(Base):
    __tablename__ = "library"

    library_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, default="")
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    documents = relationship("Document", back_populates="library", cascade="all, delete-orphan")


class Document(Base):
    __tablename__ = "document"

    doc_id = Column(Integer, primary_key=True, autoincrement=True)
    library_id = Column(Integer, ForeignKey("library.library_id"), nullable=False)
    title = Column(String(200), nullable=False)
    source_type = Column(String(20), nullable=False, default="text")  # text/pdf/docx/pptx/txt
    body = Column(Text, nullable=False, default="")
    summary = Column(Text)
    status = Column(String(20), nullable=False, default="ready")  # processing/ready/error
    messages = Column(JSON)  # 에이전트 대화 이력
    content_modified_at = Column(DateTime)  # 추적되는 쓰기가 없었으면 NULL
    content_read_at = Column(DateTime)  # 마지막 수정 이후 읽지 않았으면 NULL
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    library = relationship("Library", back_populates="documents")

    __table_args__ = (
        Index("idx_document_library", "library_id", "created_at"),
    )

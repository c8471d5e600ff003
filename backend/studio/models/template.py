"""컴포넌트 템플릿과 스키마 버전 스냅샷의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from studio.database import Base


class Template(Base):
    __tablename__ = "template"

    template_id = Column(Integer, primary_key=True, autoincrement=True)
    kind = Column(String(20), nullable=False, default="activity")  # activity/interface
    name = Column(String(200), nullable=False)
    description = Column(Text, default="")
    input_schema = Column(JSON)  # [{id, type, label, required, fields, ...}]
    component = Column(Text)  # 생성된 컴포넌트 소스
    sample_data = Column(JSON)
    dependencies = Column(JSON)  # [{name, url, global}]
    tools = Column(JSON)  # ["code-editor"]
    messages = Column(JSON)
    thumbnail = Column(Text)
    status = Column(String(20), nullable=False, default="draft")  # draft/published
    # 구조적 스키마 변경 시에만 증가한다.
    schema_version = Column(Integer, nullable=False, default=1)
    content_modified_at = Column(DateTime)
    content_read_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    activities = relationship("Activity", back_populates="template")
    versions = relationship("TemplateVersion", back_populates="template", cascade="all, delete-orphan")


class TemplateVersion(Base):
    __tablename__ = "template_version"

    version_id = Column(Integer, primary_key=True, autoincrement=True)
    template_id = Column(Integer, ForeignKey("template.template_id"), nullable=False)
    version = Column(Integer, nullable=False)
    input_schema = Column(JSON)
    component = Column(Text)
    sample_data = Column(JSON)
    dependencies = Column(JSON)
    tools = Column(JSON)
    created_at = Column(DateTime, server_default=func.now())

    template = relationship("Template", back_populates="versions")

    __table_args__ = (
        UniqueConstraint("template_id", "version", name="uq_template_version"),
        Index("idx_template_version_template", "template_id", "version"),
    )

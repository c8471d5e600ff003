"""코스 섹션/액티비티 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from studio.database import Base


class CourseSection(Base):
    __tablename__ = "course_section"

    section_id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    activities = relationship("Activity", back_populates="section", cascade="all, delete-orphan")


class Activity(Base):
    __tablename__ = "activity"

    activity_id = Column(Integer, primary_key=True, autoincrement=True)
    section_id = Column(Integer, ForeignKey("course_section.section_id"), nullable=False)
    template_id = Column(Integer, ForeignKey("template.template_id", ondelete="RESTRICT"), nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text, default="")
    data = Column(JSON)  # 템플릿 input_schema 필드 ID를 키로 하는 값
    messages = Column(JSON)
    # 생성(또는 마지막 마이그레이션) 시점의 template.schema_version. 템플릿 현재 버전보다 클 수 없다.
    data_schema_version = Column(Integer, nullable=False, default=1)
    content_modified_at = Column(DateTime)
    content_read_at = Column(DateTime)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    section = relationship("CourseSection", back_populates="activities")
    template = relationship("Template", back_populates="activities")

    __table_args__ = (
        Index("idx_activity_section", "section_id", "sort_order"),
        Index("idx_activity_template", "template_id", "data_schema_version"),
    )

"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from studio.models.library import Library, Document
from studio.models.course import CourseSection, Activity
from studio.models.template import Template, TemplateVersion

__all__ = [
    "Library", "Document",
    "CourseSection", "Activity",
    "Template", "TemplateVersion",
]

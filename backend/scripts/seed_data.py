"""Seed the database with sample content."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from studio.database import SessionLocal, engine, Base
import studio.models  # noqa: F401

from studio.models.library import Library, Document
from studio.models.course import CourseSection, Activity
from studio.models.template import Template
from studio.schemas.template import TemplateCreate
from studio.services import template_service

QUIZ_COMPONENT = """<template>
  <div class="quiz">
    <h2>{{ data.question }}</h2>
    <ul>
      <li v-for="choice in data.choices" :key="choice.text">{{ choice.text }}</li>
    </ul>
  </div>
</template>
"""


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(Template).count() > 0:
            print("Database already seeded. Skipping.")
            return

        library = Library(name="온보딩 자료", description="신규 입사자 교육용 문서 모음")
        db.add(library)
        db.flush()
        documents = [
            Document(library_id=library.library_id, title="회사 소개", body="# 회사 소개\n\n우리 회사는...", status="ready"),
            Document(library_id=library.library_id, title="업무 도구 안내", body="# 업무 도구\n\n- 메신저\n- 위키", status="ready"),
        ]
        db.add_all(documents)
        db.commit()

        # 템플릿 생성 시 버전 1 스냅샷도 함께 기록된다.
        quiz = template_service.create_template(db, TemplateCreate(
            name="객관식 퀴즈",
            description="질문 하나와 선택지 목록",
            input_schema=[
                {"id": "question", "type": "text", "label": "질문", "required": True},
                {
                    "id": "choices",
                    "type": "array",
                    "label": "선택지",
                    "fields": [
                        {"id": "text", "type": "text", "label": "내용"},
                        {"id": "correct", "type": "checkbox", "label": "정답"},
                    ],
                },
            ],
            component=QUIZ_COMPONENT,
            sample_data={"question": "2 + 2는?", "choices": [{"text": "4", "correct": True}]},
        ))

        section = CourseSection(title="1주차", sort_order=0)
        db.add(section)
        db.flush()
        activities = [
            Activity(section_id=section.section_id, template_id=quiz.template_id, name="첫 번째 퀴즈",
                     data=dict(quiz.sample_data), data_schema_version=quiz.schema_version),
        ]
        db.add_all(activities)
        db.commit()

        print("Seed data created successfully!")
        print(f"  Library: 1 (ID={library.library_id})")
        print(f"  Documents: {len(documents)}")
        print(f"  Templates: 1 (ID={quiz.template_id}, version={quiz.schema_version})")
        print(f"  Activities: {len(activities)}")

    except Exception as e:
        db.rollback()
        raise e
    finally:
        db.close()


if __name__ == "__main__":
    seed()

"""FastAPI 애플리케이션 진입점. 미들웨어, 로깅, API 라우터를 등록합니다."""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from studio.config import settings
from studio.database import Base, engine
import studio.models  # noqa: F401 - 모델 import로 metadata 등록
from studio.routers import libraries, activities, templates, agent

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(
    title="Content Studio",
    description="문서/액티비티/컴포넌트 템플릿을 사람과 에이전트가 함께 편집하는 콘텐츠 저작 백엔드",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
app.include_router(libraries.router)
app.include_router(activities.router)
app.include_router(templates.router)
app.include_router(agent.router)


@app.on_event("startup")
def ensure_schema():
    # 신규 기능 배포 시 누락된 테이블을 자동 생성합니다.
    Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "Content Studio"}

"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./content_studio.db"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Logging
    LOG_LEVEL: str = "INFO"

    # [agent] 한 턴에서 에이전트 루프가 실행할 수 있는 최대 도구 호출 횟수 (루프는 외부 협력자)
    AGENT_MAX_TOOL_STEPS: int = 10
    # [agent] 읽기 이후 변경 여부를 검사하는 낙관적 동시성 제어. 운영에서는 항상 켜둔다.
    STALE_CONTEXT_CHECK_ENABLED: bool = True

    class Config:
        # 실행 cwd와 무관하게 backend/.env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()

"""서비스 레이어 패키지 초기화 모듈입니다."""

from studio.services import (
    staleness_guard,
    patch_engine,
    schema_differ,
    schema_validation,
    version_service,
    mutation_service,
    library_service,
    activity_service,
    template_service,
    agent_tools,
)

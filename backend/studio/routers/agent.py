"""에이전트 도구 목록/실행 API 라우터입니다. 실패도 200으로 돌려 에이전트가 본문을 읽게 한다."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from studio.database import get_db
from studio.services import agent_tools
from studio.services.mutation_service import MutationService

router = APIRouter(prefix="/api/agent", tags=["agent"])


@router.get("/{kind}/{record_id}/tools")
def list_agent_tools(kind: str, record_id: int):
    return agent_tools.list_tools(kind)


@router.post("/{kind}/{record_id}/tools/{tool_name}")
def execute_agent_tool(
    kind: str,
    record_id: int,
    tool_name: str,
    arguments: Optional[Dict[str, Any]] = Body(default=None),
    db: Session = Depends(get_db),
):
    return agent_tools.execute_tool(db, kind, record_id, tool_name, arguments)


@router.delete("/{kind}/{record_id}/messages")
def clear_agent_history(kind: str, record_id: int, db: Session = Depends(get_db)):
    MutationService(db).clear_history(kind, record_id)
    return {"message": "대화 이력을 초기화했습니다."}

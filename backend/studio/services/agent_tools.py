"""에이전트 도구 정의와 실행 디스패치입니다.

에이전트 루프(모델 호출, 스트리밍)는 외부 협력자이며, 여기서는 레코드 종류별 도구 목록과
JSON 스키마를 제공하고 호출을 MutationService로 위임한다. 실패는 항상 결과 값으로 돌려준다.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from fastapi import HTTPException
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.orm import Session

from studio.config import settings
from studio.schemas.mutation import ActivityReplace, MutationResult, PatchOperation, TemplatePatch, TemplateReplace
from studio.schemas.template import TemplateDependency, TemplateField, TemplateVersionCreate
from studio.services.mutation_service import MutationService

logger = logging.getLogger(__name__)


class NoArgs(BaseModel):
    pass


class UpdateDocumentArgs(BaseModel):
    title: str = Field(min_length=1, description="Document title")
    content: str = Field(description="Full document content in Markdown format")


class PatchDocumentArgs(BaseModel):
    operations: List[PatchOperation] = Field(min_length=1, description="Search-and-replace operations to apply sequentially to the document.")
    title: Optional[str] = Field(default=None, min_length=1, description="Updated document title. Only include if the title needs to change.")


class UpdateActivityArgs(BaseModel):
    data: Optional[Dict[str, Any]] = Field(default=None, description="Activity data fields. Keys must match the field IDs from the template's input schema.")
    name: Optional[str] = Field(default=None, min_length=1, description="Updated activity name")
    description: Optional[str] = Field(default=None, description="Updated activity description")


class UpdateTemplateArgs(BaseModel):
    fields: List[TemplateField] = Field(description="Array of input field definitions")
    component: str = Field(description="Complete component source code")
    sampleData: Dict[str, Any] = Field(description="Realistic example data matching the field IDs")
    dependencies: Optional[List[TemplateDependency]] = None
    tools: Optional[List[str]] = None


class PatchComponentArgs(BaseModel):
    operations: List[PatchOperation] = Field(min_length=1, description="Search-and-replace operations to apply sequentially to the component source.")
    fields: Optional[List[TemplateField]] = Field(default=None, description="Updated field definitions. Only include if fields need to change alongside the component edit.")
    sampleData: Optional[Dict[str, Any]] = None
    dependencies: Optional[List[TemplateDependency]] = None
    tools: Optional[List[str]] = None


class UpdateTemplateSchemaArgs(BaseModel):
    fields: List[TemplateField]


class CreateTemplateVersionArgs(BaseModel):
    fields: List[TemplateField]
    component: Optional[str] = None
    sampleData: Optional[Dict[str, Any]] = None
    dependencies: Optional[List[TemplateDependency]] = None
    tools: Optional[List[str]] = None


@dataclass(frozen=True)
class AgentTool:
    name: str
    description: str
    args_model: type
    run: Callable[[MutationService, int, Any], Any]

    def spec(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.args_model.model_json_schema(),
        }


def _dump(result) -> Dict[str, Any]:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json", exclude_none=True)
    return result


DOCUMENT_TOOLS = [
    AgentTool(
        name="get_document",
        description="Retrieve the current document state including title and content. Call this to see what has been written so far before making changes.",
        args_model=NoArgs,
        run=lambda svc, rid, args: svc.read("document", rid),
    ),
    AgentTool(
        name="update_document",
        description="Create or replace the entire document content. Use this for initial document creation or major rewrites.",
        args_model=UpdateDocumentArgs,
        run=lambda svc, rid, args: svc.replace("document", rid, args.content, title=args.title),
    ),
    AgentTool(
        name="patch_document",
        description="Apply targeted search-and-replace edits to the existing document. Much faster than regenerating the entire document.",
        args_model=PatchDocumentArgs,
        run=lambda svc, rid, args: svc.patch("document", rid, args.operations, title=args.title),
    ),
]

ACTIVITY_TOOLS = [
    AgentTool(
        name="get_template",
        description="Retrieve the activity template's input schema, the activity's current data, and the component source. ALWAYS call this before making updates.",
        args_model=NoArgs,
        run=lambda svc, rid, args: svc.get_template_for_activity(rid),
    ),
    AgentTool(
        name="update_activity",
        description="Update the activity's data fields. Fields you include will replace existing values. You MUST call get_template first to read the current state.",
        args_model=UpdateActivityArgs,
        run=lambda svc, rid, args: svc.replace_activity(
            rid, ActivityReplace(data=args.data, name=args.name, description=args.description),
        ),
    ),
]

TEMPLATE_TOOLS = [
    AgentTool(
        name="get_template",
        description="Retrieve the current template state including input schema and component source. Use this to inspect what has been built so far before making changes.",
        args_model=NoArgs,
        run=lambda svc, rid, args: svc.read("template", rid),
    ),
    AgentTool(
        name="update_template",
        description="Replace the component source, sample data and field definitions. Structural field changes are rejected; use create_template_version for those.",
        args_model=UpdateTemplateArgs,
        run=lambda svc, rid, args: svc.replace_template(rid, TemplateReplace(
            component=args.component,
            input_schema=args.fields,
            sample_data=args.sampleData,
            dependencies=args.dependencies,
            tools=args.tools,
        )),
    ),
    AgentTool(
        name="patch_component",
        description="Apply targeted search-and-replace edits to the existing component source code. Use this instead of update_template for incremental changes.",
        args_model=PatchComponentArgs,
        run=lambda svc, rid, args: svc.patch_template(rid, TemplatePatch(
            operations=args.operations,
            input_schema=args.fields,
            sample_data=args.sampleData,
            dependencies=args.dependencies,
            tools=args.tools,
        )),
    ),
    AgentTool(
        name="update_template_schema",
        description="Edit labels, placeholders or defaults of the current field definitions without changing the data shape.",
        args_model=UpdateTemplateSchemaArgs,
        run=lambda svc, rid, args: svc.update_schema(rid, args.fields),
    ),
    AgentTool(
        name="create_template_version",
        description="Publish a structural schema change (field added, removed or retyped) as a new template version. Existing activities keep rendering against their own version.",
        args_model=CreateTemplateVersionArgs,
        run=lambda svc, rid, args: svc.create_version(rid, TemplateVersionCreate(
            input_schema=args.fields,
            component=args.component,
            sample_data=args.sampleData,
            dependencies=args.dependencies,
            tools=args.tools,
        )),
    ),
]

TOOLSETS: Dict[str, List[AgentTool]] = {
    "document": DOCUMENT_TOOLS,
    "activity": ACTIVITY_TOOLS,
    "template": TEMPLATE_TOOLS,
}


def _toolset(kind: str) -> List[AgentTool]:
    tools = TOOLSETS.get(kind)
    if tools is None:
        raise HTTPException(status_code=404, detail="지원하지 않는 콘텐츠 종류입니다.")
    return tools


def list_tools(kind: str) -> Dict[str, Any]:
    return {
        "kind": kind,
        "max_steps": settings.AGENT_MAX_TOOL_STEPS,
        "tools": [tool.spec() for tool in _toolset(kind)],
    }


def execute_tool(db: Session, kind: str, record_id: int, name: str, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    tool = next((t for t in _toolset(kind) if t.name == name), None)
    if tool is None:
        raise HTTPException(status_code=404, detail=f"도구 '{name}'을(를) 찾을 수 없습니다.")
    try:
        args = tool.args_model.model_validate(arguments or {})
    except ValidationError as exc:
        # 저장소 접근 전에 거부한다. 에이전트가 읽고 인자를 고칠 수 있도록 값으로 반환한다.
        return _dump(MutationResult.fail("validation_error", f"Invalid arguments for {name}: {exc}"))
    logger.info("[agent] tool=%s kind=%s id=%s", name, kind, record_id)
    return _dump(tool.run(MutationService(db), record_id, args))

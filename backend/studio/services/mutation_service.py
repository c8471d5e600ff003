"""콘텐츠 읽기/교체/패치와 템플릿 스키마 변경을 조합하는 도메인 서비스입니다.

사람이 쓰는 HTTP 경로와 에이전트 도구 호출 경로가 모두 이 서비스를 거친다.
쓰기 전에는 항상 staleness 가드를 확인하고, 템플릿 스키마 변경은 구조적 변경 여부에 따라
현재 스냅샷 갱신 또는 새 버전 생성으로 나뉜다. 모든 쓰기는 검사가 끝난 뒤 한 번에 commit한다.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from studio.config import settings
from studio.models.course import Activity
from studio.models.template import Template
from studio.schemas.mutation import (
    ActivityReplace,
    ActivityTemplateOut,
    ContentOut,
    MutationResult,
    PatchOperation,
    TemplatePatch,
    TemplateReplace,
)
from studio.schemas.template import TemplateDependency, TemplateField, TemplateVersionCreate
from studio.services import patch_engine, schema_differ, staleness_guard, version_service
from studio.services.content_records import ACTIVITY, DOCUMENT, TEMPLATE, ContentAccessor, get_accessor
from studio.services.schema_validation import validate_data_against_schema
from studio.utils.helpers import utcnow

logger = logging.getLogger(__name__)

VERSIONED_PATH_HINT = (
    "Structural schema changes (adding, removing or retyping a field) cannot be applied in place. "
    "Use create_template_version (POST /api/templates/{template_id}/versions) to publish a new schema version."
)


def dump_fields(fields: Optional[List[Any]]) -> Optional[List[Dict[str, Any]]]:
    if fields is None:
        return None
    return [f.model_dump(exclude_none=True) if isinstance(f, TemplateField) else dict(f) for f in fields]


def dump_dependencies(dependencies: Optional[List[Any]]) -> Optional[List[Dict[str, Any]]]:
    if dependencies is None:
        return None
    return [
        d.model_dump(by_alias=True) if isinstance(d, TemplateDependency) else dict(d)
        for d in dependencies
    ]


class MutationService:
    def __init__(self, db: Session, *, clock: Callable = utcnow, version_store=None):
        self.db = db
        self.clock = clock
        self.versions = version_store or version_service.SqlVersionStore(db)

    # ----- staleness helpers -----

    def _check_stale(self, accessor: ContentAccessor, row) -> Optional[MutationResult]:
        if not settings.STALE_CONTEXT_CHECK_ENABLED:
            return None
        check = staleness_guard.check_write(
            accessor.get_stamps(row),
            subject=accessor.subject,
            read_tool=accessor.read_tool,
        )
        if check.allowed:
            return None
        logger.info("[mutation] stale write rejected kind=%s id=%s", accessor.kind, accessor.record_id(row))
        return MutationResult.fail("stale_context", check.reason)

    def _commit_write(self, accessor: ContentAccessor, row) -> None:
        accessor.set_stamps(row, staleness_guard.record_write(accessor.get_stamps(row), self.clock()))
        self.db.commit()
        self.db.refresh(row)

    def _structural_rejection(self, template: Template, new_fields) -> Optional[MutationResult]:
        if not schema_differ.has_structural_change(template.input_schema, new_fields):
            return None
        summary = schema_differ.describe_structural_change(template.input_schema, new_fields)
        logger.info("[mutation] structural schema change rejected template=%s (%s)", template.template_id, summary)
        message = VERSIONED_PATH_HINT.format(template_id=template.template_id)
        if summary:
            message = f"{message}\nDetected change: {summary}"
        return MutationResult.fail("structural_change_rejected", message)

    # ----- generic operations -----

    def read(self, kind: str, record_id: int) -> ContentOut:
        accessor = get_accessor(kind)
        row = accessor.get(self.db, record_id)
        accessor.set_stamps(row, staleness_guard.record_read(accessor.get_stamps(row), self.clock()))
        self.db.commit()
        self.db.refresh(row)
        return ContentOut(
            kind=accessor.kind,
            record_id=record_id,
            title=accessor.get_title(row),
            content=accessor.get_body(row),
            extra=self._read_extra(accessor, row),
            content_read_at=row.content_read_at,
        )

    def _read_extra(self, accessor: ContentAccessor, row) -> Dict[str, Any]:
        if accessor is DOCUMENT:
            return {"summary": row.summary}
        if accessor is TEMPLATE:
            return {
                "description": row.description,
                "input_schema": row.input_schema,
                "sample_data": row.sample_data,
                "dependencies": row.dependencies,
                "tools": row.tools,
                "status": row.status,
                "schema_version": row.schema_version,
            }
        return {"description": row.description, "data_schema_version": row.data_schema_version}

    def replace(self, kind: str, record_id: int, content: Any, *, title: Optional[str] = None) -> MutationResult:
        accessor = get_accessor(kind)
        if accessor is ACTIVITY:
            if not isinstance(content, dict):
                return MutationResult.fail("validation_error", "Activity content must be an object of field values.")
            return self.replace_activity(record_id, ActivityReplace(data=content, name=title))
        if accessor is TEMPLATE:
            if not isinstance(content, str):
                return MutationResult.fail("validation_error", "Template content must be the component source string.")
            return self.replace_template(record_id, TemplateReplace(component=content))
        if not isinstance(content, str):
            return MutationResult.fail("validation_error", "Document content must be a string.")
        row = accessor.get(self.db, record_id)
        rejected = self._check_stale(accessor, row)
        if rejected:
            return rejected
        accessor.set_body(row, content)
        if title:
            accessor.set_title(row, title)
        row.status = "ready"
        self._commit_write(accessor, row)
        return MutationResult.ok(content_length=len(content))

    def patch(self, kind: str, record_id: int, operations: List[PatchOperation], *, title: Optional[str] = None) -> MutationResult:
        accessor = get_accessor(kind)
        if not accessor.text_content:
            return MutationResult.fail(
                "validation_error",
                f"{accessor.subject} is structured and cannot be patched with search/replace. Use a replace instead.",
            )
        if accessor is TEMPLATE:
            return self.patch_template(record_id, TemplatePatch(operations=operations))
        row = accessor.get(self.db, record_id)
        rejected = self._check_stale(accessor, row)
        if rejected:
            return rejected
        outcome = patch_engine.apply_patch(
            accessor.get_body(row),
            operations,
            subject=accessor.subject.lower(),
            read_tool=accessor.read_tool,
        )
        if not outcome.success:
            # 실패 시 본문과 타임스탬프 모두 그대로 두어 기존 읽기로 재시도할 수 있게 한다.
            return MutationResult.fail(outcome.error_code, outcome.error, current_content=outcome.body)
        accessor.set_body(row, outcome.body)
        if title:
            accessor.set_title(row, title)
        self._commit_write(accessor, row)
        return MutationResult.ok(operations_applied=outcome.operations_applied, content_length=len(outcome.body))

    def clear_history(self, kind: str, record_id: int) -> None:
        accessor = get_accessor(kind)
        row = accessor.get(self.db, record_id)
        self.apply_messages(kind, row, [])
        self.db.commit()
        self.db.refresh(row)

    def apply_messages(self, kind: str, row, messages: List[Dict[str, Any]]) -> None:
        """대화 이력이 비워지면 에이전트의 읽기 기록도 무효이므로 타임스탬프를 초기화한다. commit하지 않는다."""
        row.messages = messages
        if not messages:
            get_accessor(kind).set_stamps(row, staleness_guard.reset())

    def record_external_write(self, kind: str, row) -> None:
        """사람이 직접 본문을 바꾼 경우. 에이전트가 다시 읽기 전까지 쓰기를 막도록 수정 시각만 남긴다."""
        accessor = get_accessor(kind)
        accessor.set_stamps(row, staleness_guard.record_write(accessor.get_stamps(row), self.clock()))

    # ----- activity -----

    def replace_activity(self, activity_id: int, data: ActivityReplace) -> MutationResult:
        row: Activity = ACTIVITY.get(self.db, activity_id)
        rejected = self._check_stale(ACTIVITY, row)
        if rejected:
            return rejected
        if data.data is not None:
            merged = dict(row.data or {})
            merged.update(data.data)
            row.data = merged
        if data.name:
            row.name = data.name
        if data.description is not None:
            row.description = data.description
        warnings = self._activity_warnings(row)
        self._commit_write(ACTIVITY, row)
        return MutationResult.ok(warnings=warnings)

    def _activity_warnings(self, row: Activity) -> List[str]:
        template = TEMPLATE.get(self.db, row.template_id)
        resolution = version_service.resolve_for_activity(
            self.versions,
            template_id=template.template_id,
            data_schema_version=row.data_schema_version,
            live_fields=version_service.versioned_fields_of(template),
        )
        return validate_data_against_schema(row.data or {}, resolution.fields.get("input_schema"))

    def get_template_for_activity(self, activity_id: int) -> ActivityTemplateOut:
        row: Activity = ACTIVITY.get(self.db, activity_id)
        template: Template = TEMPLATE.get(self.db, row.template_id)
        if (row.data_schema_version or 1) > (template.schema_version or 1):
            logger.warning(
                "[mutation] activity=%s bound to version %s ahead of template=%s version %s",
                activity_id,
                row.data_schema_version,
                template.template_id,
                template.schema_version,
            )
        resolution = version_service.resolve_for_activity(
            self.versions,
            template_id=template.template_id,
            data_schema_version=row.data_schema_version,
            live_fields=version_service.versioned_fields_of(template),
        )
        ACTIVITY.set_stamps(row, staleness_guard.record_read(ACTIVITY.get_stamps(row), self.clock()))
        self.db.commit()
        self.db.refresh(row)
        return ActivityTemplateOut(
            activity_id=row.activity_id,
            template_id=template.template_id,
            template_name=template.name,
            activity_name=row.name,
            activity_description=row.description,
            current_data=row.data or {},
            input_schema=resolution.fields.get("input_schema"),
            component=resolution.fields.get("component"),
            sample_data=resolution.fields.get("sample_data"),
            data_schema_version=resolution.data_schema_version,
            latest_template_version=resolution.latest_version,
            upgrade_available=resolution.upgrade_available,
        )

    def migrate_activity(self, activity_id: int, data: Dict[str, Any]) -> MutationResult:
        """뒤처진 바인딩을 명시적으로 최신 스키마 버전으로 옮긴다."""
        row: Activity = ACTIVITY.get(self.db, activity_id)
        template: Template = TEMPLATE.get(self.db, row.template_id)
        current = int(row.data_schema_version or 1)
        latest = int(template.schema_version or 1)
        if current >= latest:
            raise HTTPException(
                status_code=400,
                detail=f"이미 최신 스키마 버전입니다. (현재 {current}, 최신 {latest})",
            )
        rejected = self._check_stale(ACTIVITY, row)
        if rejected:
            return rejected
        errors = validate_data_against_schema(data, template.input_schema)
        if errors:
            return MutationResult.fail(
                "validation_error",
                f"Migrated data does not match version {latest} schema: " + "; ".join(errors),
            )
        row.data = dict(data)
        row.data_schema_version = latest
        self._commit_write(ACTIVITY, row)
        logger.info("[mutation] activity=%s migrated from version %s to %s", activity_id, current, latest)
        return MutationResult.ok(schema_version=latest)

    # ----- template -----

    def _apply_template_extras(self, row: Template, *, sample_data=None, dependencies=None, tools=None) -> Dict[str, Any]:
        changed: Dict[str, Any] = {}
        if sample_data is not None:
            row.sample_data = sample_data
            changed["sample_data"] = sample_data
        if dependencies is not None:
            row.dependencies = dump_dependencies(dependencies)
            changed["dependencies"] = row.dependencies
        if tools is not None:
            row.tools = list(tools)
            changed["tools"] = row.tools
        return changed

    def replace_template(self, template_id: int, data: TemplateReplace) -> MutationResult:
        row: Template = TEMPLATE.get(self.db, template_id)
        new_fields = dump_fields(data.input_schema)
        if new_fields is not None:
            rejected = self._structural_rejection(row, new_fields)
            if rejected:
                return rejected
        rejected = self._check_stale(TEMPLATE, row)
        if rejected:
            return rejected
        row.component = data.component
        changed: Dict[str, Any] = {"component": data.component}
        if new_fields is not None:
            row.input_schema = new_fields
            changed["input_schema"] = new_fields
        changed.update(self._apply_template_extras(
            row, sample_data=data.sample_data, dependencies=data.dependencies, tools=data.tools,
        ))
        self.versions.update_current_snapshot(template_id, changed)
        self._commit_write(TEMPLATE, row)
        return MutationResult.ok(content_length=len(data.component), schema_version=row.schema_version)

    def patch_template(self, template_id: int, data: TemplatePatch) -> MutationResult:
        row: Template = TEMPLATE.get(self.db, template_id)
        new_fields = dump_fields(data.input_schema)
        if new_fields is not None:
            rejected = self._structural_rejection(row, new_fields)
            if rejected:
                return rejected
        rejected = self._check_stale(TEMPLATE, row)
        if rejected:
            return rejected
        if not row.component:
            return MutationResult.fail(
                "validation_error",
                "No existing component to patch. Use update_template to create the initial template.",
            )
        outcome = patch_engine.apply_patch(
            row.component,
            data.operations,
            subject="component source",
            read_tool=TEMPLATE.read_tool,
        )
        if not outcome.success:
            return MutationResult.fail(outcome.error_code, outcome.error, current_content=outcome.body)
        row.component = outcome.body
        changed: Dict[str, Any] = {"component": outcome.body}
        if new_fields is not None:
            row.input_schema = new_fields
            changed["input_schema"] = new_fields
        changed.update(self._apply_template_extras(
            row, sample_data=data.sample_data, dependencies=data.dependencies, tools=data.tools,
        ))
        self.versions.update_current_snapshot(template_id, changed)
        self._commit_write(TEMPLATE, row)
        return MutationResult.ok(operations_applied=outcome.operations_applied, schema_version=row.schema_version)

    def update_schema(self, template_id: int, fields: List[Any]) -> MutationResult:
        row: Template = TEMPLATE.get(self.db, template_id)
        new_fields = dump_fields(fields) or []
        rejected = self._structural_rejection(row, new_fields)
        if rejected:
            return rejected
        rejected = self._check_stale(TEMPLATE, row)
        if rejected:
            return rejected
        row.input_schema = new_fields
        self.versions.update_current_snapshot(template_id, {"input_schema": new_fields})
        self._commit_write(TEMPLATE, row)
        return MutationResult.ok(schema_version=row.schema_version)

    def create_version(self, template_id: int, data: TemplateVersionCreate) -> MutationResult:
        """구조적 변경을 새 스키마 버전으로 기록하는 권한 경로."""
        row: Template = TEMPLATE.get(self.db, template_id)
        new_fields = dump_fields(data.input_schema) or []
        if not schema_differ.has_structural_change(row.input_schema, new_fields):
            return MutationResult.fail(
                "validation_error",
                "The schema change is not structural. Use update_template_schema to edit it in place.",
            )
        rejected = self._check_stale(TEMPLATE, row)
        if rejected:
            return rejected
        row.input_schema = new_fields
        if data.component is not None:
            row.component = data.component
        self._apply_template_extras(row, sample_data=data.sample_data, dependencies=data.dependencies, tools=data.tools)
        new_version = self.versions.create_version(template_id, version_service.versioned_fields_of(row))
        row.schema_version = new_version
        self._commit_write(TEMPLATE, row)
        return MutationResult.ok(schema_version=new_version)

    def list_versions(self, template_id: int) -> Dict[str, Any]:
        entries = self.versions.list_versions(template_id)
        return {
            "template_id": template_id,
            "current_version": self.versions.current_version(template_id),
            "versions": [{"version": e.version, "created_at": e.created_at} for e in entries],
        }

    def get_version(self, template_id: int, version: int) -> Dict[str, Any]:
        latest = self.versions.current_version(template_id)
        snapshot = self.versions.snapshot_at(template_id, version)
        if snapshot is None:
            raise HTTPException(status_code=404, detail=f"버전 {version}을(를) 찾을 수 없습니다.")
        return version_service.to_version_response(snapshot, latest)

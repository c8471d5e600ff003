"""템플릿 스키마 버전 스냅샷 저장/조회와 액티비티 바인딩 해석을 제공하는 도메인 서비스입니다.

스냅샷은 (template_id, version) 당 하나이며, 구조적 변경 시점에만 새로 생성된다.
비구조적 변경은 현재 버전의 스냅샷을 제자리에서 갱신한다.
저장소 메서드는 commit하지 않는다. 트랜잭션 경계는 호출하는 서비스가 정한다.
"""

import copy
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from studio.models.template import Template, TemplateVersion
from studio.utils.helpers import utcnow

logger = logging.getLogger(__name__)

VERSIONED_FIELDS = ("input_schema", "component", "sample_data", "dependencies", "tools")


@dataclass(frozen=True)
class VersionSnapshot:
    template_id: int
    version: int
    input_schema: Optional[List[Dict[str, Any]]] = None
    component: Optional[str] = None
    sample_data: Optional[Dict[str, Any]] = None
    dependencies: Optional[List[Dict[str, Any]]] = None
    tools: Optional[List[str]] = None
    created_at: Optional[datetime] = None

    def fields(self) -> Dict[str, Any]:
        return {name: copy.deepcopy(getattr(self, name)) for name in VERSIONED_FIELDS}


@dataclass(frozen=True)
class VersionEntry:
    version: int
    created_at: Optional[datetime]


@dataclass(frozen=True)
class BindingResolution:
    fields: Dict[str, Any]
    data_schema_version: int
    latest_version: int
    upgrade_available: bool
    from_snapshot: bool = False


def versioned_fields_of(template: Template) -> Dict[str, Any]:
    return {name: copy.deepcopy(getattr(template, name)) for name in VERSIONED_FIELDS}


def _pick_versioned(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in fields.items() if k in VERSIONED_FIELDS}


class SqlVersionStore:
    """template.schema_version 포인터와 template_version 테이블을 함께 다룬다."""

    def __init__(self, db: Session):
        self.db = db

    def _get_template(self, template_id: int) -> Template:
        template = self.db.query(Template).filter(Template.template_id == template_id).first()
        if not template:
            raise HTTPException(status_code=404, detail="템플릿을 찾을 수 없습니다.")
        return template

    def _row_at(self, template_id: int, version: int) -> Optional[TemplateVersion]:
        return (
            self.db.query(TemplateVersion)
            .filter(
                TemplateVersion.template_id == template_id,
                TemplateVersion.version == version,
            )
            .first()
        )

    @staticmethod
    def _to_snapshot(row: TemplateVersion) -> VersionSnapshot:
        return VersionSnapshot(
            template_id=row.template_id,
            version=row.version,
            input_schema=row.input_schema,
            component=row.component,
            sample_data=row.sample_data,
            dependencies=row.dependencies,
            tools=row.tools,
            created_at=row.created_at,
        )

    def current_version(self, template_id: int) -> int:
        return int(self._get_template(template_id).schema_version or 1)

    def snapshot_at(self, template_id: int, version: int) -> Optional[VersionSnapshot]:
        row = self._row_at(template_id, version)
        return self._to_snapshot(row) if row else None

    def create_initial_version(self, template_id: int, fields: Dict[str, Any]) -> int:
        template = self._get_template(template_id)
        version = int(template.schema_version or 1)
        self.db.add(TemplateVersion(template_id=template_id, version=version, **_pick_versioned(fields)))
        self.db.flush()
        return version

    def update_current_snapshot(self, template_id: int, fields: Dict[str, Any]) -> None:
        template = self._get_template(template_id)
        version = int(template.schema_version or 1)
        row = self._row_at(template_id, version)
        if row is None:
            # 이력이 어긋난 경우 현재 버전 스냅샷을 라이브 값으로 다시 만든다.
            logger.warning("[version] snapshot missing for template=%s version=%s, recreating", template_id, version)
            row = TemplateVersion(template_id=template_id, version=version, **versioned_fields_of(template))
            self.db.add(row)
        for name, value in _pick_versioned(fields).items():
            setattr(row, name, copy.deepcopy(value))
        self.db.flush()

    def create_version(self, template_id: int, fields: Dict[str, Any]) -> int:
        template = self._get_template(template_id)
        new_version = int(template.schema_version or 1) + 1
        full = versioned_fields_of(template)
        full.update(copy.deepcopy(_pick_versioned(fields)))
        self.db.add(TemplateVersion(template_id=template_id, version=new_version, **full))
        template.schema_version = new_version
        self.db.flush()
        logger.info("[version] template=%s advanced to version %s", template_id, new_version)
        return new_version

    def list_versions(self, template_id: int) -> List[VersionEntry]:
        self._get_template(template_id)
        rows = (
            self.db.query(TemplateVersion.version, TemplateVersion.created_at)
            .filter(TemplateVersion.template_id == template_id)
            .order_by(TemplateVersion.version.desc())
            .all()
        )
        return [VersionEntry(version=row[0], created_at=row[1]) for row in rows]


class InMemoryVersionStore:
    """테스트와 도구 시뮬레이션용 저장소. SqlVersionStore와 같은 인터페이스를 가진다."""

    def __init__(self):
        self._current: Dict[int, int] = {}
        self._snapshots: Dict[tuple, VersionSnapshot] = {}

    def _require(self, template_id: int) -> int:
        if template_id not in self._current:
            raise HTTPException(status_code=404, detail="템플릿을 찾을 수 없습니다.")
        return self._current[template_id]

    def _put(self, template_id: int, version: int, fields: Dict[str, Any], created_at=None) -> None:
        self._snapshots[(template_id, version)] = VersionSnapshot(
            template_id=template_id,
            version=version,
            created_at=created_at or utcnow(),
            **copy.deepcopy(_pick_versioned(fields)),
        )

    def current_version(self, template_id: int) -> int:
        return self._require(template_id)

    def snapshot_at(self, template_id: int, version: int) -> Optional[VersionSnapshot]:
        return self._snapshots.get((template_id, version))

    def create_initial_version(self, template_id: int, fields: Dict[str, Any]) -> int:
        self._current[template_id] = 1
        self._put(template_id, 1, fields)
        return 1

    def update_current_snapshot(self, template_id: int, fields: Dict[str, Any]) -> None:
        version = self._require(template_id)
        existing = self._snapshots.get((template_id, version))
        merged = existing.fields() if existing else {}
        merged.update(_pick_versioned(fields))
        self._put(template_id, version, merged, created_at=existing.created_at if existing else None)

    def create_version(self, template_id: int, fields: Dict[str, Any]) -> int:
        current = self._require(template_id)
        previous = self._snapshots.get((template_id, current))
        full = previous.fields() if previous else {}
        full.update(_pick_versioned(fields))
        new_version = current + 1
        self._put(template_id, new_version, full)
        self._current[template_id] = new_version
        return new_version

    def list_versions(self, template_id: int) -> List[VersionEntry]:
        self._require(template_id)
        entries = [
            VersionEntry(version=snap.version, created_at=snap.created_at)
            for (tid, _), snap in self._snapshots.items()
            if tid == template_id
        ]
        return sorted(entries, key=lambda e: e.version, reverse=True)


def resolve_for_activity(
    store,
    *,
    template_id: int,
    data_schema_version: Optional[int],
    live_fields: Dict[str, Any],
) -> BindingResolution:
    """액티비티가 바인딩된 버전의 필드를 돌려준다.

    최신이면 라이브 필드를, 뒤처져 있으면 해당 버전 스냅샷을 쓴다. 스냅샷이 없으면
    렌더링을 막지 않도록 라이브 필드로 대체하고 업그레이드는 없다고 보고한다.
    """
    latest = store.current_version(template_id)
    bound = int(data_schema_version or 1)
    if bound >= latest:
        return BindingResolution(
            fields=live_fields,
            data_schema_version=bound,
            latest_version=latest,
            upgrade_available=False,
        )
    snapshot = store.snapshot_at(template_id, bound)
    if snapshot is None:
        logger.warning(
            "[version] snapshot missing for template=%s version=%s, serving live fields",
            template_id,
            bound,
        )
        return BindingResolution(
            fields=live_fields,
            data_schema_version=bound,
            latest_version=latest,
            upgrade_available=False,
        )
    return BindingResolution(
        fields=snapshot.fields(),
        data_schema_version=bound,
        latest_version=latest,
        upgrade_available=True,
        from_snapshot=True,
    )


def to_version_response(snapshot: VersionSnapshot, latest_version: int) -> Dict[str, Any]:
    return {
        "template_id": snapshot.template_id,
        "version": snapshot.version,
        "input_schema": snapshot.input_schema,
        "component": snapshot.component,
        "sample_data": snapshot.sample_data,
        "dependencies": snapshot.dependencies,
        "tools": snapshot.tools,
        "created_at": snapshot.created_at,
        "is_latest_version": snapshot.version == latest_version,
        "latest_version": latest_version,
    }

"""템플릿 input_schema 변경이 구조적(필드 추가/삭제/타입 변경)인지 판별합니다."""

from typing import Any, Iterable, Optional, Tuple

NESTED_FIELD_TYPES = {"array"}


def _get(field: Any, key: str):
    if isinstance(field, dict):
        return field.get(key)
    return getattr(field, key, None)


def _signature(fields: Optional[Iterable[Any]]) -> Tuple:
    # 라벨, placeholder, 기본값, 순서는 데이터 모양에 영향을 주지 않으므로 제외한다.
    entries = []
    for field in fields or []:
        field_type = _get(field, "type")
        nested: Tuple = ()
        if field_type in NESTED_FIELD_TYPES:
            nested = _signature(_get(field, "fields"))
        entries.append((str(_get(field, "id")), str(field_type), nested))
    return tuple(sorted(entries))


def has_structural_change(old_fields: Optional[Iterable[Any]], new_fields: Optional[Iterable[Any]]) -> bool:
    return _signature(old_fields) != _signature(new_fields)


def describe_structural_change(old_fields: Optional[Iterable[Any]], new_fields: Optional[Iterable[Any]]) -> str:
    """거부 메시지에 넣을 변경 요약. 최상위 필드 기준이다."""
    old = {entry[0]: entry for entry in _signature(old_fields)}
    new = {entry[0]: entry for entry in _signature(new_fields)}
    parts = []
    added = sorted(set(new) - set(old))
    removed = sorted(set(old) - set(new))
    changed = sorted(key for key in set(old) & set(new) if old[key] != new[key])
    if added:
        parts.append("added: " + ", ".join(added))
    if removed:
        parts.append("removed: " + ", ".join(removed))
    if changed:
        parts.append("retyped: " + ", ".join(changed))
    return "; ".join(parts)

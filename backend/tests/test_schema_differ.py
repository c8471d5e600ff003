"""스키마 구조 변경 판별 규칙을 검증합니다."""

from studio.schemas.template import TemplateField
from studio.services.schema_differ import describe_structural_change, has_structural_change

BASE = [
    {"id": "title", "type": "text", "label": "Title", "placeholder": "Enter title"},
    {
        "id": "items",
        "type": "array",
        "label": "Items",
        "fields": [{"id": "name", "type": "text", "label": "Name"}],
    },
]


def test_label_placeholder_default_and_order_are_cosmetic():
    changed = [
        {
            "id": "items",
            "type": "array",
            "label": "Entries",
            "fields": [{"id": "name", "type": "text", "label": "Entry name"}],
        },
        {"id": "title", "type": "text", "label": "Heading", "placeholder": "", "default": "Untitled"},
    ]
    assert not has_structural_change(BASE, changed)


def test_added_field_is_structural():
    changed = BASE + [{"id": "subtitle", "type": "text", "label": "Subtitle"}]
    assert has_structural_change(BASE, changed)
    assert describe_structural_change(BASE, changed) == "added: subtitle"


def test_removed_field_is_structural():
    assert has_structural_change(BASE, BASE[:1])
    assert describe_structural_change(BASE, BASE[:1]) == "removed: items"


def test_retyped_field_is_structural():
    changed = [{"id": "title", "type": "textarea", "label": "Title"}, BASE[1]]
    assert has_structural_change(BASE, changed)
    assert describe_structural_change(BASE, changed) == "retyped: title"


def test_nested_array_field_change_is_structural():
    changed = [
        BASE[0],
        {
            "id": "items",
            "type": "array",
            "label": "Items",
            "fields": [
                {"id": "name", "type": "text", "label": "Name"},
                {"id": "qty", "type": "number", "label": "Qty"},
            ],
        },
    ]
    assert has_structural_change(BASE, changed)


def test_none_and_empty_are_equivalent():
    assert not has_structural_change(None, [])


def test_accepts_pydantic_fields():
    models = [TemplateField(**BASE[0]), TemplateField(**BASE[1])]
    assert not has_structural_change(BASE, models)

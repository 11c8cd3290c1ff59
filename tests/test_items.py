"""
Tests del normalizador de ítems de contenido.
"""

from soustack_lite.domain_models import PLACEHOLDER, PlainText, Section, Structured, Timing, ExactDuration, RangeDuration
from soustack_lite.items import (
    filter_items,
    finalize_items,
    is_blank,
    items_to_wire,
    normalize_item,
    normalize_items,
    prepare_items,
)


def test_string_becomes_plain_text():
    assert normalize_item("2 eggs", "ingredient") == PlainText("2 eggs")


def test_structured_by_primary_field():
    ingredient = normalize_item({"name": "flour", "quantity": 2}, "ingredient")
    instruction = normalize_item({"text": "Mix", "inputs": ["flour"]}, "instruction")

    assert isinstance(ingredient, Structured)
    assert ingredient.name == "flour"
    assert ingredient.quantity == 2
    assert isinstance(instruction, Structured)
    assert instruction.inputs == ["flour"]


def test_primary_field_depends_on_context():
    """Test: `{text}` en contexto ingrediente no es estructurado."""
    item = normalize_item({"text": "Mix"}, "ingredient")

    assert isinstance(item, PlainText)
    assert item.text == '{"text": "Mix"}'


def test_unknown_fields_are_preserved():
    raw = {"name": "salt", "x-origin": "sea", "notes": ["coarse"]}
    item = normalize_item(raw, "ingredient")

    assert item.to_wire() == raw


def test_canonical_section():
    raw = {"section": {"name": "Sauce", "items": ["1 tomato", {"name": "basil"}]}}
    item = normalize_item(raw, "ingredient")

    assert isinstance(item, Section)
    assert item.name == "Sauce"
    assert item.items[0] == PlainText("1 tomato")
    assert isinstance(item.items[1], Structured)
    assert item.to_wire() == raw


def test_section_keeps_unknown_fields():
    """Test: claves desconocidas dentro de `section` y en el envoltorio sobreviven."""
    raw = {"section": {"name": "Sauce", "id": "s1", "items": ["tomato"]}, "x-note": "a"}
    item = normalize_item(raw, "ingredient")

    assert item.section_fields == {"id": "s1"}
    assert item.extra == {"x-note": "a"}
    assert item.to_wire() == raw


def test_filter_keeps_section_fields():
    item = normalize_item({"section": {"name": "S", "id": "s1", "items": ["", "salt"]}, "x-note": "a"}, "ingredient")

    assert filter_items([item])[0].to_wire() == {"section": {"name": "S", "id": "s1", "items": ["salt"]}, "x-note": "a"}


def test_legacy_section_is_coerced():
    raw = {"section": "Dough", "steps": ["Knead", {"text": "Rest", "timing": {"minutes": 30}}]}
    item = normalize_item(raw, "instruction")

    assert isinstance(item, Section)
    assert item.name == "Dough"
    assert item.to_wire() == {
        "section": {"name": "Dough", "items": ["Knead", {"text": "Rest", "timing": {"minutes": 30}}]}
    }


def test_other_values_are_stringified():
    assert normalize_item(5, "ingredient") == PlainText("5")
    assert normalize_item(None, "ingredient") == PlainText("")
    assert normalize_item({"foo": 1}, "instruction") == PlainText('{"foo": 1}')


def test_normalize_is_idempotent():
    items = normalize_items(["a", {"name": "b"}, {"section": {"name": "s", "items": ["c"]}}], "ingredient")

    assert normalize_items(items, "ingredient") == items
    assert normalize_items([i.to_wire() for i in items], "ingredient") == items


def test_normalize_items_non_list():
    assert normalize_items("abc", "ingredient") == []
    assert normalize_items(None, "instruction") == []


def test_is_blank():
    assert is_blank(PlainText("  "))
    assert is_blank(PlainText(PLACEHOLDER))
    assert is_blank(Structured("ingredient", {"name": "", "quantity": 1}))
    assert not is_blank(Structured("ingredient", {"name": "salt"}))
    assert is_blank(Section("", (PlainText(""),)))
    assert is_blank(Section("Sauce", ()))
    assert not is_blank(Section("Sauce", (PlainText("salt"),)))


def test_filter_recurses_into_sections():
    items = [Section("Sauce", (PlainText(""), PlainText("tomato"))), PlainText(PLACEHOLDER)]

    assert filter_items(items) == [Section("Sauce", (PlainText("tomato"),))]


def test_finalize_never_empty():
    assert finalize_items([]) == [PlainText(PLACEHOLDER)]
    assert finalize_items([PlainText("")]) == [PlainText(PLACEHOLDER)]


def test_prepare_items_pipeline():
    assert prepare_items(["", "salt", None], "ingredient") == [PlainText("salt")]


def test_timing_view():
    exact = Timing.from_raw({"duration": {"minutes": 10}, "activity": "passive"})
    ranged = Timing.from_raw({"duration": {"minMinutes": 20, "maxMinutes": 10}})

    assert exact.duration == ExactDuration(10.0)
    assert exact.activity == "passive"
    assert ranged.duration == RangeDuration(10.0, 20.0)
    assert Timing.from_raw({"activity": "active"}) is None
    assert Timing.from_raw("10 min") is None


def test_items_to_wire():
    raw = ["salt", {"name": "flour", "x-extra": True}, {"section": {"name": "Top", "items": ["sugar"]}}]

    assert items_to_wire(normalize_items(raw, "ingredient")) == raw


def test_legacy_section_keeps_wrapper_fields():
    raw = {"section": "Dough", "steps": ["Knead"], "x-note": "overnight"}

    assert normalize_item(raw, "instruction").to_wire() == {
        "section": {"name": "Dough", "items": ["Knead"]},
        "x-note": "overnight",
    }

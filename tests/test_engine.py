"""
Tests del orquestador (conversión, normalización con memo, ediciones).
"""

import pytest

from soustack_lite.domain_models import PLACEHOLDER, PlainText, Structured
from soustack_lite.engine import (
    clear_normalize_cache,
    convert_item_to_structured,
    convert_text,
    document_from_dict,
    edit_item_field,
    normalize_document,
    recompile,
    set_extension,
    set_ingredients,
    set_instructions,
    set_name,
    toggle_capability,
)


@pytest.fixture(autouse=True)
def _fresh_memo():
    clear_normalize_cache()
    yield
    clear_normalize_cache()


def test_convert_text_end_to_end():
    text = "Best Eggs\nIngredients:\n- 2 eggs\n- salt\nInstructions:\n1. Crack eggs\n2. Cook in pan"
    result = convert_text(text)
    data = result["document"].to_dict()

    assert result["parse"].mode == "headers"
    assert data["name"] == "Best Eggs"
    assert data["ingredients"] == ["2 eggs", "salt"]
    assert data["instructions"] == ["Crack eggs", "Cook in pan"]
    assert data["stacks"] == {}
    assert data["x-mise"]["parse"]["mode"] == "headers"
    assert data["x-mise"]["parse"]["source"] == "paste"
    assert data["x-mise"]["prose"]["text"] == text


def test_convert_text_without_prose():
    result = convert_text("1. Boil water", source="upload", keep_prose=False)
    ext = result["document"].extensions

    assert "prose" not in ext
    assert ext["parse"]["source"] == "upload"


def test_convert_garbage_still_valid():
    doc = convert_text("")["document"]

    assert doc.name == "Untitled Recipe"
    assert doc.ingredients == [PlainText(PLACEHOLDER)]
    assert doc.extensions["parse"]["confidence"] == 0.0


def test_normalize_same_object_is_memoized():
    raw = {"name": "Soup", "stacks": {"prep@1": [{"text": "dice"}]}}

    first = normalize_document(raw)
    second = normalize_document(raw)

    assert first is second


def test_normalize_equal_but_distinct_objects():
    first = normalize_document({"name": "Soup"})
    second = normalize_document({"name": "Soup"})

    assert first == second


def test_normalize_migrates_legacy_prep():
    raw = {"name": "Soup", "stacks": {"prep@1": [{"text": "dice onion"}]}, "ingredients": ["onion"]}
    doc = normalize_document(raw)

    assert doc.stacks == {"prep": 1}
    assert doc.extensions["prepItems"] == [{"text": "dice onion"}]
    # la entrada no se toca
    assert raw["stacks"] == {"prep@1": [{"text": "dice onion"}]}


def test_normalize_merges_prep_items_without_duplicates():
    raw = {
        "stacks": {"prep@1": [{"text": "a"}, {"text": "b"}]},
        "x-mise": {"prepItems": [{"text": "a"}]},
    }
    doc = normalize_document(raw)

    assert doc.extensions["prepItems"] == [{"text": "a"}, {"text": "b"}]


def test_normalize_lifts_legacy_top_level_fields():
    doc, migrated = document_from_dict({"miseEnPlace": [{"text": "chop"}], "storage": {"method": "fridge"}})

    assert migrated is True
    assert doc.extensions["prepItems"] == [{"text": "chop"}]
    assert doc.extensions["storage"] == {"method": "fridge"}
    assert "miseEnPlace" not in doc.to_dict()


def test_legacy_field_kept_when_extension_exists():
    """Test: si `x-mise.storage` ya existe, el `storage` legacy no se pierde."""
    raw = {"storage": {"method": "fridge"}, "x-mise": {"storage": {"duration": "3d"}}}
    doc, migrated = document_from_dict(raw)
    data = doc.to_dict()

    assert migrated is False
    assert data["storage"] == {"method": "fridge"}
    assert data["x-mise"]["storage"] == {"duration": "3d"}


def test_legacy_mise_en_place_merges_into_prep_items():
    raw = {"miseEnPlace": [{"text": "chop"}, {"text": "peel"}], "x-mise": {"prepItems": [{"text": "chop"}]}}
    doc, migrated = document_from_dict(raw)

    assert migrated is True
    assert doc.extensions["prepItems"] == [{"text": "chop"}, {"text": "peel"}]
    assert "miseEnPlace" not in doc.to_dict()


def test_non_mapping_parse_extension_is_preserved():
    doc, _ = document_from_dict({"x-mise": {"parse": "manual"}})

    assert doc.extensions["parse"] == "manual"
    assert doc.to_dict()["x-mise"]["parse"] == "manual"


def test_normalize_preserves_unknown_top_level_keys():
    doc, migrated = document_from_dict({"name": "X", "source": {"url": "https://example.com"}})

    assert migrated is False
    assert doc.to_dict()["source"] == {"url": "https://example.com"}


@pytest.mark.parametrize("raw", [None, [], "x", {"stacks": "nope", "ingredients": 3}])
def test_normalize_is_total(raw):
    doc = normalize_document(raw)

    assert doc.name == "Untitled Recipe"
    assert doc.instructions == [PlainText(PLACEHOLDER)]


def test_toggle_capability_only_changes_stacks():
    doc = normalize_document({"name": "Soup", "ingredients": ["salt"], "x-mise": {"storage": {"method": "jar"}}})
    toggled = toggle_capability(doc, "timed", True)

    assert toggled.stacks == {"timed": 1}
    assert toggled.ingredients == doc.ingredients
    assert toggled.instructions == doc.instructions
    assert toggled.extensions == doc.extensions

    assert toggle_capability(toggled, "timed", False).stacks == {}


def test_edit_cycle_keeps_document_valid():
    doc = convert_text("1. Boil water\n2. Add pasta")["document"]

    doc = set_ingredients(doc, ["", "pasta", PLACEHOLDER])
    assert doc.ingredients == [PlainText("pasta")]

    doc = set_instructions(doc, [])
    assert doc.instructions == [PlainText(PLACEHOLDER)]

    doc = set_name(doc, "   ")
    assert doc.name == "Untitled Recipe"


def test_convert_and_edit_structured_item():
    doc = normalize_document({"ingredients": ["flour", "salt"]})

    doc = convert_item_to_structured(doc, "ingredients", 0)
    assert doc.ingredients[0] == Structured("ingredient", {"name": "flour"})

    doc = edit_item_field(doc, "ingredients", 0, "quantity", 2)
    assert doc.to_dict()["ingredients"][0] == {"name": "flour", "quantity": 2}

    # fuera de rango / ítem no estructurado / área inválida: sin cambios
    assert edit_item_field(doc, "ingredients", 5, "unit", "g") is doc
    assert edit_item_field(doc, "ingredients", 1, "unit", "g") is doc
    assert edit_item_field(doc, "equipment", 0, "unit", "g") is doc


def test_edit_item_field_preserves_unknown_fields():
    doc = normalize_document({"instructions": [{"text": "Mix", "x-note": "gently"}]})
    edited = edit_item_field(doc, "instructions", 0, "inputs", ["flour"])

    assert edited.to_dict()["instructions"][0] == {"text": "Mix", "x-note": "gently", "inputs": ["flour"]}


def test_clearing_primary_field_falls_back_to_placeholder():
    doc = normalize_document({"ingredients": [{"name": "salt"}]})
    edited = edit_item_field(doc, "ingredients", 0, "name", "")

    assert edited.ingredients == [PlainText(PLACEHOLDER)]


def test_set_extension():
    doc = normalize_document({})
    doc = set_extension(doc, "storage", {"method": "fridge"})
    assert doc.extensions["storage"] == {"method": "fridge"}

    doc = set_extension(doc, "storage", {})
    assert "storage" not in doc.extensions


def test_recompile_preserves_stacks_and_extensions():
    doc = normalize_document({"name": "Old", "stacks": {"timed": 1}, "x-mise": {"storage": {"method": "jar"}}})
    fresh = recompile(doc, {"name": "New", "instructions": ["Cook"]})

    assert fresh.name == "New"
    assert fresh.stacks == {"timed": 1}
    assert fresh.extensions["storage"] == {"method": "jar"}

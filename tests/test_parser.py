"""
Tests del parser de texto libre.

Prueba:
- Camino con encabezados (título, listas, confianza)
- Camino por marcadores (sin encabezados)
- Entradas vacías o que no son recetas (nunca lanza)
- Determinismo
"""

import pytest

from soustack_lite.parser import (
    classify_line,
    is_ingredient_like,
    parse_freeform,
    strip_list_prefix,
)


def test_parse_with_headers():
    """Test: receta con encabezados explícitos."""
    result = parse_freeform(
        "Best Eggs\nIngredients:\n- 2 eggs\n- salt\nInstructions:\n1. Crack eggs\n2. Cook in pan"
    )

    assert result.title == "Best Eggs"
    assert result.ingredients == ["2 eggs", "salt"]
    assert result.instructions == ["Crack eggs", "Cook in pan"]
    assert result.confidence > 0.7
    assert result.mode == "headers"


def test_parse_empty_text():
    result = parse_freeform("")

    assert result.ingredients == []
    assert result.instructions == []
    assert result.confidence == 0
    assert result.title is None


@pytest.mark.parametrize("value", [None, 42, "   \n\n  \t", {"text": "x"}])
def test_parse_garbage_is_total(value):
    """Test: entradas que no son texto útil devuelven listas vacías."""
    result = parse_freeform(value)

    assert result.ingredients == []
    assert result.instructions == []
    assert result.confidence == 0


def test_parse_crlf_and_markdown_headers():
    text = "Pancakes\r\n## Ingredients\r\n* 1 cup flour\r\n* 1 egg\r\n## Directions\r\n1) Mix\r\n2) Fry"
    result = parse_freeform(text)

    assert result.mode == "headers"
    assert result.title == "Pancakes"
    assert result.ingredients == ["1 cup flour", "1 egg"]
    assert result.instructions == ["Mix", "Fry"]


def test_parse_only_ingredients_header_switches_to_instructions():
    """Test: sin encabezado de instrucciones, la primera línea no-ingrediente abre los pasos."""
    text = "Toast\nIngredients\n- 2 slices bread\n- butter\nToast the bread until golden.\nSpread butter on top."
    result = parse_freeform(text)

    assert result.ingredients == ["2 slices bread", "butter"]
    assert result.instructions == ["Toast the bread until golden.", "Spread butter on top."]


def test_parse_only_instructions_header_takes_ingredients_from_preamble():
    text = "Salad\n- 1 lettuce\n- 2 tomatoes\nMethod:\nChop everything\nToss with oil"
    result = parse_freeform(text)

    assert result.title == "Salad"
    assert result.ingredients == ["1 lettuce", "2 tomatoes"]
    assert result.instructions == ["Chop everything", "Toss with oil"]


def test_parse_headers_without_content_has_zero_confidence():
    result = parse_freeform("Ingredients:\nInstructions:")

    assert result.ingredients == []
    assert result.instructions == []
    assert result.confidence == 0


def test_parse_fallback_markers():
    """Test: sin encabezados se clasifica por marcadores."""
    text = "Quick Omelette\n- 3 eggs\n- 1 tbsp butter\n1. Beat the eggs\n2. Melt butter and cook"
    result = parse_freeform(text)

    assert result.mode == "markers"
    assert result.title == "Quick Omelette"
    assert result.ingredients == ["3 eggs", "1 tbsp butter"]
    assert result.instructions == ["Beat the eggs", "Melt butter and cook"]
    assert 0 < result.confidence <= 0.7


def test_parse_markers_prose_continues_instructions():
    text = "Stir the sauce\nIt will thicken slowly."
    result = parse_freeform(text)

    assert result.instructions == ["Stir the sauce", "It will thicken slowly."]
    assert result.ingredients == []


def test_parse_prose_without_signals():
    result = parse_freeform("Just some thoughts about dinner.\nNothing to see here.")

    assert result.ingredients == []
    assert result.instructions == []
    assert result.confidence == 0


def test_parse_is_deterministic():
    text = "Soup\nIngredients\n- 1 onion\nSteps\n1. Chop onion\n2. Simmer 20 minutes"
    assert parse_freeform(text) == parse_freeform(text)


def test_parse_confidence_bounds():
    text = "\n".join(["Ingredients:"] + [f"- {i} cups water" for i in range(1, 50)] + ["Steps:", "1. Boil"])
    result = parse_freeform(text)

    assert 0 <= result.confidence <= 1


def test_parse_long_first_line_is_not_title():
    long_line = "This is a very long introduction " * 5
    result = parse_freeform(f"{long_line}\nIngredients:\n- 1 egg\nSteps:\n1. Boil")

    assert result.title is None


def test_parse_title_max_length_override():
    result = parse_freeform("Short\nIngredients:\n- 1 egg", title_max_length=3)

    assert result.title is None


def test_strip_list_prefix():
    assert strip_list_prefix("- 2 eggs") == "2 eggs"
    assert strip_list_prefix("• salt") == "salt"
    assert strip_list_prefix("3) Cook") == "Cook"
    assert strip_list_prefix("Step 4: Serve") == "Serve"
    assert strip_list_prefix("plain") == "plain"


def test_classify_line():
    assert classify_line("1. Crack eggs") == "instruction"
    assert classify_line("Preheat the oven") == "instruction"
    assert classify_line("2 cups flour") == "ingredient"
    assert classify_line("½ tsp salt") == "ingredient"
    assert classify_line("- parsley") == "ingredient"
    assert classify_line("Grandma's favourite") is None


def test_is_ingredient_like():
    assert is_ingredient_like("200g flour")
    assert is_ingredient_like("- salt")
    assert not is_ingredient_like("- Stir well")
    assert not is_ingredient_like("1. Boil water")

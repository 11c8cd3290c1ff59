"""
Tests de la inferencia de capacidades desde el contenido.
"""

from dataclasses import replace

from soustack_lite.compiler import compile_recipe
from soustack_lite.inference import detect_time_patterns, infer_capabilities, suggest_capabilities


def test_infer_from_content_shape():
    doc = compile_recipe({
        "ingredients": [
            {"name": "flour", "quantity": 2, "unit": "cup"},
            {"name": "salt", "scaling": {"mode": "fixed"}},
        ],
        "instructions": [
            {"text": "Mix", "inputs": ["flour", "salt"]},
            {"text": "Bake", "timing": {"duration": {"minutes": 30}}},
        ],
    })
    doc = replace(doc, extensions={"prepItems": [{"text": "sift flour"}], "storage": {"method": "airtight"}})

    assert infer_capabilities(doc) == {
        "prep": 1,
        "timed": 1,
        "storage": 1,
        "scaling": 1,
        "structured": 1,
        "referenced": 1,
    }


def test_infer_ignores_declared_stacks():
    doc = replace(compile_recipe({"ingredients": ["salt"]}), stacks={"timed": 1, "equipment": 1})

    assert infer_capabilities(doc) == {}


def test_infer_plain_document():
    assert infer_capabilities(compile_recipe({"instructions": ["Cook"]})) == {}


def test_detect_time_patterns():
    assert detect_time_patterns(compile_recipe({"instructions": ["Simmer for 10 minutes"]}))
    assert detect_time_patterns(compile_recipe({"instructions": ["Bake until golden"]}))
    assert not detect_time_patterns(compile_recipe({"instructions": ["Serve"]}))


def test_suggestions_skip_enabled_capabilities():
    doc = compile_recipe({
        "ingredients": [{"name": "flour", "quantity": 2}],
        "instructions": ["Bake 25 min"],
    })

    assert suggest_capabilities(doc) == ["timed", "structured"]

    declared = replace(doc, stacks={"timed": 1})
    assert suggest_capabilities(declared) == ["structured"]

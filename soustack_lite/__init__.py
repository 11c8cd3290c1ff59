"""
soustack_lite
=============

Núcleo del documento de recetas Soustack Lite:

- `parse_freeform`: texto libre → ParseResult (heurístico, nunca lanza).
- `compile_recipe`: seed → Document canónico siempre válido.
- `normalize_document`: JSON arbitrario → Document (migra stacks legacy).
- `compute_mise_checks` / `infer_capabilities`: avisos y sugerencias.

La persistencia (SQLAlchemy) vive en `soustack_lite.db` y la API HTTP en el
paquete `api`.
"""

from __future__ import annotations

from .checks import compute_mise_checks
from .compiler import compile_recipe
from .domain_models import Document, MiseCheck, ParseResult, PlainText, Section, Structured
from .engine import convert_text, normalize_document
from .inference import infer_capabilities, suggest_capabilities
from .parser import parse_freeform
from .stacks import STACK_KEYS, migrate

__all__ = [
    "Document",
    "PlainText",
    "Structured",
    "Section",
    "ParseResult",
    "MiseCheck",
    "STACK_KEYS",
    "parse_freeform",
    "compile_recipe",
    "convert_text",
    "normalize_document",
    "migrate",
    "compute_mise_checks",
    "infer_capabilities",
    "suggest_capabilities",
]

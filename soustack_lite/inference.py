"""
Inferencia implícita de capacidades a partir de la forma del contenido.

Es una proyección de solo lectura, alternativa al flujo "declarar y después
completar" de `stacks.py`: mira únicamente el contenido e ignora los stacks
declarados. No escribe `stacks`; `suggest_capabilities` la expone como capa
de sugerencias para la UI.
"""

from __future__ import annotations

import re
from typing import Dict, List

from .domain_models import Document, PlainText, Structured, iter_leaf_items
from .stacks import DECLARED, STACK_KEYS, is_enabled

TIME_PATTERNS = (
    re.compile(r"\d+\s*(min|mins|minute|minutes|hr|hrs|hour|hours)\b", re.IGNORECASE),
    re.compile(r"\d+\s*-\s*\d+\s*(min|minute|minutes)\b", re.IGNORECASE),
    re.compile(r"\bfor\s+\d+", re.IGNORECASE),
    re.compile(r"\buntil\s+(golden|brown|tender|done|cooked)\b", re.IGNORECASE),
    re.compile(r"\b(bake|cook|simmer)\s+\d+", re.IGNORECASE),
)

STRUCTURED_INGREDIENT_FIELDS = ("quantity", "unit")


def infer_capabilities(doc: Document) -> Dict[str, int]:
    """
    Deriva un mapa de capacidades solo desde el contenido.

    - ingrediente estructurado (quantity/unit/name) ⇒ structured
    - ingrediente con `scaling` ⇒ scaling
    - instrucción con `timing` ⇒ timed
    - instrucción con `inputs` no vacío ⇒ referenced
    - instrucción estructurada ⇒ structured
    - `extensions.prepItems` no vacío ⇒ prep
    - `extensions.storage` no vacío ⇒ storage
    """
    caps: Dict[str, int] = {}
    ingredients = iter_leaf_items(doc.ingredients)
    instructions = iter_leaf_items(doc.instructions)

    for item in ingredients:
        if not isinstance(item, Structured):
            continue
        if any(k in item.fields for k in STRUCTURED_INGREDIENT_FIELDS) or item.name:
            caps["structured"] = DECLARED
        if item.fields.get("scaling") is not None:
            caps["scaling"] = DECLARED

    for item in instructions:
        if not isinstance(item, Structured):
            continue
        if item.text:
            caps["structured"] = DECLARED
        if item.fields.get("timing") is not None:
            caps["timed"] = DECLARED
        if item.inputs:
            caps["referenced"] = DECLARED

    prep = doc.extensions.get("prepItems")
    if isinstance(prep, list) and prep:
        caps["prep"] = DECLARED

    storage = doc.extensions.get("storage")
    if isinstance(storage, dict) and storage:
        caps["storage"] = DECLARED

    return {name: caps[name] for name in STACK_KEYS if name in caps}


def detect_time_patterns(doc: Document) -> bool:
    """
    True si algún paso menciona duraciones ("10 minutes", "bake 30",
    "until golden").
    """
    for item in iter_leaf_items(doc.instructions):
        if isinstance(item, PlainText):
            text = item.text
        elif isinstance(item, Structured):
            text = item.text
        else:
            continue
        if any(p.search(text) for p in TIME_PATTERNS):
            return True
    return False


def suggest_capabilities(doc: Document) -> List[str]:
    """
    Capacidades que el contenido sugiere y que todavía no están declaradas.

    Es solo una sugerencia: quien la consuma decide si llama a
    `stacks.enable`.
    """
    suggested = set(infer_capabilities(doc))
    if detect_time_patterns(doc):
        suggested.add("timed")
    return [name for name in STACK_KEYS if name in suggested and not is_enabled(doc.stacks, name)]

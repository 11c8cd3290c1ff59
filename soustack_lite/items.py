"""
Normalizador de ítems de contenido (ingredientes / instrucciones).

Clasifica un valor arbitrario en exactamente una variante de `Item`:

1) instancia de `Item`      → se devuelve tal cual (idempotencia)
2) str                      → PlainText
3) {"section": {"items"}}   → Section (hijos normalizados recursivamente)
4) {"section": str, "steps"} (forma legacy) → Section canónica
5) objeto con campo principal ("name" / "text") → Structured, todos los
   campos preservados verbatim
6) cualquier otra cosa      → texto (PlainText)

También implementa la regla de write-back: después de editar una lista se
descartan entradas vacías/placeholder y, si no queda nada, se sustituye por
`[PlainText(PLACEHOLDER)]`.
"""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from .domain_models import (
    PLACEHOLDER,
    PRIMARY_FIELDS,
    Item,
    ItemContext,
    PlainText,
    Section,
    Structured,
)


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False, sort_keys=True, default=str)
    except (TypeError, ValueError, RecursionError):
        # claves no comparables o referencias circulares
        return str(value)


def _rest(value: Mapping[str, Any], consumed: Tuple[str, ...]) -> Dict[str, Any]:
    return {k: v for k, v in value.items() if k not in consumed}


def normalize_item(value: Any, context: ItemContext) -> Item:
    """
    Clasifica un valor en PlainText / Structured / Section. Nunca lanza.
    """
    if isinstance(value, (PlainText, Structured, Section)):
        return value

    if isinstance(value, str):
        return PlainText(value)

    if isinstance(value, Mapping):
        section = value.get("section")
        if isinstance(section, Mapping) and isinstance(section.get("items"), (list, tuple)):
            return Section(
                name=_stringify(section.get("name")).strip(),
                items=tuple(normalize_items(section["items"], context)),
                section_fields=_rest(section, ("name", "items")),
                extra=_rest(value, ("section",)),
            )

        if isinstance(section, str):
            children_key = "steps" if isinstance(value.get("steps"), (list, tuple)) else "items"
            children = value.get(children_key)
            if isinstance(children, (list, tuple)):
                return Section(
                    name=section.strip(),
                    items=tuple(normalize_items(children, context)),
                    extra=_rest(value, ("section", children_key)),
                )

        primary = PRIMARY_FIELDS[context]
        if primary in value:
            return Structured(kind=context, fields=dict(value))

    return PlainText(_stringify(value))


def normalize_items(values: Any, context: ItemContext) -> List[Item]:
    """
    Normaliza una lista completa. Lo que no sea list/tuple se trata como vacío.
    """
    if not isinstance(values, (list, tuple)):
        return []
    return [normalize_item(v, context) for v in values]


def is_blank(item: Item) -> bool:
    """
    True si el ítem no representa contenido real (vacío o placeholder).
    """
    if isinstance(item, PlainText):
        text = item.text.strip()
        return not text or text == PLACEHOLDER
    if isinstance(item, Structured):
        text = item.primary.strip()
        return not text or text == PLACEHOLDER
    if isinstance(item, Section):
        # una sección sin hijos con contenido no cuenta, aunque tenga nombre
        return all(is_blank(child) for child in item.items)
    return True


def filter_items(items: Iterable[Item]) -> List[Item]:
    """
    Descarta entradas vacías/placeholder, también dentro de las secciones.
    """
    out: List[Item] = []
    for item in items:
        if isinstance(item, Section):
            children = tuple(filter_items(item.items))
            if children != item.items:
                item = replace(item, items=children)
        if not is_blank(item):
            out.append(item)
    return out


def finalize_items(items: Iterable[Item]) -> List[Item]:
    """
    Regla de write-back: filtrar y garantizar que la lista nunca quede vacía.
    """
    kept = filter_items(items)
    return kept if kept else [PlainText(PLACEHOLDER)]


def prepare_items(values: Any, context: ItemContext) -> List[Item]:
    """
    Pipeline completo: coerción a lista → normalización → write-back.
    """
    return finalize_items(normalize_items(values, context))


def item_to_wire(item: Item) -> Any:
    return item.to_wire()


def items_to_wire(items: Iterable[Item]) -> List[Any]:
    return [item_to_wire(item) for item in items]

from __future__ import annotations

"""
soustack_lite.engine
====================

Orquestador de alto nivel del core Soustack Lite.

Este módulo expone una **API interna** y estable para los flujos completos,
sin preocuparse por HTTP, base de datos ni UI:

- `convert_text`: texto pegado → parser → compilador → Document.
- `normalize_document`: documento JSON entrante (posiblemente legacy) →
  Document válido y migrado. Memoizado por identidad del objeto entrante.
- Ediciones (`set_ingredients`, `set_instructions`, `edit_item_field`,
  `toggle_capability`, `set_extension`): cada una devuelve un Document nuevo
  y restablece las mismas invariantes que el compilador.

Flujo unidireccional
--------------------
El llamador es dueño del único Document canónico. Las vistas son
proyecciones puras y las ediciones vuelven como pedidos a este módulo; nadie
guarda copias locales "autoritativas" de las listas.
"""

import logging
from collections import OrderedDict
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple, TypedDict

from .compiler import build_provenance, clean_description, clean_name, compile_recipe
from .config import get_settings
from .domain_models import (
    DEFAULT_PROFILE,
    EXTENSIONS_KEY,
    FORMAT_ID,
    Document,
    ParseResult,
    PlainText,
    Structured,
)
from .items import normalize_item, prepare_items, finalize_items
from .parser import parse_freeform
from .stacks import disable, enable, plan_migration

logger = logging.getLogger(__name__)

KNOWN_KEYS = frozenset({
    "$schema", "profile", "stacks", "name", "description",
    "ingredients", "instructions", EXTENSIONS_KEY,
})

# Campos top-level de documentos viejos que hoy viven en extensions
LEGACY_TOP_LEVEL: Dict[str, str] = {
    "miseEnPlace": "prepItems",
    "storage": "storage",
    "equipment": "equipment",
}


class ConversionResult(TypedDict):
    """
    Resultado de `convert_text`.

    Estructura simple y serializable, pensada para devolver a la capa HTTP o
    hacer asserts en tests.
    """

    parse: ParseResult
    """Resultado crudo del parser (título, listas, confianza, modo)."""

    document: Document
    """Documento compilado, siempre válido."""


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ============================================================
# Texto libre → Document
# ============================================================

def convert_text(text: Any, *, source: str = "paste", keep_prose: bool = True) -> ConversionResult:
    """
    Ejecuta el flujo texto → parser → compilador.

    Args:
        text:
            Texto arbitrario. Nunca hace fallar la conversión.
        source:
            Origen del texto ("paste" | "upload" | "manual"). Queda en la
            procedencia junto a confidence/mode.
        keep_prose:
            Si True, guarda el texto original en `extensions["prose"]`.

    Returns:
        ConversionResult con el ParseResult y el Document compilado.
    """
    result = parse_freeform(text)
    document = compile_recipe(result.to_seed())

    extensions = dict(document.extensions)
    extensions["parse"] = {**extensions.get("parse", {}), "source": source}
    if keep_prose and isinstance(text, str) and text.strip():
        extensions["prose"] = {"text": text, "format": "plain", "capturedAt": now_iso()}
    document = replace(document, extensions=extensions)

    logger.info(
        "Texto convertido (%s): mode=%s confidence=%.2f",
        source,
        result.mode,
        result.confidence,
    )
    return ConversionResult(parse=result, document=document)


# ============================================================
# JSON entrante → Document (migración + memo)
# ============================================================

def _merge_lists(existing: Any, relocated: List[Any]) -> List[Any]:
    current = list(existing) if isinstance(existing, list) else []
    for entry in relocated:
        if entry not in current:
            current.append(entry)
    return current


def document_from_dict(raw: Any) -> Tuple[Document, bool]:
    """
    Construye un Document válido desde su forma JSON. Nunca lanza.

    Aplica las mismas reglas de campo que el compilador, pero conserva
    `stacks` (migrados), `extensions`, el perfil y las claves desconocidas.

    Returns:
        (document, migrated): `migrated` es True si algo legacy cambió de lugar
        (stacks o campos top-level), es decir, si conviene persistir.
    """
    if isinstance(raw, Document):
        return raw, False
    data: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

    extensions: Dict[str, Any] = {}
    raw_ext = data.get(EXTENSIONS_KEY)
    if isinstance(raw_ext, Mapping):
        extensions.update(raw_ext)
        # una procedencia que no es mapping queda tal cual (bolsa opaca)
        provenance = build_provenance(extensions.get("parse"))
        if provenance is not None:
            extensions["parse"] = {**extensions["parse"], **provenance}

    # si el destino ya existe y no se puede fusionar, el campo legacy queda en
    # `extra` y se escribe de vuelta sin tocar
    migrated = False
    lifted: List[str] = []
    for legacy_key, target in LEGACY_TOP_LEVEL.items():
        if legacy_key not in data:
            continue
        payload = data[legacy_key]
        current = extensions.get(target)
        if target not in extensions:
            extensions[target] = payload
        elif isinstance(current, list) and isinstance(payload, list):
            extensions[target] = _merge_lists(current, payload)
        else:
            continue
        lifted.append(legacy_key)
        migrated = True

    raw_stacks = data.get("stacks")
    stacks: Mapping[str, Any] = raw_stacks if isinstance(raw_stacks, Mapping) else {}
    migration = plan_migration(stacks)
    if migration.stacks is not stacks:
        migrated = True
    for target, payload in migration.relocations.items():
        if payload:
            extensions[target] = _merge_lists(extensions.get(target), payload)

    profile = data.get("profile")
    extra = {
        k: v for k, v in data.items()
        if isinstance(k, str) and k not in KNOWN_KEYS and k not in lifted
    }

    document = Document(
        name=clean_name(data.get("name")),
        description=clean_description(data.get("description")),
        ingredients=prepare_items(data.get("ingredients"), "ingredient"),
        instructions=prepare_items(data.get("instructions"), "instruction"),
        stacks=dict(migration.stacks),
        profile=profile if isinstance(profile, str) and profile else DEFAULT_PROFILE,
        format_id=FORMAT_ID,
        extensions=extensions,
        extra=extra,
    )
    return document, migrated


class IdentityMemo:
    """
    Memo LRU acotado, indexado por identidad (`id()`) del objeto entrante.

    Guarda una referencia al objeto de entrada junto al resultado, así el
    `id()` no puede reutilizarse mientras la entrada siga en el memo.
    """

    def __init__(self, maxsize: int = 128):
        self.maxsize = maxsize
        self._entries: "OrderedDict[int, Tuple[Any, Document]]" = OrderedDict()

    def get(self, key_obj: Any) -> Optional[Document]:
        entry = self._entries.get(id(key_obj))
        if entry is None or entry[0] is not key_obj:
            return None
        self._entries.move_to_end(id(key_obj))
        return entry[1]

    def put(self, key_obj: Any, value: Document) -> None:
        self._entries[id(key_obj)] = (key_obj, value)
        self._entries.move_to_end(id(key_obj))
        while len(self._entries) > self.maxsize:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


_normalize_memo = IdentityMemo(maxsize=get_settings().normalize_cache_size)


def normalize_document(raw: Any) -> Document:
    """
    Normaliza (y migra) un documento entrante una sola vez por identidad.

    Llamar dos veces con el MISMO objeto devuelve el mismo Document sin volver
    a correr la migración; un objeto distinto (aunque igual en contenido) se
    normaliza de nuevo.
    """
    if isinstance(raw, Document):
        return raw
    cached = _normalize_memo.get(raw)
    if cached is not None:
        return cached

    document, migrated = document_from_dict(raw)
    if migrated:
        logger.debug("Documento '%s' migrado desde forma legacy", document.name)
    _normalize_memo.put(raw, document)
    return document


def clear_normalize_cache() -> None:
    _normalize_memo.clear()


# ============================================================
# Ediciones (siempre devuelven un Document nuevo)
# ============================================================

def set_ingredients(doc: Document, items: Any) -> Document:
    """Reemplaza ingredientes aplicando la regla de write-back."""
    return replace(doc, ingredients=prepare_items(items, "ingredient"))


def set_instructions(doc: Document, items: Any) -> Document:
    """Reemplaza instrucciones aplicando la regla de write-back."""
    return replace(doc, instructions=prepare_items(items, "instruction"))


def set_name(doc: Document, name: Any) -> Document:
    return replace(doc, name=clean_name(name))


def set_description(doc: Document, description: Any) -> Document:
    return replace(doc, description=clean_description(description))


def edit_item_field(doc: Document, area: str, index: int, key: str, value: Any) -> Document:
    """
    Edita un campo de un ítem estructurado de nivel superior.

    El resto de los campos (incluidos los desconocidos) queda igual. Si el
    ítem no es estructurado, o el índice no existe, devuelve `doc` sin
    cambios. Después de editar, la lista pasa por la regla de write-back.

    Args:
        area: "ingredients" | "instructions".
    """
    if area not in ("ingredients", "instructions"):
        return doc
    items = list(getattr(doc, area))
    if not 0 <= index < len(items) or not isinstance(items[index], Structured):
        return doc

    items[index] = items[index].with_field(key, value)
    return replace(doc, **{area: finalize_items(items)})


def convert_item_to_structured(doc: Document, area: str, index: int) -> Document:
    """
    Convierte un ítem de texto en estructurado (`{"name": ...}` o `{"text": ...}`).
    """
    if area not in ("ingredients", "instructions"):
        return doc
    context = "ingredient" if area == "ingredients" else "instruction"
    items = list(getattr(doc, area))
    if not 0 <= index < len(items):
        return doc
    item = items[index]
    if not isinstance(item, PlainText):
        return doc
    primary = "name" if context == "ingredient" else "text"
    items[index] = normalize_item({primary: item.text}, context)
    return replace(doc, **{area: finalize_items(items)})


def toggle_capability(doc: Document, name: str, enabled: bool) -> Document:
    """
    Declara o quita una capacidad. Solo cambia `stacks`: ingredientes,
    instrucciones y extensions quedan intactos.
    """
    stacks = enable(doc.stacks, name) if enabled else disable(doc.stacks, name)
    return replace(doc, stacks=stacks)


def set_extension(doc: Document, key: str, value: Any) -> Document:
    """
    Reemplaza una entrada de `extensions` (p.ej. "prepItems", "storage").
    Un valor vacío (None, [], {}, "") la elimina.
    """
    extensions = dict(doc.extensions)
    if value is None or value == [] or value == {} or value == "":
        extensions.pop(key, None)
    else:
        extensions[key] = value
    return replace(doc, extensions=extensions)


def recompile(doc: Document, seed: Any) -> Document:
    """
    Recompila desde un seed preservando explícitamente stacks y extensions
    del documento previo (el compilador nunca los inventa).
    """
    fresh = compile_recipe(seed)
    extensions = {**doc.extensions, **fresh.extensions}
    return replace(fresh, stacks=dict(doc.stacks), extensions=extensions, extra=dict(doc.extra))

from __future__ import annotations

"""
soustack_lite.domain_models
===========================

Modelos de dominio (dataclasses) del documento Soustack Lite.

Objetivo
--------
Este módulo define las estructuras "neutras" que recorren todo el core:

- Ítems de contenido (`PlainText`, `Structured`, `Section`): una suma cerrada,
  se distinguen con `isinstance`, nunca por la forma del dict.
- Tiempos de un paso (`Timing`, `ExactDuration`, `RangeDuration`).
- El documento completo (`Document`) y su forma JSON (`to_dict`).
- Resultados auxiliares: `ParseResult` (parser libre) y `MiseCheck` (checker).

Principios de diseño
--------------------
- Sin IO ni lógica pesada: normalizar, compilar y migrar vive en otros módulos.
- Los documentos no se mutan: cada edición produce un `Document` nuevo
  (`dataclasses.replace`).
- `Structured.fields` guarda el mapping original completo, así cualquier campo
  desconocido para esta versión del schema sobrevive a cada pasada.

Forma en el wire
----------------
El único formato de serialización es el JSON del propio documento::

    {
      "$schema": "...", "profile": "lite", "stacks": {...},
      "name": "...", "description": "...",
      "ingredients": [...], "instructions": [...],
      "x-mise": {"parse": {...}, "prose": {...}, "prepItems": [...], "storage": {...}}
    }
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple, Union


# ============================================================
# Constantes del formato
# ============================================================

FORMAT_ID = "https://soustack.spec/soustack.schema.json"
"""Identificador fijo del formato (se serializa como `$schema`)."""

DEFAULT_PROFILE = "lite"
DEFAULT_NAME = "Untitled Recipe"

PLACEHOLDER = "(not provided)"
"""Texto reservado que mantiene las listas no vacías sin representar contenido."""

EXTENSIONS_KEY = "x-mise"
"""Clave del wire bajo la que se serializa `Document.extensions`."""

ItemContext = Literal["ingredient", "instruction"]

PRIMARY_FIELDS: Dict[str, str] = {
    "ingredient": "name",
    "instruction": "text",
}
"""Campo principal que convierte un objeto en `Structured` según el contexto."""


# ============================================================
# Ítems de contenido
# ============================================================

@dataclass(frozen=True)
class PlainText:
    """
    Ítem de texto libre ("2 eggs", "Crack eggs").
    """
    text: str

    def to_wire(self) -> Any:
        return self.text


@dataclass(frozen=True)
class Structured:
    """
    Ítem estructurado (ingrediente u instrucción como objeto).

    Attributes:
        kind:
            "ingredient" | "instruction". Define cuál es el campo principal.

        fields:
            Mapping completo del objeto, tal cual llegó. Incluye los campos
            conocidos (name/quantity/unit/scaling, id/text/timing/inputs) y
            cualquier campo desconocido, que se preserva verbatim.
    """
    kind: str
    fields: Dict[str, Any]

    @property
    def primary(self) -> str:
        value = self.fields.get(PRIMARY_FIELDS.get(self.kind, "name"))
        return value if isinstance(value, str) else ("" if value is None else str(value))

    # --- ingredientes ---
    @property
    def name(self) -> str:
        value = self.fields.get("name")
        return value if isinstance(value, str) else ""

    @property
    def quantity(self) -> Any:
        return self.fields.get("quantity")

    @property
    def unit(self) -> Optional[str]:
        value = self.fields.get("unit")
        return value if isinstance(value, str) else None

    @property
    def scaling_mode(self) -> Optional[str]:
        scaling = self.fields.get("scaling")
        if isinstance(scaling, dict) and isinstance(scaling.get("mode"), str):
            return scaling["mode"]
        return None

    # --- instrucciones ---
    @property
    def id(self) -> Optional[str]:
        value = self.fields.get("id")
        return value if isinstance(value, str) else None

    @property
    def text(self) -> str:
        value = self.fields.get("text")
        return value if isinstance(value, str) else ""

    @property
    def timing(self) -> Optional["Timing"]:
        return Timing.from_raw(self.fields.get("timing"))

    @property
    def inputs(self) -> List[str]:
        value = self.fields.get("inputs")
        if not isinstance(value, list):
            return []
        return [str(v) for v in value]

    def with_field(self, key: str, value: Any) -> "Structured":
        """Devuelve una copia con `key` reemplazado; el resto de los campos queda igual."""
        return Structured(kind=self.kind, fields={**self.fields, key: value})

    def to_wire(self) -> Any:
        return dict(self.fields)


@dataclass(frozen=True)
class Section:
    """
    Grupo nombrado de ítems ("For the sauce": [...]).

    En la práctica hay un solo nivel de anidamiento, pero la normalización es
    recursiva y no lo impone.

    Attributes:
        section_fields:
            Campos desconocidos dentro del objeto `section` (p.ej. `id`).
        extra:
            Campos desconocidos del objeto que envuelve a `section`.
    """
    name: str
    items: Tuple["Item", ...] = ()
    section_fields: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_wire(self) -> Any:
        section = {**self.section_fields, "name": self.name, "items": [i.to_wire() for i in self.items]}
        return {**self.extra, "section": section}


Item = Union[PlainText, Structured, Section]
IngredientItem = Item
InstructionItem = Item


def iter_leaf_items(items: List[Item]) -> List[Item]:
    """
    Aplana secciones: devuelve los ítems no-sección en orden de documento.
    """
    out: List[Item] = []
    for item in items:
        if isinstance(item, Section):
            out.extend(iter_leaf_items(list(item.items)))
        else:
            out.append(item)
    return out


# ============================================================
# Tiempos de un paso
# ============================================================

@dataclass(frozen=True)
class ExactDuration:
    minutes: float


@dataclass(frozen=True)
class RangeDuration:
    min_minutes: float
    max_minutes: float


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


@dataclass(frozen=True)
class Timing:
    """
    Vista tipada de `instruction.timing`.

    Solo se usa para leer: el dict original queda intacto dentro de
    `Structured.fields["timing"]`.
    """
    duration: Union[ExactDuration, RangeDuration]
    activity: Optional[Literal["active", "passive"]] = None
    completion_cue: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["Timing"]:
        """
        Lee un timing desde JSON. Devuelve None si no hay una duración usable.

        Acepta `{"duration": {"minutes": n}}`, `{"duration": {"minMinutes",
        "maxMinutes"}}` y la forma plana `{"minutes": n}` que producen algunos
        conversores.
        """
        if not isinstance(raw, dict):
            return None

        source = raw.get("duration") if isinstance(raw.get("duration"), dict) else raw
        duration: Union[ExactDuration, RangeDuration, None] = None
        minutes = _number(source.get("minutes"))
        if minutes is not None:
            duration = ExactDuration(minutes=minutes)
        else:
            lo = _number(source.get("minMinutes"))
            hi = _number(source.get("maxMinutes"))
            if lo is not None and hi is not None:
                duration = RangeDuration(min_minutes=min(lo, hi), max_minutes=max(lo, hi))
        if duration is None:
            return None

        activity = raw.get("activity")
        cue = raw.get("completionCue")
        return cls(
            duration=duration,
            activity=activity if activity in ("active", "passive") else None,
            completion_cue=cue if isinstance(cue, str) and cue.strip() else None,
        )


# ============================================================
# Documento
# ============================================================

@dataclass(frozen=True)
class Document:
    """
    Documento Soustack Lite (siempre válido cuando lo emite el core).

    Attributes:
        name:
            Nombre de la receta. Nunca vacío luego de `strip()`.

        ingredients / instructions:
            Listas nunca vacías de ítems; `PLACEHOLDER` representa "sin contenido".

        stacks:
            Mapa de capacidades: `"timed": 1` (declaración) o claves legacy
            `"prep@1": <payload>` pendientes de migración.

        profile / format_id:
            Perfil de validación ("lite") e identificador fijo del formato.

        description:
            Descripción opcional (solo strings no vacíos).

        extensions:
            Bolsa opaca con nombre (`x-mise` en el wire): `parse`, `prose`,
            `prepItems`, `storage`, `equipment`.

        extra:
            Claves top-level desconocidas de un documento entrante. Se escriben
            de vuelta sin tocarlas.
    """
    name: str
    ingredients: List[Item]
    instructions: List[Item]
    stacks: Dict[str, Any] = field(default_factory=dict)
    profile: str = DEFAULT_PROFILE
    format_id: str = FORMAT_ID
    description: Optional[str] = None
    extensions: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """
        Devuelve la forma JSON del documento (única serialización del formato).
        """
        out: Dict[str, Any] = dict(self.extra)
        out.update({
            "$schema": self.format_id,
            "profile": self.profile,
            "stacks": dict(self.stacks),
            "name": self.name,
        })
        if self.description:
            out["description"] = self.description
        out["ingredients"] = [i.to_wire() for i in self.ingredients]
        out["instructions"] = [i.to_wire() for i in self.instructions]
        if self.extensions:
            out[EXTENSIONS_KEY] = dict(self.extensions)
        return out


# ============================================================
# Resultados auxiliares
# ============================================================

ParseMode = Literal["headers", "markers", "empty"]


@dataclass
class ParseResult:
    """
    Resultado del parser de texto libre.

    Attributes:
        title:
            Título candidato o None.
        ingredients / instructions:
            Líneas capturadas, sin prefijos de lista.
        confidence:
            0..1, crece con señales estructurales no ambiguas.
        mode:
            Camino que produjo el resultado ("headers" | "markers" | "empty").
            Solo diagnóstico.
    """
    title: Optional[str]
    ingredients: List[str]
    instructions: List[str]
    confidence: float
    mode: str

    def to_seed(self) -> Dict[str, Any]:
        """
        Construye el seed que consume `compile_recipe`.
        """
        return {
            "name": self.title,
            "ingredients": list(self.ingredients),
            "instructions": list(self.instructions),
            "meta": {"confidence": self.confidence, "mode": self.mode},
        }


Severity = Literal["info", "warning"]


@dataclass(frozen=True)
class MiseCheck:
    """
    Observación del checker de consistencia (solo consultiva).
    """
    id: str
    severity: Severity
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "severity": self.severity, "message": self.message}

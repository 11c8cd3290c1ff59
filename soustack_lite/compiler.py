"""
Compilador Lite: arma un `Document` completo y válido desde un seed parcial.

Es el único punto de paso de la garantía "siempre válido": cualquier camino
de edición o lo llama o reemplaza campos restableciendo las mismas
invariantes (ver `engine.py`).

Reglas
------
- name: `strip()`; si queda vacío (o no es str) → "Untitled Recipe".
- description: solo strings no vacíos.
- ingredients / instructions: coerción a lista, normalización ítem por ítem,
  descarte de vacíos/placeholder; si no queda nada → ["(not provided)"].
- stacks: siempre `{}`. El compilador nunca inventa declaraciones; preservar
  los stacks previos en una recompilación es responsabilidad del llamador.
- profile: "lite"; format_id fijo.
- meta: si viene, se guarda como procedencia en `extensions["parse"]`.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Mapping, Optional

from .domain_models import DEFAULT_NAME, DEFAULT_PROFILE, FORMAT_ID, Document
from .items import prepare_items


def clean_name(value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return DEFAULT_NAME


def clean_description(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def clamp_confidence(value: Any) -> float:
    """Lleva cualquier valor a un float en [0, 1]; lo no numérico vale 0.0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if math.isnan(value):
        return 0.0
    return float(min(1.0, max(0.0, value)))


def build_provenance(meta: Any) -> Optional[Dict[str, Any]]:
    """
    Procedencia del contenido (`{confidence, mode}`) o None si no hay meta.
    """
    if not isinstance(meta, Mapping):
        return None
    mode = meta.get("mode")
    return {
        "confidence": clamp_confidence(meta.get("confidence")),
        "mode": mode if isinstance(mode, str) and mode else "unknown",
    }


def compile_recipe(seed: Any = None) -> Document:
    """
    Compila un seed arbitrario en un documento Soustack Lite válido.

    Función total: ninguna entrada (None, campos nulos, listas que no son
    listas, tipos incorrectos) la hace lanzar.

    Args:
        seed:
            Mapping parcial `{name?, description?, ingredients?, instructions?, meta?}`.
            Cualquier otra cosa se trata como `{}`.

    Returns:
        Document con `stacks == {}` y `profile == "lite"`.
    """
    data: Mapping[str, Any] = seed if isinstance(seed, Mapping) else {}

    extensions: Dict[str, Any] = {}
    provenance = build_provenance(data.get("meta"))
    if provenance is not None:
        extensions["parse"] = provenance

    return Document(
        name=clean_name(data.get("name")),
        description=clean_description(data.get("description")),
        ingredients=prepare_items(data.get("ingredients"), "ingredient"),
        instructions=prepare_items(data.get("instructions"), "instruction"),
        stacks={},
        profile=DEFAULT_PROFILE,
        format_id=FORMAT_ID,
        extensions=extensions,
    )

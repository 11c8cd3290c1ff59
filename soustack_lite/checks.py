"""
Checker consultivo de consistencia entre capacidades declaradas y contenido.

`compute_mise_checks(doc)` es una función pura: recorre las capacidades
habilitadas, mira el área de contenido correspondiente y devuelve una lista
ordenada de `MiseCheck`. Nunca muta el documento ni bloquea nada.

Severidad:
- "warning": la capacidad no significa nada sin la pieza que falta.
- "info": hay una señal más blanda, o habilitar `structured` lo resolvería.
"""

from __future__ import annotations

from typing import Any, List, Mapping

from .domain_models import Document, MiseCheck, PlainText, Structured, iter_leaf_items
from .items import is_blank
from .stacks import is_enabled, legacy_payload

STORAGE_METHODS = ("refrigerated", "frozen", "roomTemp")
DURATION_KEYS = ("duration", "minDuration", "maxDuration")
METHOD_KEYS = ("method", "location")


def _has_text_items(entries: Any, key: str) -> bool:
    if not isinstance(entries, list):
        return False
    for entry in entries:
        if isinstance(entry, str) and entry.strip():
            return True
        if isinstance(entry, Mapping) and str(entry.get(key) or "").strip():
            return True
    return False


def _content(doc: Document, extension_key: str, stack_name: str) -> Any:
    # el contenido canónico vive en extensions; un payload legacy sin migrar
    # también cuenta como contenido
    value = doc.extensions.get(extension_key)
    if value is None:
        value = legacy_payload(doc.stacks, stack_name)
    return value


def _storage_state(storage: Any) -> tuple:
    if not isinstance(storage, Mapping):
        return False, False
    has_duration = any(k in storage for k in DURATION_KEYS)
    has_method = any(k in storage for k in METHOD_KEYS)
    for method in STORAGE_METHODS:
        entry = storage.get(method)
        if isinstance(entry, Mapping):
            has_method = True
            if any(k in entry for k in DURATION_KEYS):
                has_duration = True
    return has_duration, has_method


def compute_mise_checks(doc: Document) -> List[MiseCheck]:
    """
    Calcula las observaciones para un documento.

    Args:
        doc: Documento a inspeccionar (no se modifica).

    Returns:
        Lista ordenada de MiseCheck (vacía si todo es consistente).
    """
    checks: List[MiseCheck] = []
    stacks = doc.stacks
    instructions = [i for i in iter_leaf_items(doc.instructions) if not is_blank(i)]
    ingredients = [i for i in iter_leaf_items(doc.ingredients) if not is_blank(i)]
    plain_steps = [i for i in instructions if isinstance(i, PlainText)]
    structured_steps = [i for i in instructions if isinstance(i, Structured)]

    if is_enabled(stacks, "prep"):
        if not _has_text_items(_content(doc, "prepItems", "prep"), "text"):
            checks.append(MiseCheck(
                id="prep-empty",
                severity="info",
                message="Prep stack is enabled but mise en place list is empty. "
                        "Consider adding preparation steps.",
            ))

    if is_enabled(stacks, "storage"):
        has_duration, has_method = _storage_state(_content(doc, "storage", "storage"))
        if not has_duration and not has_method:
            checks.append(MiseCheck(
                id="storage-incomplete",
                severity="warning",
                message="Storage stack is enabled but missing duration or method information.",
            ))
        elif not has_duration:
            checks.append(MiseCheck(
                id="storage-no-duration",
                severity="info",
                message="Storage stack is enabled but missing duration information.",
            ))
        elif not has_method:
            checks.append(MiseCheck(
                id="storage-no-method",
                severity="info",
                message="Storage stack is enabled but missing storage method/location.",
            ))

    if is_enabled(stacks, "timed"):
        if plain_steps and not structured_steps:
            structured_on = is_enabled(stacks, "structured")
            checks.append(MiseCheck(
                id="timed-plain-strings",
                severity="info" if structured_on else "warning",
                message=(
                    "Timed stack is enabled but instructions contain plain strings. "
                    "Consider converting steps to structured format with timing information."
                    if structured_on else
                    "Timed stack is enabled but instructions are plain strings. "
                    "Consider enabling the structured stack or converting steps to include timing information."
                ),
            ))
        elif structured_steps and not any(s.timing for s in structured_steps):
            checks.append(MiseCheck(
                id="timed-missing-timing",
                severity="info",
                message="Timed stack is enabled but no step carries a timing duration yet.",
            ))

    if is_enabled(stacks, "referenced"):
        if structured_steps:
            if any(not s.inputs for s in structured_steps):
                checks.append(MiseCheck(
                    id="referenced-missing-inputs",
                    severity="warning",
                    message="Referenced stack is enabled but some structured steps are missing inputs[] array.",
                ))
        else:
            checks.append(MiseCheck(
                id="referenced-no-structured",
                severity="info",
                message="Referenced stack is enabled but instructions are not in structured format. "
                        "Consider converting steps to structured format with inputs[].",
            ))

    if is_enabled(stacks, "equipment"):
        if not _has_text_items(_content(doc, "equipment", "equipment"), "name"):
            checks.append(MiseCheck(
                id="equipment-empty",
                severity="info",
                message="Equipment stack is enabled but equipment list is empty. "
                        "Consider adding required equipment.",
            ))

    if is_enabled(stacks, "structured") and plain_steps:
        checks.append(MiseCheck(
            id="structured-plain-strings",
            severity="info",
            message="Structured stack is enabled but instructions contain plain strings. "
                    "Consider converting steps to structured format.",
        ))

    if is_enabled(stacks, "scaling"):
        if not any(isinstance(i, Structured) for i in ingredients):
            checks.append(MiseCheck(
                id="scaling-plain-ingredients",
                severity="info",
                message="Scaling stack is enabled but ingredients have no structured quantities to scale.",
            ))

    return checks

"""
Estado de trabajo de una receta (lo que se persiste por usuario).

Un `WorkbenchDoc` envuelve al `Document` canónico con el borrador de texto
crudo, el último import y un número de revisión. El documento público que se
publica es solo `recipe` (sin este envoltorio).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Literal, Mapping, Optional

from .compiler import compile_recipe
from .domain_models import Document
from .engine import convert_text, normalize_document, now_iso

DraftMode = Literal["raw", "structured"]


@dataclass(frozen=True)
class LastImport:
    source: str
    confidence: float
    mode: str
    at: str


@dataclass(frozen=True)
class Draft:
    """
    Borrador del editor.

    Attributes:
        mode: "raw" (editando texto) | "structured" (editando el documento).
        raw_text: Texto crudo; luego de convertir queda como snapshot.
        last_import: Procedencia de la última conversión, si hubo.
    """
    mode: DraftMode = "raw"
    raw_text: str = ""
    last_import: Optional[LastImport] = None


@dataclass(frozen=True)
class WorkbenchDoc:
    recipe: Document
    draft: Draft = field(default_factory=Draft)
    revision: int = 0
    updated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        draft: Dict[str, Any] = {"mode": self.draft.mode, "rawText": self.draft.raw_text}
        if self.draft.last_import is not None:
            li = self.draft.last_import
            draft["lastImport"] = {
                "source": li.source,
                "confidence": li.confidence,
                "mode": li.mode,
                "at": li.at,
            }
        return {
            "recipe": self.recipe.to_dict(),
            "draft": draft,
            "meta": {"revision": self.revision, "updatedAt": self.updated_at},
        }


def create_empty_workbench() -> WorkbenchDoc:
    """WorkbenchDoc nuevo con el documento de fallback siempre válido."""
    return WorkbenchDoc(recipe=compile_recipe({}), draft=Draft(), revision=0, updated_at=now_iso())


def apply_recipe(wb: WorkbenchDoc, recipe: Document) -> WorkbenchDoc:
    """
    Reemplaza el documento canónico y avanza la revisión.
    """
    return replace(wb, recipe=recipe, revision=wb.revision + 1, updated_at=now_iso())


def set_raw_text(wb: WorkbenchDoc, text: str) -> WorkbenchDoc:
    return replace(wb, draft=replace(wb.draft, mode="raw", raw_text=text if isinstance(text, str) else ""))


def import_text(wb: WorkbenchDoc, text: Any, source: str = "paste") -> WorkbenchDoc:
    """
    Convierte el texto y lo instala como documento canónico.

    Los stacks ya declarados se conservan: una conversión no borra las
    capacidades que el usuario eligió.
    """
    result = convert_text(text, source=source)
    recipe = replace(result["document"], stacks=dict(wb.recipe.stacks))
    parse = result["parse"]
    draft = Draft(
        mode="structured",
        raw_text=text if isinstance(text, str) else "",
        last_import=LastImport(
            source=source,
            confidence=parse.confidence,
            mode=parse.mode,
            at=now_iso(),
        ),
    )
    return replace(apply_recipe(wb, recipe), draft=draft)


def _int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return default


def workbench_from_dict(raw: Any) -> WorkbenchDoc:
    """
    Reconstruye un WorkbenchDoc desde JSON persistido. Nunca lanza: lo que
    falte o esté mal formado se reemplaza por defaults válidos.
    """
    data: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    recipe = normalize_document(data.get("recipe"))

    draft_raw = data.get("draft") if isinstance(data.get("draft"), Mapping) else {}
    mode = draft_raw.get("mode")
    last_import = None
    li = draft_raw.get("lastImport")
    if isinstance(li, Mapping):
        confidence = li.get("confidence")
        last_import = LastImport(
            source=str(li.get("source") or "manual"),
            confidence=float(confidence) if isinstance(confidence, (int, float)) and not isinstance(confidence, bool) else 0.0,
            mode=str(li.get("mode") or "unknown"),
            at=str(li.get("at") or ""),
        )
    raw_text = draft_raw.get("rawText")
    draft = Draft(
        mode=mode if mode in ("raw", "structured") else "raw",
        raw_text=raw_text if isinstance(raw_text, str) else "",
        last_import=last_import,
    )

    meta = data.get("meta") if isinstance(data.get("meta"), Mapping) else {}
    updated_at = meta.get("updatedAt")
    return WorkbenchDoc(
        recipe=recipe,
        draft=draft,
        revision=max(0, _int(meta.get("revision"))),
        updated_at=updated_at if isinstance(updated_at, str) else "",
    )

"""
Export JSON del documento (clipboard / descarga).

El JSON exportado es exactamente `Document.to_dict()` con pretty-print: no se
agrega ni transforma nada respecto de lo que produjo el compilador o la
normalización.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

from ..domain_models import Document


def export_json(doc: Union[Document, Dict[str, Any]], indent: int = 2) -> str:
    """
    Serializa el documento a JSON legible (UTF-8, sin escapar acentos).
    """
    payload = doc.to_dict() if isinstance(doc, Document) else doc
    return json.dumps(payload, ensure_ascii=False, indent=indent)


def write_json(doc: Union[Document, Dict[str, Any]], path: Path) -> Path:
    """
    Escribe el export en disco y devuelve la ruta escrita.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_json(doc) + "\n", encoding="utf-8")
    return path


def export_filename(doc: Document) -> str:
    """
    Nombre de archivo sugerido: `<slug>.soustack.json`.
    """
    slug = "".join(c if c.isalnum() else "-" for c in doc.name.lower())
    slug = "-".join(part for part in slug.split("-") if part) or "recipe"
    return f"{slug}.soustack.json"

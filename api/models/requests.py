"""
Modelos de request/response para la API.

Estos modelos definen la estructura esperada de los requests HTTP,
validando tipos y valores antes de pasarlos al core.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ImportSource(str, Enum):
    """Origen del texto convertido."""

    PASTE = "paste"
    UPLOAD = "upload"
    MANUAL = "manual"


class ConvertRequest(BaseModel):
    """
    Request para convertir texto libre a un documento.
    """

    text: str = Field(..., description="Texto de la receta (pegado o subido)")
    source: ImportSource = Field(default=ImportSource.PASTE, description="Origen del texto")
    keep_prose: bool = Field(default=True, description="Guardar el texto original en la extensión")


class ParseSummary(BaseModel):
    title: Optional[str] = None
    confidence: float
    mode: str
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)


class ConvertResponse(BaseModel):
    recipe: Dict[str, Any]
    parse: ParseSummary


class ChecksResponse(BaseModel):
    """
    Avisos de consistencia y capacidades inferidas/sugeridas (solo consultivo).
    """

    checks: List[Dict[str, str]] = Field(default_factory=list)
    inferred: Dict[str, int] = Field(default_factory=dict)
    suggestions: List[str] = Field(default_factory=list)


class SaveRecipeRequest(BaseModel):
    """
    Request para guardar (crear o actualizar) una receta.

    `workbench` es la forma JSON de un WorkbenchDoc; lo que falte o esté mal
    formado se reemplaza por defaults válidos al normalizar.
    """

    workbench: Dict[str, Any] = Field(default_factory=dict, description="WorkbenchDoc serializado")
    recipe_id: Optional[str] = Field(default=None, description="ID existente para actualizar")


class PublishRequest(BaseModel):
    is_public: bool = Field(default=True, description="Publicar (true) o despublicar (false)")


class RecipeSummary(BaseModel):
    id: str
    title: str
    is_public: bool
    public_id: Optional[str] = None
    published_at: Optional[str] = None
    updated_at: str

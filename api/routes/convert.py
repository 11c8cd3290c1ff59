"""
Endpoints sin estado sobre el core.

Este endpoint maneja:
- POST /api/v1/convert: texto libre → documento + resultado del parser
- POST /api/v1/compile: seed arbitrario → documento canónico
- POST /api/v1/checks: documento → avisos y capacidades sugeridas

Ninguno requiere autenticación ni toca la base de datos.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException

from soustack_lite.checks import compute_mise_checks
from soustack_lite.compiler import compile_recipe
from soustack_lite.engine import convert_text, normalize_document
from soustack_lite.inference import infer_capabilities, suggest_capabilities

from ..models.requests import ChecksResponse, ConvertRequest, ConvertResponse, ParseSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["convert"])


@router.post("/convert", response_model=ConvertResponse)
async def convert(request: ConvertRequest):
    """
    Convierte texto libre en un documento Soustack Lite.

    Returns:
        `recipe` (documento canónico) y `parse` (título, líneas, confianza, modo)
    """
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="EMPTY_TEXT")

    result = convert_text(request.text, source=request.source.value, keep_prose=request.keep_prose)
    parse = result["parse"]
    logger.info(f"Conversión: mode={parse.mode} confidence={parse.confidence:.2f}")
    return ConvertResponse(
        recipe=result["document"].to_dict(),
        parse=ParseSummary(
            title=parse.title,
            confidence=parse.confidence,
            mode=parse.mode,
            ingredients=parse.ingredients,
            instructions=parse.instructions,
        ),
    )


@router.post("/compile")
async def compile_seed(seed: Any = Body(default=None)):
    """
    Compila un seed (cualquier JSON) a un documento siempre válido.
    """
    return compile_recipe(seed).to_dict()


@router.post("/checks", response_model=ChecksResponse)
async def checks(document: Any = Body(default=None)):
    """
    Normaliza el documento recibido y devuelve los avisos de consistencia.
    """
    doc = normalize_document(document)
    return ChecksResponse(
        checks=[c.to_dict() for c in compute_mise_checks(doc)],
        inferred=infer_capabilities(doc),
        suggestions=suggest_capabilities(doc),
    )

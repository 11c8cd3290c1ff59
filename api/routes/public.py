"""
Endpoint público de recetas publicadas.

- GET /soustack/public/{public_id}.soustack.json

No requiere autenticación. Devuelve solo el documento `recipe` (sin el
borrador ni la metadata del workbench) con headers de cache público.
"""

import json

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from soustack_lite.db.helpers import get_public_recipe

from ..dependencies import get_db

router = APIRouter(prefix="/soustack/public", tags=["public"])

SOUSTACK_MEDIA_TYPE = "application/vnd.soustack+json"
PUBLIC_CACHE_CONTROL = "public, max-age=60, s-maxage=600"


@router.get("/{public_id}.soustack.json")
async def get_public(public_id: str, session: Session = Depends(get_db)):
    """
    Resuelve una receta publicada por su `public_id`.

    Returns:
        Documento Soustack Lite, o 404 `{"error": "NOT_FOUND"}`
    """
    recipe = get_public_recipe(session, public_id)
    if recipe is None:
        return JSONResponse(status_code=404, content={"error": "NOT_FOUND"})
    return Response(
        content=json.dumps(recipe, ensure_ascii=False),
        media_type=SOUSTACK_MEDIA_TYPE,
        headers={"Cache-Control": PUBLIC_CACHE_CONTROL},
    )

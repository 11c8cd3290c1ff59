"""
Endpoint para gestionar recetas guardadas.

Este endpoint maneja:
- POST /api/v1/recipes: Crear o actualizar una receta (WorkbenchDoc)
- GET /api/v1/recipes: Listar recetas del usuario
- GET /api/v1/recipes/{recipe_id}: Obtener el WorkbenchDoc de una receta
- GET /api/v1/recipes/{recipe_id}/revisions: Listar revisiones guardadas
- POST /api/v1/recipes/{recipe_id}/publish: Publicar / despublicar
- GET /soustack/recipes/{recipe_id}.soustack.json: Export del dueño

Todas las rutas requieren bearer token; el `sub` identifica al dueño.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from soustack_lite.db.helpers import (
    get_recipe_revisions,
    list_recipes,
    load_recipe,
    save_recipe,
    set_recipe_public,
)
from soustack_lite.db.models import Recipe
from soustack_lite.exceptions import AuthRequiredError, RecipeNotFoundError
from soustack_lite.export import export_filename, export_json

from ..dependencies import get_current_user_id, get_db
from ..models.requests import PublishRequest, RecipeSummary, SaveRecipeRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])
export_router = APIRouter(prefix="/soustack/recipes", tags=["recipes"])


def _summary(recipe: Recipe) -> RecipeSummary:
    return RecipeSummary(
        id=recipe.id,
        title=recipe.title,
        is_public=recipe.is_public,
        public_id=recipe.public_id,
        published_at=recipe.published_at.isoformat() if recipe.published_at else None,
        updated_at=recipe.updated_at.isoformat() if recipe.updated_at else "",
    )


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, AuthRequiredError):
        return HTTPException(status_code=401, detail="AUTH_REQUIRED")
    if isinstance(e, RecipeNotFoundError):
        return HTTPException(status_code=404, detail="NOT_FOUND")
    return HTTPException(status_code=500, detail=f"Error interno: {str(e)}")


@router.post("", response_model=RecipeSummary)
async def save(
    request: SaveRecipeRequest,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
):
    """
    Guarda un WorkbenchDoc. Sin `recipe_id` crea una receta nueva.
    """
    try:
        recipe = save_recipe(session, user_id, request.workbench, recipe_id=request.recipe_id)
        return _summary(recipe)
    except (AuthRequiredError, RecipeNotFoundError) as e:
        raise _http_error(e) from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Error guardando receta")
        raise _http_error(e) from e


@router.get("", response_model=list[RecipeSummary])
async def list_user_recipes(
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
):
    """
    Lista las recetas del usuario (más recientes primero).
    """
    try:
        return [_summary(r) for r in list_recipes(session, user_id)]
    except AuthRequiredError as e:
        raise _http_error(e) from e


@router.get("/{recipe_id}")
async def get_recipe(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
):
    """
    Devuelve el WorkbenchDoc completo (recipe + draft + meta).
    """
    try:
        return load_recipe(session, user_id, recipe_id).to_dict()
    except (AuthRequiredError, RecipeNotFoundError) as e:
        raise _http_error(e) from e


@router.get("/{recipe_id}/revisions")
async def list_revisions(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
):
    try:
        revisions = get_recipe_revisions(session, user_id, recipe_id)
    except (AuthRequiredError, RecipeNotFoundError) as e:
        raise _http_error(e) from e
    return [
        {
            "revision": r.revision,
            "created_at": r.created_at.isoformat() if r.created_at else None,
        }
        for r in revisions
    ]


@router.post("/{recipe_id}/publish", response_model=RecipeSummary)
async def publish(
    recipe_id: str,
    request: PublishRequest,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
):
    """
    Publica (o despublica) la receta. El `public_id` se mantiene estable.
    """
    try:
        recipe = set_recipe_public(session, user_id, recipe_id, request.is_public)
        return _summary(recipe)
    except (AuthRequiredError, RecipeNotFoundError) as e:
        raise _http_error(e) from e


@export_router.get("/{recipe_id}.soustack.json")
async def export_recipe(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
):
    """
    Export del documento `recipe` (JSON indentado) para el dueño.
    """
    try:
        doc = load_recipe(session, user_id, recipe_id).recipe
    except (AuthRequiredError, RecipeNotFoundError) as e:
        raise _http_error(e) from e
    return Response(
        content=export_json(doc),
        media_type="application/vnd.soustack+json",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(doc)}"'},
    )

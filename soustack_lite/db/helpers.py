"""
Funciones helper para persistir recetas (Recipe / RecipeRevision).

Estas funciones facilitan:
- Guardar un WorkbenchDoc (upsert) y su snapshot de revisión
- Listar y cargar recetas de un usuario
- Publicar / despublicar y resolver la receta pública por `public_id`
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Mapping

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..compiler import compile_recipe
from ..engine import normalize_document
from ..exceptions import AuthRequiredError, RecipeNotFoundError
from ..workbench import WorkbenchDoc, workbench_from_dict
from .models import Recipe, RecipeRevision

logger = logging.getLogger(__name__)

TITLE_COLUMN_LENGTH = 200


def _require_owner(owner_id: str | None) -> str:
    if not isinstance(owner_id, str) or not owner_id.strip():
        raise AuthRequiredError()
    return owner_id


def _as_workbench(wb: WorkbenchDoc | Mapping[str, Any]) -> WorkbenchDoc:
    return wb if isinstance(wb, WorkbenchDoc) else workbench_from_dict(wb)


def _get_owned_recipe(session: Session, owner_id: str, recipe_id: str) -> Recipe:
    recipe = session.query(Recipe).filter_by(id=recipe_id, owner_id=owner_id).first()
    if recipe is None:
        raise RecipeNotFoundError(recipe_id)
    return recipe


def _append_revision(session: Session, recipe: Recipe, doc_json: str) -> RecipeRevision | None:
    """
    Inserta el snapshot `max(revision) + 1`.

    Corre en un savepoint: si falla se loguea y el guardado principal sigue.
    """
    try:
        with session.begin_nested():
            last = (
                session.query(func.max(RecipeRevision.revision))
                .filter(RecipeRevision.recipe_id == recipe.id)
                .scalar()
            )
            revision = RecipeRevision(
                id=str(uuid.uuid4()),
                recipe_id=recipe.id,
                owner_id=recipe.owner_id,
                revision=(last or 0) + 1,
                doc_json=doc_json,
            )
            session.add(revision)
            session.flush()
        return revision
    except SQLAlchemyError as e:
        logger.warning("No se pudo guardar la revisión de la receta %s: %s", recipe.id, e)
        return None


def save_recipe(
    session: Session,
    owner_id: str | None,
    wb: WorkbenchDoc | Mapping[str, Any],
    recipe_id: str | None = None,
) -> Recipe:
    """
    Crea o actualiza la receta de un usuario.

    Args:
        session: Sesión de base de datos
        owner_id: ID del usuario autenticado (None → AuthRequiredError)
        wb: WorkbenchDoc (o su forma JSON) a guardar
        recipe_id: ID existente para actualizar; None crea una receta nueva

    Returns:
        Recipe guardada (con ID asignado)
    """
    owner_id = _require_owner(owner_id)
    workbench = _as_workbench(wb)
    doc_json = json.dumps(workbench.to_dict(), ensure_ascii=False)
    title = workbench.recipe.name[:TITLE_COLUMN_LENGTH]

    if recipe_id:
        recipe = _get_owned_recipe(session, owner_id, recipe_id)
        recipe.title = title
        recipe.doc_json = doc_json
        recipe.updated_at = datetime.utcnow()
    else:
        recipe = Recipe(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            title=title,
            doc_json=doc_json,
        )
        session.add(recipe)
    session.flush()

    _append_revision(session, recipe, doc_json)
    logger.info("Receta guardada: %s (owner=%s)", recipe.id, owner_id)
    return recipe


def list_recipes(session: Session, owner_id: str | None) -> list[Recipe]:
    """
    Recetas del usuario, más recientes primero.
    """
    owner_id = _require_owner(owner_id)
    return (
        session.query(Recipe)
        .filter_by(owner_id=owner_id)
        .order_by(Recipe.updated_at.desc())
        .all()
    )


def load_recipe(session: Session, owner_id: str | None, recipe_id: str) -> WorkbenchDoc:
    """
    Carga el WorkbenchDoc guardado. El JSON persistido pasa por la
    normalización, así que documentos viejos salen migrados.
    """
    owner_id = _require_owner(owner_id)
    recipe = _get_owned_recipe(session, owner_id, recipe_id)
    return workbench_from_dict(_loads(recipe.doc_json))


def get_recipe_revisions(session: Session, owner_id: str | None, recipe_id: str) -> list[RecipeRevision]:
    owner_id = _require_owner(owner_id)
    _get_owned_recipe(session, owner_id, recipe_id)
    return (
        session.query(RecipeRevision)
        .filter_by(recipe_id=recipe_id)
        .order_by(RecipeRevision.revision.asc())
        .all()
    )


def set_recipe_public(session: Session, owner_id: str | None, recipe_id: str, is_public: bool) -> Recipe:
    """
    Publica o despublica una receta.

    El `public_id` se genera en la primera publicación y se conserva al
    despublicar, así el link vuelve a funcionar si se publica otra vez.
    """
    owner_id = _require_owner(owner_id)
    recipe = _get_owned_recipe(session, owner_id, recipe_id)

    recipe.is_public = bool(is_public)
    if recipe.is_public:
        if not recipe.public_id:
            recipe.public_id = str(uuid.uuid4())
        if recipe.published_at is None:
            recipe.published_at = datetime.utcnow()
    session.flush()
    return recipe


def get_public_recipe(session: Session, public_id: str) -> Dict[str, Any] | None:
    """
    Devuelve solo el documento `recipe` de una receta publicada, o None.

    Si lo guardado no se puede leer, devuelve el documento de fallback.
    """
    recipe = session.query(Recipe).filter_by(public_id=public_id, is_public=True).first()
    if recipe is None:
        return None

    data = _loads(recipe.doc_json)
    stored = data.get("recipe") if isinstance(data, Mapping) else None
    if not isinstance(stored, Mapping):
        logger.warning("Receta pública %s con datos inválidos; se usa el fallback", public_id)
        return compile_recipe({}).to_dict()
    return normalize_document(stored).to_dict()


def _loads(raw: str | None) -> Any:
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return {}

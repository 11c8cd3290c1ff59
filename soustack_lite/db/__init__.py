from __future__ import annotations

from .database import Base, get_db_engine, get_db_session, init_db, reset_db_engine
from .models import Recipe, RecipeRevision

__all__ = [
    "Base",
    "get_db_engine",
    "get_db_session",
    "init_db",
    "reset_db_engine",
    "Recipe",
    "RecipeRevision",
]

"""
Modelos ORM para persistir recetas Soustack Lite.

- `Recipe`: una fila por receta de un usuario; `doc_json` guarda el
  WorkbenchDoc completo. Publicar mintea un `public_id` estable.
- `RecipeRevision`: snapshots append-only del WorkbenchDoc en cada guardado.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Recipe(Base):
    """
    Receta guardada por un usuario.
    """
    __tablename__ = "recipes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    owner_id: Mapped[str] = mapped_column(String(64), index=True)
    title: Mapped[str] = mapped_column(String(200))

    # WorkbenchDoc serializado (JSON)
    doc_json: Mapped[str] = mapped_column(Text, default="{}")

    # Publicación
    is_public: Mapped[bool] = mapped_column(Boolean, default=False)
    public_id: Mapped[str | None] = mapped_column(String(36), unique=True, nullable=True, index=True)
    published_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    revisions: Mapped[list["RecipeRevision"]] = relationship(
        back_populates="recipe",
        cascade="all, delete-orphan",
    )


class RecipeRevision(Base):
    """
    Snapshot inmutable de una receta en un guardado.
    """
    __tablename__ = "recipe_revisions"
    __table_args__ = (
        UniqueConstraint("recipe_id", "revision", name="uq_recipe_revision"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    recipe_id: Mapped[str] = mapped_column(String(36), ForeignKey("recipes.id", ondelete="CASCADE"), index=True)
    owner_id: Mapped[str] = mapped_column(String(64), index=True)
    revision: Mapped[int] = mapped_column(Integer)
    doc_json: Mapped[str] = mapped_column(Text, default="{}")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    recipe: Mapped["Recipe"] = relationship(back_populates="revisions")

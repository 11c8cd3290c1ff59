"""
Excepciones de la capa de persistencia.

El core (parser, compilador, stacks, normalizador, checker, inferencia) es
total y no lanza. Estas excepciones solo aparecen en los bordes con IO, para
que el llamador distinga "hace falta autenticarse" de "no existe".
"""

from __future__ import annotations


class SoustackError(Exception):
    """Base de los errores de persistencia."""


class AuthRequiredError(SoustackError):
    """No hay usuario autenticado para una operación que lo requiere."""

    def __init__(self, message: str = "AUTH_REQUIRED"):
        super().__init__(message)


class RecipeNotFoundError(SoustackError):
    """La receta no existe o no pertenece al usuario."""

    def __init__(self, recipe_id: str | None = None):
        self.recipe_id = recipe_id
        super().__init__("NOT_FOUND")

"""Rutas de la API."""

from . import convert, public, recipes

__all__ = ["convert", "public", "recipes"]

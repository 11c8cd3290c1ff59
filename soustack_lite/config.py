# soustack_lite/config.py
from dataclasses import dataclass, field
from functools import lru_cache
import os
from typing import List

from dotenv import load_dotenv

"""
soustack_lite.config
====================

Gestión centralizada de configuración de la aplicación.

Este módulo define:
- La estructura de configuración (`Settings`)
- El mecanismo para cargar variables desde entorno (.env)
- Un acceso único y cacheado a la configuración (`get_settings`)

Objetivos de diseño
-------------------
1. **Fuente única de verdad**
   Toda la app obtiene configuración solo a través de `get_settings()`.

2. **Inmutabilidad práctica**
   `Settings` se crea una sola vez y luego se reutiliza (cache LRU).

3. **El core no depende del entorno para ser válido**
   Los valores de acá ajustan heurísticas y la infraestructura (DB, API);
   ninguna invariante del documento depende de ellos.

Notas importantes
-----------------
- `load_dotenv()` se ejecuta al importar el módulo.
- En tests se puede limpiar el cache con `get_settings.cache_clear()`.
"""

# Cargar variables de entorno desde .env (si existe)
load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass
class Settings:
    """
    Contenedor tipado de configuración global.

    Attributes
    ----------
    database_url:
        URL SQLAlchemy para la persistencia de recetas.
    environment:
        "local" | "staging" | "production". Solo informativo (logging).
    log_level:
        Nivel de logging de la API.
    cors_origins:
        Orígenes permitidos por CORS.
    normalize_cache_size:
        Tamaño del memo de `engine.normalize_document` (documentos por identidad).
    title_max_length:
        Largo máximo de una línea para ser considerada título por el parser.
    jwt_secret:
        Si está definido, los bearer tokens se verifican con HS256. Si no, se
        decodifican sin verificar firma (la validación real la hace el proveedor
        de auth del frontend).
    """

    database_url: str = "sqlite:///data/soustack_lite.sqlite"
    environment: str = "local"
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])

    normalize_cache_size: int = 128
    title_max_length: int = 80

    jwt_secret: str = ""


@lru_cache
def get_settings() -> Settings:
    """
    Devuelve una instancia única y cacheada de `Settings`.

    Variables de entorno utilizadas
    -------------------------------
    - DATABASE_URL (default: sqlite:///data/soustack_lite.sqlite)
    - ENVIRONMENT (default: "local")
    - LOG_LEVEL (default: "INFO")
    - CORS_ORIGINS (lista separada por comas)
    - SOUSTACK_NORMALIZE_CACHE_SIZE (default: 128)
    - SOUSTACK_TITLE_MAX_LENGTH (default: 80)
    - JWT_SECRET (opcional)
    """
    cors_origins_str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001")
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///data/soustack_lite.sqlite"),
        environment=os.getenv("ENVIRONMENT", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=[o.strip() for o in cors_origins_str.split(",") if o.strip()],
        normalize_cache_size=_int_env("SOUSTACK_NORMALIZE_CACHE_SIZE", 128),
        title_max_length=_int_env("SOUSTACK_TITLE_MAX_LENGTH", 80),
        jwt_secret=os.getenv("JWT_SECRET", ""),
    )

"""
Dependencias de FastAPI para sesión de base de datos y autenticación.

Este módulo proporciona dependencias reutilizables para:
- Obtener una sesión SQLAlchemy por request
- Obtener el ID del usuario actual desde el bearer token (JWT)
"""

from typing import Generator, Optional

import logging

import jwt  # pyjwt
from fastapi import Header, HTTPException
from sqlalchemy.orm import Session

from soustack_lite.config import get_settings
from soustack_lite.db import database

logger = logging.getLogger(__name__)


def get_db() -> Generator[Session, None, None]:
    """
    Dependencia de FastAPI para obtener una sesión de base de datos.
    Commit al terminar el request, rollback si hubo una excepción.
    """
    database.get_db_engine(echo=False)
    db = database.SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def _decode_token(token: str) -> dict:
    secret = get_settings().jwt_secret
    if secret:
        return jwt.decode(token, secret, algorithms=["HS256"], options={"verify_aud": False})
    # Sin secreto configurado solo se lee el `sub`; la firma la valida el proveedor de auth
    return jwt.decode(token, options={"verify_signature": False})


async def get_current_user_id(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> str:
    """
    Obtiene el ID del usuario actual desde el token JWT (`sub`).

    Args:
        authorization: Header Authorization con formato "Bearer <token>"

    Returns:
        ID del usuario (claim `sub`)

    Raises:
        HTTPException: 401 AUTH_REQUIRED si falta el header o el token no es válido
    """
    if not authorization or not authorization.startswith("Bearer "):
        logger.debug("Authorization header ausente o sin formato Bearer")
        raise HTTPException(status_code=401, detail="AUTH_REQUIRED")

    token = authorization[len("Bearer "):].strip()
    try:
        decoded = _decode_token(token)
    except jwt.PyJWTError as e:
        logger.warning(f"Token inválido: {e}")
        raise HTTPException(status_code=401, detail="AUTH_REQUIRED") from e

    user_id = decoded.get("sub")
    if not isinstance(user_id, str) or not user_id:
        logger.warning("Token sin 'sub' (user ID)")
        raise HTTPException(status_code=401, detail="AUTH_REQUIRED")
    return user_id

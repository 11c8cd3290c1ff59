"""
API HTTP principal para Soustack Lite.

Esta aplicación FastAPI expone endpoints REST que usan el core
(soustack_lite) para convertir, compilar, chequear, guardar y publicar
recetas.

Uso:
    uvicorn api.main:app --reload --port 8000
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from soustack_lite.config import get_settings

from .routes import convert, public, recipes

settings = get_settings()

# Configurar logging según ambiente
log_level = getattr(logging, settings.log_level, logging.INFO)
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)
logger.info(f"🚀 Iniciando API en ambiente: {settings.environment}")

app = FastAPI(
    title="Soustack Lite API",
    description="API para convertir recetas en texto libre a documentos Soustack Lite",
    version="0.1.0",
)

logger.info(f"🌐 CORS origins configurados: {settings.cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Registrar rutas
app.include_router(convert.router)
app.include_router(recipes.router)
app.include_router(recipes.export_router)
app.include_router(public.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "soustack-lite-api"}


@app.get("/health")
async def health():
    """Health check detallado."""
    return {
        "status": "ok",
        "service": "soustack-lite-api",
        "version": "0.1.0",
    }

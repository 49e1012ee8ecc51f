import os
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.db.session import check_connection, engine, Base
from app.api.v1.router import api_router

from app.db.models import organization, portfolio, campus, building, floor, seat_zone

from contextlib import asynccontextmanager

# Configurar logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Verifica la base de datos y crea las tablas de la jerarquía al arrancar.
    """
    try:
        # 1️ Verificar conexión a la base de datos
        check_connection()
        logger.info("✅ Conexión a la base de datos establecida correctamente.")

        # 2️ Crear tablas si no existen
        logger.info("Verificando existencia de tablas...")
        Base.metadata.create_all(bind=engine)
        logger.info("✅ Tablas verificadas / creadas correctamente.")
    except SQLAlchemyError as e:
        logger.error(f"❌ Error de SQLAlchemy: {e}")
        raise e

    yield

    # 3️ Cierre limpio
    engine.dispose()
    logger.info("🧹 Conexión a la base de datos cerrada.")


# ======================================================
# Inicializar aplicación
# ======================================================

app = FastAPI(title="Portfolio Hierarchy API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    return {"message": "API de jerarquía de portafolio activa ✅"}


if __name__ == "__main__":
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)

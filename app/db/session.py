from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from app.core.config import settings


def _engine_options(url: str) -> dict:
    # SQLite en memoria: una sola conexión compartida entre hilos
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {"pool_pre_ping": True}


engine = create_engine(
    settings.db_url,
    future=True,
    **_engine_options(settings.db_url),
)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    future=True,
)

Base = declarative_base()


def check_connection() -> None:
    """
    Intento simple de conexión para validar credenciales/red.
    Lanza excepción si falla.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))

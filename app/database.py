# app/database.py
"""
Configuration SQLAlchemy et gestion des sessions
"""

import logging
from contextlib import contextmanager
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from app.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

db_url = settings.database_url
logger.info("🔌 URL de connexion DB résolue (voir logs config pour détails)")


def _engine_options(url: str) -> dict:
    """Options du moteur selon le dialecte (SQLite local ou Postgres)"""
    if url.startswith("sqlite"):
        options = {
            "connect_args": {"check_same_thread": False},
            "echo": settings.DEBUG,
        }
        # Base en mémoire : une seule connexion partagée
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_pre_ping": True,       # Vérifie la connexion avant utilisation
        "pool_recycle": 1800,        # Recycle les connexions après 30min
        "connect_args": {"connect_timeout": 10},
        "echo": settings.DEBUG,      # Log SQL en mode debug
    }


engine = create_engine(db_url, **_engine_options(db_url))

# Factory de sessions
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Base déclarative pour tous les modèles
Base = declarative_base()


def get_db():
    """
    Dépendance FastAPI : fournit une session DB par requête.
    La session est automatiquement fermée après la requête.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_context():
    """
    Context manager pour utilisation hors FastAPI (scripts).
    Usage:
        with get_db_context() as db:
            db.query(...)
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def _check_and_create_tables():
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("✅ Connexion DB réussie")
    Base.metadata.create_all(bind=engine)


def init_db(max_retries: int = 5, retry_delay: float = 3):
    """
    Crée les tables 'analyses' et 'suppliers' si besoin.
    La connexion est retentée avec backoff exponentiel (base Postgres
    encore en démarrage dans Docker).
    """
    from app.models import analysis, supplier  # noqa: F401
    from app.services.retry import retry_operation

    try:
        retry_operation(
            _check_and_create_tables,
            attempts=max_retries,
            base_delay=retry_delay,
            operation_name="Connexion DB",
        )
    except Exception:
        logger.critical(f"💀 Impossible de se connecter à la DB après {max_retries} tentatives")
        raise
    logger.info("✅ Tables créées/vérifiées avec succès")

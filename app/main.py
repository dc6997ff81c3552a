# app/main.py
"""
Offer Comparator - Point d'entrée FastAPI.
Comparaison automatisée d'offres fournisseurs.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.database import init_db
from app.exceptions import ComparisonError
from app.routers import analyses, suppliers

settings = get_settings()

# Configuration du logging
log_dir = os.path.dirname(settings.LOG_FILE)
if log_dir:
    os.makedirs(log_dir, exist_ok=True)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler(settings.LOG_FILE, mode="a", encoding="utf-8"),
    ],
)

logger = logging.getLogger(__name__)


# === Lifespan : startup + shutdown ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gestion du cycle de vie de l'application"""
    # --- STARTUP ---
    logger.info(f"🚀 Démarrage de {settings.APP_NAME}")
    logger.info(f"   Version: {settings.APP_VERSION}")
    logger.info(f"   Debug: {settings.DEBUG}")

    init_db()
    logger.info("✅ Base de données initialisée")

    if not settings.LLM_API_KEY:
        logger.warning("⚠️ LLM_API_KEY absente : les nouvelles comparaisons échoueront")

    logger.info("🟢 Application prête")

    yield  # L'application tourne ici

    # --- SHUTDOWN ---
    logger.info("👋 Application arrêtée proprement")


# === Création de l'application FastAPI ===
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
## 📋 Offer Comparator

Comparaison d'offres fournisseurs à partir des cahiers des charges et des devis.

### Fonctionnalités :
- **Extraction IA** des offres (prix HT/TTC, délais, garanties, scores)
- **Normalisation** et dédoublonnage des offres
- **Classement pondéré** selon la priorité (prix, qualité, délai)
- **Cache** par contenu des requêtes identiques
- **Historique** et clôture des dossiers avec évaluation
- **Référentiel fournisseurs** alimenté automatiquement

### Endpoints principaux :
- `POST /analyses` — Lancer une comparaison
- `GET /analyses` — Historique
- `POST /analyses/{id}/evaluation` — Clôturer un dossier
- `GET /suppliers` — Référentiel fournisseurs
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# === Middleware CORS ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === Gestion globale des erreurs ===
@app.exception_handler(ComparisonError)
async def comparison_exception_handler(request: Request, exc: ComparisonError):
    """Erreurs typées du pipeline : message localisé pour l'utilisateur"""
    logger.warning(f"⚠️ Comparaison échouée ({exc.error_code}): {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error_code": exc.error_code},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handler global pour les erreurs non gérées"""
    logger.error(f"❌ Erreur non gérée: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Erreur interne du serveur",
            "error": str(exc) if settings.DEBUG else "Contactez l'administrateur",
        },
    )


# === Enregistrement des routers ===
app.include_router(analyses.router, prefix="/api/v1")
app.include_router(suppliers.router, prefix="/api/v1")


# === Endpoints utilitaires ===
@app.get("/", tags=["Root"])
def root():
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "status": "running",
    }


@app.get("/health", tags=["Health"])
def health_check():
    """Health check pour Docker et monitoring"""
    from sqlalchemy import text
    from app.database import engine
    from app.dependencies import get_analysis_cache

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {str(e)}"

    return {
        "status": "healthy",
        "database": db_status,
        "cache_entries": len(get_analysis_cache()),
        "extraction_configured": bool(settings.LLM_API_KEY),
        "version": settings.APP_VERSION,
    }

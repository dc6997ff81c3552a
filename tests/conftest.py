"""
Pytest Configuration and Shared Fixtures

Base SQLite en mémoire, client d'extraction factice, client HTTP de test.
"""

import os
import tempfile

# Doit précéder tout import de l'application (settings en cache)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LLM_API_KEY"] = ""
os.environ["LOG_FILE"] = os.path.join(tempfile.gettempdir(), "offer_comparator_tests.log")

import json
from types import SimpleNamespace

import pytest

from app.config import Settings


# ============================================================================
# Fake extraction client
# ============================================================================

class FakeCompletions:
    """Rejoue des réponses (texte) ou des exceptions, dans l'ordre"""

    def __init__(self, outcomes=None):
        self.outcomes = list(outcomes or [])
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if not self.outcomes:
            raise RuntimeError("no fake outcome configured")
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=outcome))],
            usage=SimpleNamespace(total_tokens=42),
        )


class FakeClient:
    def __init__(self, outcomes=None):
        self.chat = SimpleNamespace(completions=FakeCompletions(outcomes))

    @property
    def completions(self) -> FakeCompletions:
        return self.chat.completions


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        LLM_API_KEY="test-key",
        MAX_RETRY_ATTEMPTS=3,
        RETRY_BASE_DELAY_SECONDS=0.0,
        CACHE_MAX_ENTRIES=4,
        FILE_WORKERS=2,
    )


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def extraction_payload():
    """Réponse brute typique du service d'extraction"""
    def _build(offers=None, best_option="Alpha SARL", **extra):
        payload = {
            "needsSummary": "Achat de 10 ordinateurs portables",
            "marketAnalysis": "Marché concurrentiel",
            "bestOption": best_option,
            "offers": offers if offers is not None else [
                {
                    "supplierName": "Alpha SARL",
                    "totalPriceHT": 1000000,
                    "totalPriceTTC": 1180000,
                    "currency": "FCFA",
                    "deliveryDays": 10,
                    "technicalScore": 80,
                    "complianceScore": 90,
                    "email": "contact@alpha.example",
                },
                {
                    "supplierName": "Beta Services",
                    "priceExclTax": 900000,
                    "currency": "XOF",
                    "deliveryDays": 20,
                    "technicalScore": 70,
                    "complianceScore": 70,
                },
            ],
        }
        payload.update(extra)
        return json.dumps(payload)
    return _build


# ============================================================================
# Database
# ============================================================================

@pytest.fixture
def db_session():
    from app.database import Base, SessionLocal, engine
    import app.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


# ============================================================================
# API
# ============================================================================

@pytest.fixture
def api(db_session, test_settings, fake_client):
    """Client HTTP avec service d'extraction factice et cache dédié"""
    from fastapi.testclient import TestClient

    from app.dependencies import get_comparison_service
    from app.main import app
    from app.services.ai_analyzer import AIAnalyzerService
    from app.services.cache import InMemoryAnalysisCache
    from app.services.comparison import ComparisonService

    cache = InMemoryAnalysisCache(max_entries=test_settings.CACHE_MAX_ENTRIES)
    analyzer = AIAnalyzerService(client=fake_client, settings=test_settings, sleep=lambda _: None)
    app.dependency_overrides[get_comparison_service] = lambda: ComparisonService(
        analyzer=analyzer, cache=cache, settings=test_settings
    )

    with TestClient(app) as client:
        yield SimpleNamespace(client=client, completions=fake_client.completions, cache=cache)

    app.dependency_overrides.clear()

# app/dependencies.py
"""
Dépendances FastAPI du pipeline de comparaison (injectables dans les tests)
"""

from functools import lru_cache

from fastapi import Depends

from app.config import get_settings
from app.services.ai_analyzer import AIAnalyzerService
from app.services.cache import AnalysisCache, InMemoryAnalysisCache, NullAnalysisCache
from app.services.comparison import ComparisonService


@lru_cache()
def get_analysis_cache() -> AnalysisCache:
    """Cache partagé par le processus (CACHE_MAX_ENTRIES=0 le désactive)"""
    max_entries = get_settings().CACHE_MAX_ENTRIES
    if max_entries <= 0:
        return NullAnalysisCache()
    return InMemoryAnalysisCache(max_entries=max_entries)


def get_analyzer() -> AIAnalyzerService:
    return AIAnalyzerService()


def get_comparison_service(
    analyzer: AIAnalyzerService = Depends(get_analyzer),
    cache: AnalysisCache = Depends(get_analysis_cache),
) -> ComparisonService:
    return ComparisonService(analyzer=analyzer, cache=cache)

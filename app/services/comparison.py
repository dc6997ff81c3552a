# app/services/comparison.py
"""
Orchestration d'une comparaison d'offres :
clé de cache -> cache -> préparation des fichiers -> extraction IA
-> assemblage -> mise en cache -> horodatage.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime

from app.config import Settings, get_settings
from app.exceptions import UnreadableAttachmentsError
from app.i18n import resolve_language
from app.schemas.analysis import AnalysisResponse
from app.schemas.offer import ComparisonBody
from app.services.ai_analyzer import AIAnalyzerService, ExtractionRequest
from app.services.assembler import assemble_result
from app.services.cache import AnalysisCache, build_cache_key
from app.services.file_encoder import Attachment, encode_attachments, hash_attachments

logger = logging.getLogger(__name__)

DATE_FORMATS = {"fr": "%d/%m/%Y", "en": "%m/%d/%Y"}


@dataclass
class ComparisonRequest:
    """Entrées du pipeline de comparaison"""
    title: str
    needs_text: str = ""
    manual_specs: str = ""
    requirement_files: list[Attachment] = field(default_factory=list)
    offer_files: list[Attachment] = field(default_factory=list)
    exchange_rates: dict[str, float] = field(default_factory=dict)
    target_currency: str = "XOF"
    language: str = "fr"
    priority: str = "price"


def new_analysis_id() -> str:
    """Identifiant unique dérivé de l'instant de création"""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


def format_analysis_date(language: str, now: datetime | None = None) -> str:
    now = now or datetime.now()
    return now.strftime(DATE_FORMATS.get(language, DATE_FORMATS["fr"]))


def stamp_result(body: ComparisonBody, language: str) -> AnalysisResponse:
    """Ajoute un id et une date neufs au corps de résultat"""
    return AnalysisResponse(
        **body.model_dump(),
        id=new_analysis_id(),
        date=format_analysis_date(language),
        status="pending",
    )


class ComparisonService:
    """Pipeline complet d'une requête de comparaison"""

    def __init__(
        self,
        analyzer: AIAnalyzerService,
        cache: AnalysisCache,
        settings: Settings | None = None,
    ):
        self.analyzer = analyzer
        self.cache = cache
        self.settings = settings or get_settings()

    def cache_key(self, request: ComparisonRequest) -> str:
        """
        Clé de cache du contexte complet.

        Raises:
            CacheKeyError: fichier illisible (avant tout appel externe)
        """
        workers = self.settings.FILE_WORKERS
        return build_cache_key(
            title=request.title,
            needs=request.needs_text,
            manual_specs=request.manual_specs,
            requirement_hashes=hash_attachments(request.requirement_files, request.language, workers),
            offer_hashes=hash_attachments(request.offer_files, request.language, workers),
            exchange_rates=request.exchange_rates,
            currency=request.target_currency,
            language=request.language,
            priority=request.priority,
        )

    def run(self, request: ComparisonRequest) -> AnalysisResponse:
        """
        Exécute la comparaison et retourne un résultat horodaté (statut pending).

        Raises:
            ComparisonError: toute erreur typée du pipeline
        """
        request.language = resolve_language(request.language)
        key = self.cache_key(request)

        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"♻️ Résultat réutilisé depuis le cache pour '{request.title[:60]}'")
            return stamp_result(cached, request.language)

        requirement_parts = encode_attachments(
            request.requirement_files,
            "BUYER_REQUEST",
            max_pdf_pages=self.settings.MAX_PDF_PAGES,
            workers=self.settings.FILE_WORKERS,
        )
        offer_parts = encode_attachments(
            request.offer_files,
            "SUPPLIER_OFFER",
            max_pdf_pages=self.settings.MAX_PDF_PAGES,
            workers=self.settings.FILE_WORKERS,
        )
        if request.offer_files and not offer_parts:
            raise UnreadableAttachmentsError(request.language)

        raw = self.analyzer.extract_offers(
            ExtractionRequest(
                title=request.title,
                needs_text=request.needs_text,
                manual_specs=request.manual_specs,
                target_currency=request.target_currency,
                exchange_rates=request.exchange_rates,
                language=request.language,
                priority=request.priority,
                requirement_parts=requirement_parts,
                offer_parts=offer_parts,
            )
        )

        body = assemble_result(
            raw,
            fallback_title=request.title,
            fallback_needs=request.needs_text,
            target_currency=request.target_currency,
            language=request.language,
            priority=request.priority,
        )

        self.cache.put(key, body)
        return stamp_result(body, request.language)

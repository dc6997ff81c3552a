# app/services/assembler.py
"""
Assemblage du résultat de comparaison à partir de la réponse brute
de l'extraction : normalisation, dédoublonnage, choix de la meilleure offre.
"""

import logging
from collections.abc import Mapping
from typing import Any

from app.exceptions import NoUsableOffersError
from app.i18n import translate
from app.schemas.offer import ComparisonBody, Offer
from app.services.deduplicator import dedupe_offers, supplier_key
from app.services.normalizer import normalize_offers
from app.services.ranker import NOT_APPLICABLE, find_best_option
from app.services.sanitizers import clean_text

logger = logging.getLogger(__name__)


def resolve_best_option(proposed: Any, offers: list[Offer], priority: str | None = None) -> str:
    """
    Nom exact (insensible à la casse) d'une offre réelle si la proposition
    de l'IA correspond, sinon recalcul par le classement pondéré.
    """
    proposed_key = supplier_key(clean_text(proposed))
    if proposed_key:
        for offer in offers:
            if supplier_key(offer.supplier_name) == proposed_key:
                return offer.supplier_name
        logger.warning(f"⚠️ Meilleure offre proposée inconnue ('{clean_text(proposed)}'), recalcul")

    return find_best_option(offers, priority)


def assemble_result(
    raw: Any,
    fallback_title: str,
    fallback_needs: str,
    target_currency: str,
    language: str,
    priority: str | None = None,
) -> ComparisonBody:
    """
    Construit le corps de résultat (sans id ni date).

    Raises:
        NoUsableOffersError: aucune offre après normalisation et dédoublonnage
    """
    if not isinstance(raw, Mapping):
        raw = {}

    offers = dedupe_offers(normalize_offers(raw.get("offers"), target_currency, language))
    if not offers:
        logger.error("❌ Aucune offre exploitable après normalisation")
        raise NoUsableOffersError(language)

    best_option = resolve_best_option(raw.get("bestOption"), offers, priority) or NOT_APPLICABLE

    logger.info(f"✅ Résultat assemblé: {len(offers)} offres, meilleure offre: {best_option}")
    return ComparisonBody(
        title=fallback_title,
        needs_summary=clean_text(raw.get("needsSummary"), fallback_needs),
        offers=offers,
        best_option=best_option,
        market_analysis=clean_text(
            raw.get("marketAnalysis"), translate(language, "default_market_analysis")
        ),
    )

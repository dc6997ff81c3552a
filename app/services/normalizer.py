# app/services/normalizer.py
"""
Normalisation d'une offre brute (JSON non fiable issu de l'extraction IA)
vers une entité Offer bien formée.

Chaque enregistrement brut produit une offre valide : un champ malformé
est remplacé par sa valeur de repli, jamais remonté en erreur.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any

from app.i18n import translate
from app.schemas.offer import Offer
from app.services.sanitizers import (
    clamp,
    clean_text,
    normalize_currency,
    normalize_string_list,
    round_half_up,
    to_finite_number,
)

logger = logging.getLogger(__name__)

# Enregistrement brut, non typé, tel que reçu du service d'extraction
RawRecord = Mapping[str, Any]

VAT_RATE = 0.18
DEFAULT_SCORE = 60
MAX_SCORE = 100
MAX_WARRANTY_MONTHS = 120
MAX_DELIVERY_DAYS = 365

# Nom canonique -> anciens noms acceptés du schéma d'extraction
FIELD_ALIASES = {
    "priceExclTax": ("totalPriceHT",),
    "priceInclTax": ("totalPriceTTC",),
    "taxId": ("nif",),
    "originalPriceExclTax": ("originalTotalPriceHT",),
    "originalPriceInclTax": ("originalTotalPriceTTC",),
}


def _field(raw: RawRecord, name: str) -> Any:
    if name in raw:
        return raw[name]
    for alias in FIELD_ALIASES.get(name, ()):
        if alias in raw:
            return raw[alias]
    return None


def _non_negative(value: Any) -> float:
    return max(0.0, to_finite_number(value, 0.0))


def resolve_tax_amounts(price_excl_tax: float, price_incl_tax: float) -> tuple[float, float]:
    """
    Réconcilie HT et TTC :
    - TTC manquant : HT x 1.18
    - HT manquant : TTC / 1.18
    - TTC jamais inférieur au HT
    Un TTC inféré hors des flottants (HT énorme) retombe sur le HT.
    """
    if price_excl_tax > 0 and price_incl_tax <= 0:
        inferred = price_excl_tax * (1 + VAT_RATE)
        price_incl_tax = float(round_half_up(inferred)) if math.isfinite(inferred) else price_excl_tax
    if price_incl_tax > 0 and price_excl_tax <= 0:
        price_excl_tax = float(round_half_up(price_incl_tax / (1 + VAT_RATE)))
    if price_incl_tax < price_excl_tax:
        price_incl_tax = price_excl_tax
    return price_excl_tax, price_incl_tax


def normalize_offer(raw: Any, index: int, target_currency: str, language: str) -> Offer:
    """
    Convertit un enregistrement brut en Offer.

    Args:
        raw: Enregistrement non typé (dict attendu, tout autre type est traité comme vide)
        index: Position dans la liste brute, pour le nom de repli
        target_currency: Devise cible par défaut
        language: Langue des textes de repli ("fr" | "en")
    """
    if not isinstance(raw, Mapping):
        logger.warning(f"⚠️ Offre #{index + 1} non structurée ({type(raw).__name__}), valeurs par défaut")
        raw = {}

    supplier_name = (
        clean_text(_field(raw, "supplierName"))
        or f"{translate(language, 'supplier_label')} {index + 1}"
    )

    price_excl_tax, price_incl_tax = resolve_tax_amounts(
        _non_negative(_field(raw, "priceExclTax")),
        _non_negative(_field(raw, "priceInclTax")),
    )

    offer = {
        "supplier_name": supplier_name,
        "price_excl_tax": price_excl_tax,
        "price_incl_tax": price_incl_tax,
        "currency": normalize_currency(_field(raw, "currency"), target_currency),
        "technical_score": clamp(to_finite_number(_field(raw, "technicalScore"), DEFAULT_SCORE), 0, MAX_SCORE),
        "compliance_score": clamp(to_finite_number(_field(raw, "complianceScore"), DEFAULT_SCORE), 0, MAX_SCORE),
        "warranty_months": clamp(to_finite_number(_field(raw, "warrantyMonths"), 0), 0, MAX_WARRANTY_MONTHS),
        "delivery_days": clamp(to_finite_number(_field(raw, "deliveryDays"), 0), 0, MAX_DELIVERY_DAYS),
        "strengths": normalize_string_list(
            _field(raw, "strengths"), [translate(language, "default_strength")]
        ),
        "weaknesses": normalize_string_list(
            _field(raw, "weaknesses"), [translate(language, "default_weakness")]
        ),
        "recommendation": clean_text(
            _field(raw, "recommendation"), translate(language, "default_recommendation")
        ),
        "main_specs": clean_text(
            _field(raw, "mainSpecs"), translate(language, "default_main_specs")
        ),
    }

    # Champs optionnels : omis (pas de valeur par défaut) si vides
    for key, name in (
        ("tax_id", "taxId"),
        ("email", "email"),
        ("phone", "phone"),
        ("address", "address"),
        ("original_currency", "originalCurrency"),
    ):
        value = clean_text(_field(raw, name))
        if value:
            offer[key] = value

    for key, name in (
        ("original_price_excl_tax", "originalPriceExclTax"),
        ("original_price_incl_tax", "originalPriceInclTax"),
    ):
        value = _non_negative(_field(raw, name))
        if value > 0:
            offer[key] = value

    if "original_currency" in offer:
        offer["original_currency"] = normalize_currency(offer["original_currency"], target_currency)

    return Offer(**offer)


def normalize_offers(raw_offers: Any, target_currency: str, language: str) -> list[Offer]:
    """Normalise une liste brute ; tout autre type donne une liste vide."""
    if not isinstance(raw_offers, list):
        return []
    return [
        normalize_offer(raw, index, target_currency, language)
        for index, raw in enumerate(raw_offers)
    ]

# app/services/deduplicator.py
"""
Dédoublonnage des offres par nom de fournisseur (insensible à la casse).
En cas de doublon, l'offre au TTC le plus bas est conservée.
"""

import logging

from app.schemas.offer import Offer
from app.services.sanitizers import clean_text

logger = logging.getLogger(__name__)


def supplier_key(name: str) -> str:
    """Clé de comparaison d'un nom de fournisseur"""
    return clean_text(name).lower()


def dedupe_offers(offers: list[Offer]) -> list[Offer]:
    """
    Une seule offre par nom de fournisseur.
    Les noms vides sont écartés ; l'ordre suit la première apparition du nom.
    """
    by_name: dict[str, Offer] = {}
    for offer in offers:
        key = supplier_key(offer.supplier_name)
        if not key:
            continue
        existing = by_name.get(key)
        if existing is None or offer.price_incl_tax < existing.price_incl_tax:
            if existing is not None:
                logger.info(
                    f"🔁 Doublon '{offer.supplier_name}': offre à {offer.price_incl_tax} "
                    f"conservée (au lieu de {existing.price_incl_tax})"
                )
            by_name[key] = offer

    return list(by_name.values())

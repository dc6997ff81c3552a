# app/services/ranker.py
"""
Service de classement - Calcule un score composite par offre
selon un profil de priorité et désigne la meilleure offre.
Critères : prix, technique, conformité, délai de livraison.
"""

import logging

from app.schemas.offer import Offer

logger = logging.getLogger(__name__)

NOT_APPLICABLE = "N/A"
DEFAULT_PRIORITY = "price"


class OfferRanker:
    """Classement pondéré des offres fournisseurs"""

    # Pondérations (prix, technique, conformité, délai) par priorité
    WEIGHT_PROFILES = {
        "price": {"price": 0.55, "technical": 0.30, "compliance": 0.15, "delivery": 0.0},
        "quality": {"price": 0.25, "technical": 0.45, "compliance": 0.30, "delivery": 0.0},
        "deadline": {"price": 0.20, "technical": 0.25, "compliance": 0.15, "delivery": 0.40},
    }

    def __init__(self, priority: str | None = None):
        self.priority = priority if priority in self.WEIGHT_PROFILES else DEFAULT_PRIORITY
        self.weights = self.WEIGHT_PROFILES[self.priority]

    @staticmethod
    def _price_score(min_price: float, price_incl_tax: float) -> float:
        """Prix relatif au moins cher (100 = prix minimum)."""
        return min_price / max(price_incl_tax, 1) * 100

    @staticmethod
    def _delivery_score(min_delivery: float, delivery_days: int) -> float:
        """Délai relatif au plus rapide ; 0 jour compte comme 1."""
        return min_delivery / max(delivery_days, 1) * 100

    def calculate_score(self, offer: Offer, min_price: float, min_delivery: float) -> dict:
        """
        Calcule le score composite d'une offre.
        Un poids nul ignore complètement le critère.
        """
        price_s = self._price_score(min_price, offer.price_incl_tax)
        delivery_s = self._delivery_score(min_delivery, offer.delivery_days)

        composite = (
            price_s * self.weights["price"]
            + offer.technical_score * self.weights["technical"]
            + offer.compliance_score * self.weights["compliance"]
            + delivery_s * self.weights["delivery"]
        )

        return {
            "supplier_name": offer.supplier_name,
            "price_score": round(price_s, 2),
            "technical_score": float(offer.technical_score),
            "compliance_score": float(offer.compliance_score),
            "delivery_score": round(delivery_s, 2),
            "composite_score": composite,
        }

    def score_offers(self, offers: list[Offer]) -> list[dict]:
        """Scores de toutes les offres, dans l'ordre de la liste."""
        if not offers:
            return []
        min_price = min(max(offer.price_incl_tax, 1) for offer in offers)
        min_delivery = min(max(offer.delivery_days, 1) for offer in offers)
        return [self.calculate_score(offer, min_price, min_delivery) for offer in offers]

    def find_best_option(self, offers: list[Offer]) -> str:
        """
        Retourne le nom du fournisseur le mieux classé.
        À score égal, la première offre rencontrée est conservée.
        Liste vide : "N/A" (pas de recommandation disponible).
        """
        if not offers:
            return NOT_APPLICABLE

        best_name = offers[0].supplier_name
        best_score = float("-inf")
        for result in self.score_offers(offers):
            if result["composite_score"] > best_score:
                best_name = result["supplier_name"]
                best_score = result["composite_score"]

        logger.info(f"🏆 Meilleure offre ({self.priority}): {best_name} ({best_score:.2f})")
        return best_name


def find_best_option(offers: list[Offer], priority: str | None = None) -> str:
    return OfferRanker(priority).find_best_option(offers)

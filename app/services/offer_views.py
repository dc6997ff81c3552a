# app/services/offer_views.py
"""
Indicateurs d'affichage des offres : badge "recommandé", gagnant, tri.

Le badge "recommandé" utilise une correspondance partielle volontairement
plus souple que la résolution de la meilleure offre persistée.
"""

import re

from app.schemas.offer import Offer

SORT_KEYS = {
    "price_asc": (lambda offer: offer.price_incl_tax, False),
    "price_desc": (lambda offer: offer.price_incl_tax, True),
    "delivery_asc": (lambda offer: offer.delivery_days, False),
    "technical_desc": (lambda offer: offer.technical_score, True),
    "compliance_desc": (lambda offer: offer.compliance_score, True),
}
DEFAULT_SORT = "price_asc"

_MARKDOWN_RE = re.compile(r"\*\*|\*|__|_")


def display_name(text: str | None) -> str:
    """Nom sans balisage markdown, en minuscules"""
    if not text:
        return ""
    return _MARKDOWN_RE.sub("", text).strip().lower()


def is_offer_recommended(offer: Offer, best_option: str) -> bool:
    best = display_name(best_option)
    name = display_name(offer.supplier_name)
    return (
        name == best
        or (len(best) > 3 and best in name)
        or (len(name) > 3 and name in best)
    )


def is_offer_winner(offer: Offer, winning_supplier: str | None) -> bool:
    if not winning_supplier:
        return False
    return display_name(winning_supplier) == display_name(offer.supplier_name)


def sort_offers(offers: list[Offer], sort: str = DEFAULT_SORT) -> list[Offer]:
    key, reverse = SORT_KEYS.get(sort, SORT_KEYS[DEFAULT_SORT])
    # sorted() est stable : l'ordre d'extraction départage les égalités
    return sorted(offers, key=key, reverse=reverse)


def filter_offers(
    offers: list[Offer],
    best_option: str,
    winning_supplier: str | None,
    offer_filter: str = "all",
) -> list[Offer]:
    if offer_filter == "recommended":
        return [offer for offer in offers if is_offer_recommended(offer, best_option)]
    if offer_filter == "winner":
        return [offer for offer in offers if is_offer_winner(offer, winning_supplier)]
    return list(offers)

"""
Tests du classement pondéré des offres
"""

import pytest

from app.schemas.offer import Offer
from app.services.ranker import NOT_APPLICABLE, OfferRanker, find_best_option


def make_offer(name, price, delivery=0, technical=60, compliance=60):
    return Offer(
        supplier_name=name,
        price_excl_tax=price,
        price_incl_tax=price,
        currency="XOF",
        delivery_days=delivery,
        technical_score=technical,
        compliance_score=compliance,
    )


@pytest.fixture
def fast_vs_cheap():
    return [
        make_offer("Rapide", 1000, delivery=5, technical=50, compliance=50),
        make_offer("Economique", 800, delivery=30, technical=90, compliance=90),
    ]


class TestWeightProfiles:
    @pytest.mark.parametrize("priority", ["price", "quality", "deadline"])
    def test_weights_sum_to_one(self, priority):
        assert sum(OfferRanker.WEIGHT_PROFILES[priority].values()) == pytest.approx(1.0)

    def test_unknown_priority_uses_price(self):
        ranker = OfferRanker("cheapest")
        assert ranker.priority == "price"
        assert ranker.weights["price"] == 0.55


class TestCompositeScore:
    def test_deadline_priority_hand_computed(self, fast_vs_cheap):
        scores = OfferRanker("deadline").score_offers(fast_vs_cheap)
        # 80*0.20 + 50*0.25 + 50*0.15 + 100*0.40
        assert scores[0]["composite_score"] == pytest.approx(76.0)
        # 100*0.20 + 90*0.25 + 90*0.15 + (5/30*100)*0.40
        assert scores[1]["composite_score"] == pytest.approx(62.6667, abs=1e-3)

    def test_deadline_winner(self, fast_vs_cheap):
        assert find_best_option(fast_vs_cheap, "deadline") == "Rapide"

    def test_price_winner(self, fast_vs_cheap):
        assert find_best_option(fast_vs_cheap, "price") == "Economique"

    def test_zero_weight_ignores_delivery(self):
        offers = [make_offer("A", 100, delivery=1), make_offer("B", 100, delivery=300)]
        scores = OfferRanker("quality").score_offers(offers)
        assert scores[0]["composite_score"] == scores[1]["composite_score"]

    def test_zero_price_and_delay_treated_as_one(self):
        offers = [make_offer("Gratuit", 0, delivery=0), make_offer("Payant", 10, delivery=10)]
        scores = OfferRanker("deadline").score_offers(offers)
        assert scores[0]["price_score"] == 100
        assert scores[0]["delivery_score"] == 100
        assert scores[1]["price_score"] == 10


class TestBestOption:
    def test_empty_list(self):
        assert find_best_option([], "price") == NOT_APPLICABLE

    def test_tie_keeps_first(self):
        offers = [make_offer("Premier", 500), make_offer("Second", 500)]
        assert find_best_option(offers) == "Premier"

    def test_deterministic(self, fast_vs_cheap):
        results = {find_best_option(fast_vs_cheap, "deadline") for _ in range(5)}
        assert results == {"Rapide"}

    def test_result_is_an_offer_name(self, fast_vs_cheap):
        for priority in ("price", "quality", "deadline"):
            assert find_best_option(fast_vs_cheap, priority) in {"Rapide", "Economique"}

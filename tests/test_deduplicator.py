"""
Tests du dédoublonnage par fournisseur
"""

from app.schemas.offer import Offer
from app.services.deduplicator import dedupe_offers, supplier_key


def make_offer(name, ttc, **kwargs):
    return Offer(supplier_name=name, price_excl_tax=ttc, price_incl_tax=ttc, currency="XOF", **kwargs)


class TestDedupe:
    def test_keeps_cheapest_duplicate(self):
        offers = [make_offer("Alpha", 200000), make_offer("ALPHA", 150000)]
        result = dedupe_offers(offers)
        assert len(result) == 1
        assert result[0].supplier_name == "ALPHA"
        assert result[0].price_incl_tax == 150000

    def test_equal_price_keeps_first(self):
        result = dedupe_offers([make_offer("Alpha", 100, delivery_days=5), make_offer("alpha", 100, delivery_days=9)])
        assert len(result) == 1
        assert result[0].delivery_days == 5

    def test_order_of_first_appearance(self):
        offers = [make_offer("Beta", 10), make_offer("Alpha", 30), make_offer("beta", 5)]
        result = dedupe_offers(offers)
        assert [offer.supplier_name for offer in result] == ["beta", "Alpha"]

    def test_names_unique_case_insensitively(self):
        offers = [make_offer(name, i) for i, name in enumerate(["A", "a", "B", "b ", "C"])]
        keys = [supplier_key(offer.supplier_name) for offer in dedupe_offers(offers)]
        assert len(keys) == len(set(keys)) == 3

    def test_idempotent(self):
        offers = [make_offer("Alpha", 200), make_offer("alpha", 100), make_offer("Gamma", 50)]
        once = dedupe_offers(offers)
        assert dedupe_offers(once) == once

    def test_empty(self):
        assert dedupe_offers([]) == []

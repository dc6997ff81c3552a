"""
Tests d'assemblage du résultat de comparaison
"""

import pytest

from app.exceptions import NoUsableOffersError
from app.services.assembler import assemble_result, resolve_best_option
from app.services.normalizer import normalize_offers


def assemble(raw, priority="price", language="fr"):
    return assemble_result(
        raw,
        fallback_title="Ordinateurs",
        fallback_needs="Besoin saisi",
        target_currency="XOF",
        language=language,
        priority=priority,
    )


class TestBestOption:
    def test_exact_match_returns_canonical_name(self):
        result = assemble({
            "bestOption": "  alpha sarl ",
            "offers": [
                {"supplierName": "Alpha SARL", "priceExclTax": 100},
                {"supplierName": "Beta", "priceExclTax": 50},
            ],
        })
        assert result.best_option == "Alpha SARL"

    def test_unknown_proposal_recomputed(self):
        result = assemble({
            "bestOption": "Ghost Supplier",
            "offers": [
                {"supplierName": "Alpha", "priceExclTax": 1000},
                {"supplierName": "Beta", "priceExclTax": 500},
            ],
        })
        assert result.best_option == "Beta"

    def test_partial_name_is_not_a_match(self):
        offers = normalize_offers(
            [
                {"supplierName": "Alpha Industries", "priceExclTax": 1000},
                {"supplierName": "Beta", "priceExclTax": 100},
            ],
            "XOF", "fr",
        )
        assert resolve_best_option("Alpha", offers, "price") == "Beta"

    def test_missing_proposal_recomputed(self):
        result = assemble({"offers": [{"supplierName": "Seul", "priceExclTax": 10}]})
        assert result.best_option == "Seul"


class TestAssembleResult:
    def test_no_offers_is_an_error(self):
        with pytest.raises(NoUsableOffersError) as exc_info:
            assemble({"bestOption": "Alpha", "offers": []})
        assert exc_info.value.status_code == 422

    def test_non_object_response_is_an_error(self):
        with pytest.raises(NoUsableOffersError):
            assemble(["pas", "un", "objet"], language="en")

    def test_duplicates_collapsed(self):
        result = assemble({
            "offers": [
                {"supplierName": "Acme Corp", "priceInclTax": 500},
                {"supplierName": "ACME CORP", "priceInclTax": 300},
            ],
        })
        assert len(result.offers) == 1
        assert result.offers[0].price_incl_tax == 300

    def test_text_fallbacks(self):
        result = assemble({"offers": [{"supplierName": "Alpha"}]}, language="en")
        assert result.title == "Ordinateurs"
        assert result.needs_summary == "Besoin saisi"
        assert result.market_analysis == "Analysis generated with automatic data normalization."

    def test_extracted_texts_kept(self):
        result = assemble({
            "needsSummary": "Résumé IA",
            "marketAnalysis": "Prix stables",
            "offers": [{"supplierName": "Alpha"}],
        })
        assert result.needs_summary == "Résumé IA"
        assert result.market_analysis == "Prix stables"

    def test_deadline_priority_used_for_recompute(self):
        result = assemble(
            {
                "bestOption": "Inconnu",
                "offers": [
                    {"supplierName": "Rapide", "priceInclTax": 1000, "deliveryDays": 5,
                     "technicalScore": 50, "complianceScore": 50},
                    {"supplierName": "Economique", "priceInclTax": 800, "deliveryDays": 30,
                     "technicalScore": 90, "complianceScore": 90},
                ],
            },
            priority="deadline",
        )
        assert result.best_option == "Rapide"

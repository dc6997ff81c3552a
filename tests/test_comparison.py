"""
Tests du pipeline de comparaison (service, fichiers, cache)
"""

import pytest

from app.exceptions import CacheKeyError, NoUsableOffersError, UnreadableAttachmentsError
from app.services.ai_analyzer import AIAnalyzerService
from app.services.cache import InMemoryAnalysisCache
from app.services.comparison import ComparisonRequest, ComparisonService, format_analysis_date
from app.services.file_encoder import Attachment, encode_attachment, encode_attachments, hash_attachments
from app.services.pdf_parser import PDFParserService


@pytest.fixture
def service(fake_client, test_settings):
    analyzer = AIAnalyzerService(client=fake_client, settings=test_settings, sleep=lambda _: None)
    return ComparisonService(analyzer=analyzer, cache=InMemoryAnalysisCache(max_entries=4), settings=test_settings)


def make_request(**overrides):
    params = {
        "title": "Ordinateurs",
        "needs_text": "10 portables",
        "offer_files": [
            Attachment("alpha.txt", "text/plain", "Devis Alpha : 1 000 000 FCFA HT".encode()),
            Attachment("beta.txt", "text/plain", "Devis Beta : 900 000 FCFA HT".encode()),
        ],
        "exchange_rates": {"EUR": 655.957, "USD": 600},
    }
    params.update(overrides)
    return ComparisonRequest(**params)


# ============================================================================
# Fichiers
# ============================================================================

class TestAttachments:
    def test_hashes_keep_upload_order(self):
        files = [Attachment("a.txt", "text/plain", b"a"), Attachment("b.txt", "text/plain", b"b")]
        hashes = hash_attachments(files, "fr", workers=2)
        assert hashes == list(reversed(hash_attachments(list(reversed(files)), "fr")))

    def test_unreadable_content(self):
        with pytest.raises(CacheKeyError, match="scan.pdf"):
            hash_attachments([Attachment("scan.pdf", "application/pdf", None)], "fr")

    def test_text_pdf(self, monkeypatch):
        monkeypatch.setattr(PDFParserService, "extract_text", staticmethod(lambda *a, **k: "Texte du devis"))
        part = encode_attachment(Attachment("devis.pdf", "application/pdf", b"%PDF-1.4"))
        assert part == {"type": "text", "text": "Texte du devis"}

    def test_scanned_pdf_sent_inline(self, monkeypatch):
        monkeypatch.setattr(PDFParserService, "extract_text", staticmethod(lambda *a, **k: None))
        part = encode_attachment(Attachment("scan.pdf", "application/pdf", b"%PDF-1.4"))
        assert part["type"] == "file"
        assert part["file"]["file_data"].startswith("data:application/pdf;base64,")

    def test_image_as_data_url(self):
        part = encode_attachment(Attachment("photo.png", "image/png", b"\x89PNG"))
        assert part["image_url"]["url"].startswith("data:image/png;base64,")

    def test_labels_skip_failed_files(self):
        files = [
            Attachment("a.txt", "text/plain", b"offre A"),
            Attachment("b.txt", "text/plain", None),
            Attachment("c.txt", "text/plain", b"offre C"),
        ]
        parts = encode_attachments(files, "SUPPLIER_OFFER")
        assert [part["text"] for part in parts] == ["[SUPPLIER_OFFER_1]", "offre A", "[SUPPLIER_OFFER_2]", "offre C"]


# ============================================================================
# Pipeline
# ============================================================================

class TestComparisonService:
    def test_full_run(self, service, fake_client, extraction_payload):
        fake_client.completions.outcomes = [extraction_payload()]
        result = service.run(make_request())

        assert result.status == "pending"
        assert result.title == "Ordinateurs"
        assert [offer.supplier_name for offer in result.offers] == ["Alpha SARL", "Beta Services"]
        assert result.offers[0].currency == "XOF"
        assert result.offers[1].price_incl_tax == 1062000
        assert result.best_option == "Alpha SARL"

    def test_cache_hit_skips_extraction(self, service, fake_client, extraction_payload):
        fake_client.completions.outcomes = [extraction_payload()]
        first = service.run(make_request())
        second = service.run(make_request(offer_files=list(reversed(make_request().offer_files))))

        assert len(fake_client.completions.calls) == 1
        assert second.id != first.id
        assert second.offers == first.offers
        assert second.best_option == first.best_option

    def test_different_priority_misses_cache(self, service, fake_client, extraction_payload):
        fake_client.completions.outcomes = [extraction_payload()]
        service.run(make_request())
        service.run(make_request(priority="deadline"))
        assert len(fake_client.completions.calls) == 2

    def test_failures_not_cached(self, service, fake_client, extraction_payload):
        fake_client.completions.outcomes = [extraction_payload(offers=[]), extraction_payload()]
        with pytest.raises(NoUsableOffersError):
            service.run(make_request())
        assert len(service.cache) == 0

        result = service.run(make_request())
        assert len(result.offers) == 2
        assert len(fake_client.completions.calls) == 2

    def test_unreadable_offer_files(self, service, fake_client, monkeypatch):
        monkeypatch.setattr(
            "app.services.comparison.encode_attachments", lambda attachments, *a, **k: []
        )
        with pytest.raises(UnreadableAttachmentsError):
            service.run(make_request())
        assert fake_client.completions.calls == []

    def test_unknown_language_defaults_to_french(self, service, fake_client, extraction_payload):
        fake_client.completions.outcomes = [extraction_payload(offers=[{"priceExclTax": 10}])]
        result = service.run(make_request(language="de"))
        assert result.offers[0].supplier_name == "Fournisseur 1"


def test_date_format_by_language():
    from datetime import datetime

    moment = datetime(2024, 3, 7)
    assert format_analysis_date("fr", moment) == "07/03/2024"
    assert format_analysis_date("en", moment) == "03/07/2024"

# app/services/ai_analyzer.py
"""
Service d'extraction IA - Envoie les cahiers des charges et les offres
fournisseurs à un modèle (API compatible OpenAI) et récupère un JSON
brut d'offres. La réponse n'est pas fiable : elle est seulement parsée
ici, la normalisation se fait dans l'assembleur.
"""

import json
import logging
import re
from dataclasses import dataclass, field

from openai import AuthenticationError, OpenAI, PermissionDeniedError as OpenAIPermissionDenied

from app.config import Settings, get_settings
from app.exceptions import (
    ExtractionError,
    ExtractionParseError,
    InvalidCredentialsError,
    MissingCredentialsError,
    PermissionDeniedError,
)
from app.services.retry import retry_operation

logger = logging.getLogger(__name__)

INVALID_KEY_RE = re.compile(r"API_KEY_INVALID|API key not valid|invalid api key", re.IGNORECASE)
PERMISSION_RE = re.compile(
    r"PERMISSION_DENIED|SERVICE_DISABLED|API_KEY_SERVICE_BLOCKED|referer|referrer", re.IGNORECASE
)

SYSTEM_INSTRUCTION = """You are a Senior Procurement and Financial Auditor.
Objective: extract reliable supplier data and compare offers with strict financial and technical checks.

RULES:
1) Return ONLY a JSON object, no prose, no markdown.
2) Extract supplier identity: company name, tax id (NIF), email, phone, address.
3) Financial extraction:
   - Distinguish the amount excluding tax (HT) from the amount including tax (TTC).
   - Convert amounts to the target currency with the given rates; keep the quoted
     amounts and currency in the original* fields when a conversion was needed.
   - If only one amount is present, infer the other from context (18% VAT only when needed).
   - Currency aliases FCFA/CFA/XOF all mean XOF.
4) Technical extraction:
   - Write a concise mainSpecs summary.
   - technicalScore and complianceScore are integers within [0,100].
5) Recommendation quality:
   - strengths and weaknesses are short and specific (max 6 each).
   - bestOption must exactly match one supplierName from offers.

JSON SHAPE:
{
  "analysisTitle": "string",
  "needsSummary": "string",
  "marketAnalysis": "string",
  "bestOption": "string",
  "offers": [
    {
      "supplierName": "string",
      "taxId": "string",
      "email": "string",
      "phone": "string",
      "address": "string",
      "priceExclTax": 0,
      "priceInclTax": 0,
      "currency": "string",
      "originalPriceExclTax": 0,
      "originalPriceInclTax": 0,
      "originalCurrency": "string",
      "warrantyMonths": 0,
      "deliveryDays": 0,
      "mainSpecs": "string",
      "technicalScore": 0,
      "complianceScore": 0,
      "strengths": ["string"],
      "weaknesses": ["string"],
      "recommendation": "string"
    }
  ]
}"""


@dataclass
class ExtractionRequest:
    """Contexte envoyé au service d'extraction"""
    title: str
    needs_text: str
    manual_specs: str
    target_currency: str
    exchange_rates: dict[str, float]
    language: str
    priority: str = "price"
    requirement_parts: list[dict] = field(default_factory=list)
    offer_parts: list[dict] = field(default_factory=list)

    def build_prompt(self) -> str:
        output_language = "FRENCH" if self.language == "fr" else "ENGLISH"
        return f"""[CONTEXT]
Project: "{self.title}"
Needs: "{self.needs_text}"
Specs: "{self.manual_specs}"
Target Currency: "{self.target_currency}"
Rates: 1 EUR={self.exchange_rates.get("EUR")}, 1 USD={self.exchange_rates.get("USD")}
Priority Hint: "{self.priority}"

[INSTRUCTIONS]
1. Compare each supplier offer against the buyer needs.
2. Extract normalized supplier details and financial values.
3. Provide consistent scoring and justified recommendations.
4. Write needsSummary, marketAnalysis, strengths and weaknesses in {output_language}.

Generate the JSON object."""


def clean_json_output(text: str) -> str:
    """Retire les balises ```json ... ``` éventuelles"""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = re.sub(r"^```[a-zA-Z]*\n?", "", cleaned)
        cleaned = re.sub(r"\n?```$", "", cleaned)
    return cleaned.strip()


def parse_extraction_response(content: str | None, language: str) -> dict:
    """
    Parse la réponse brute du modèle.

    Raises:
        ExtractionParseError: réponse vide, JSON invalide ou non-objet
    """
    if not content or not content.strip():
        raise ExtractionParseError(language, "empty_response")
    try:
        data = json.loads(clean_json_output(content))
    except json.JSONDecodeError as e:
        logger.error(f"❌ Erreur parsing JSON extraction: {e}")
        raise ExtractionParseError(language) from e
    if not isinstance(data, dict):
        logger.error(f"❌ Réponse JSON inattendue ({type(data).__name__})")
        raise ExtractionParseError(language)
    return data


def classify_extraction_error(error: Exception, language: str) -> ExtractionError:
    """Distingue les problèmes de clé/permission des erreurs techniques."""
    if isinstance(error, ExtractionError):
        return error
    message = str(error)
    if isinstance(error, AuthenticationError) or INVALID_KEY_RE.search(message):
        return InvalidCredentialsError(language)
    if isinstance(error, OpenAIPermissionDenied) or PERMISSION_RE.search(message):
        return PermissionDeniedError(language)
    return ExtractionError.technical(language, message or None)


class AIAnalyzerService:
    """Client du service d'extraction des offres"""

    def __init__(self, client=None, settings: Settings | None = None, sleep=None):
        self.settings = settings or get_settings()
        self.model = self.settings.LLM_MODEL
        self._sleep = sleep
        if client is None and self.settings.LLM_API_KEY:
            client = OpenAI(
                api_key=self.settings.LLM_API_KEY,
                base_url=self.settings.LLM_BASE_URL,
            )
        self.client = client

    def _call_model(self, request: ExtractionRequest) -> str | None:
        """Un appel au modèle ; les erreurs réseau/service remontent pour le retry."""
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_INSTRUCTION},
                {
                    "role": "user",
                    "content": [
                        *request.requirement_parts,
                        *request.offer_parts,
                        {"type": "text", "text": request.build_prompt()},
                    ],
                },
            ],
            max_tokens=self.settings.LLM_MAX_TOKENS,
            temperature=self.settings.LLM_TEMPERATURE,
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content
        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.info(f"Réponse extraction reçue ({usage.total_tokens} tokens)")
        return content

    def extract_offers(self, request: ExtractionRequest) -> dict:
        """
        Appelle le service avec retry exponentiel puis parse la réponse.

        Raises:
            MissingCredentialsError: aucune clé API configurée
            ExtractionError: échec après toutes les tentatives
            ExtractionParseError: réponse non exploitable (pas de retry)
        """
        if self.client is None:
            raise MissingCredentialsError(request.language)

        logger.info(
            f"🤖 Extraction '{request.title[:60]}' "
            f"({len(request.requirement_parts) // 2} besoins, {len(request.offer_parts) // 2} offres)"
        )

        try:
            content = retry_operation(
                lambda: self._call_model(request),
                attempts=self.settings.MAX_RETRY_ATTEMPTS,
                base_delay=self.settings.RETRY_BASE_DELAY_SECONDS,
                operation_name="Extraction IA",
                no_retry_on=(AuthenticationError, OpenAIPermissionDenied),
                sleep=self._sleep,
            )
        except Exception as e:
            logger.error(f"❌ Échec extraction après {self.settings.MAX_RETRY_ATTEMPTS} tentatives: {e}")
            raise classify_extraction_error(e, request.language) from e

        return parse_extraction_response(content, request.language)

# app/i18n.py
"""
Textes de repli et messages d'erreur localisés (fr / en)
"""

SUPPORTED_LANGUAGES = ("fr", "en")
DEFAULT_LANGUAGE = "fr"

MESSAGES = {
    "fr": {
        "supplier_label": "Fournisseur",
        "default_strength": "Offre exploitable.",
        "default_weakness": "Aucun risque majeur détecté.",
        "default_recommendation": "Recommandation indisponible.",
        "default_main_specs": "Spécifications non détaillées.",
        "default_market_analysis": "Analyse générée avec normalisation automatique des données.",
        "default_supplier_category": "Général",
        "no_usable_offers": "Aucune offre exploitable n'a été détectée. Vérifiez les documents fournis.",
        "missing_api_key": "Clé API du service d'extraction manquante. Configurez `LLM_API_KEY` dans `.env`, puis redémarrez l'application.",
        "invalid_api_key": "Clé API invalide. Générez une nouvelle clé, puis mettez-la dans `LLM_API_KEY`.",
        "permission_denied": "La clé API est restreinte ou le service d'extraction n'est pas actif pour ce projet. Vérifiez les restrictions de la clé.",
        "technical_error": "Erreur technique lors de l'analyse.",
        "empty_response": "Réponse vide de l'IA.",
        "invalid_json": "Erreur de format JSON dans la réponse de l'IA.",
        "unreadable_offer_files": "Impossible de lire les fichiers d'offres.",
        "unreadable_file": "Impossible de lire le fichier « {name} ».",
    },
    "en": {
        "supplier_label": "Supplier",
        "default_strength": "Offer is usable.",
        "default_weakness": "No major risk detected.",
        "default_recommendation": "Recommendation unavailable.",
        "default_main_specs": "Specifications not detailed.",
        "default_market_analysis": "Analysis generated with automatic data normalization.",
        "default_supplier_category": "General",
        "no_usable_offers": "No usable offer was detected. Please verify the uploaded documents.",
        "missing_api_key": "Missing extraction service API key. Set `LLM_API_KEY` in `.env`, then restart the app.",
        "invalid_api_key": "Invalid API key. Create a new key, then set `LLM_API_KEY`.",
        "permission_denied": "The API key is restricted or the extraction service is not enabled for this project. Check key restrictions.",
        "technical_error": "Technical error while running analysis.",
        "empty_response": "Empty response from the AI service.",
        "invalid_json": "The AI response is not valid JSON.",
        "unreadable_offer_files": "Unable to read the offer files.",
        "unreadable_file": "Unable to read file \"{name}\".",
    },
}


def resolve_language(language: str | None) -> str:
    if language in SUPPORTED_LANGUAGES:
        return language
    return DEFAULT_LANGUAGE


def translate(language: str | None, key: str, **kwargs) -> str:
    """Retourne le message localisé, en français si la langue est inconnue."""
    message = MESSAGES[resolve_language(language)][key]
    return message.format(**kwargs) if kwargs else message

# app/exceptions.py
"""
Erreurs typées du pipeline de comparaison.
Chaque erreur porte un message localisé destiné à l'utilisateur
et un code stable pour le client.
"""

from app.i18n import translate


class ComparisonError(Exception):
    """Base des échecs d'une requête de comparaison"""

    error_code = "comparison_error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ExtractionError(ComparisonError):
    """Échec du service d'extraction après épuisement des tentatives"""

    error_code = "extraction_failed"
    status_code = 502

    @classmethod
    def technical(cls, language: str, detail: str | None = None) -> "ExtractionError":
        return cls(detail or translate(language, "technical_error"))


class MissingCredentialsError(ExtractionError):
    error_code = "missing_credentials"
    status_code = 503

    def __init__(self, language: str):
        super().__init__(translate(language, "missing_api_key"))


class InvalidCredentialsError(ExtractionError):
    error_code = "invalid_credentials"

    def __init__(self, language: str):
        super().__init__(translate(language, "invalid_api_key"))


class PermissionDeniedError(ExtractionError):
    error_code = "permission_denied"

    def __init__(self, language: str):
        super().__init__(translate(language, "permission_denied"))


class ExtractionParseError(ComparisonError):
    """Réponse non exploitable (vide ou JSON invalide) - jamais retentée"""

    error_code = "invalid_response"
    status_code = 502

    def __init__(self, language: str, key: str = "invalid_json"):
        super().__init__(translate(language, key))


class NoUsableOffersError(ComparisonError):
    """Aucune offre après normalisation et dédoublonnage"""

    error_code = "no_usable_offers"
    status_code = 422

    def __init__(self, language: str):
        super().__init__(translate(language, "no_usable_offers"))


class UnreadableAttachmentsError(ComparisonError):
    """Aucun fichier d'offre n'a pu être préparé pour l'extraction"""

    error_code = "unreadable_files"
    status_code = 400

    def __init__(self, language: str):
        super().__init__(translate(language, "unreadable_offer_files"))


class CacheKeyError(ComparisonError):
    """Pièce jointe illisible : levée avant tout appel externe"""

    error_code = "unreadable_file"
    status_code = 400

    def __init__(self, language: str, filename: str):
        super().__init__(translate(language, "unreadable_file", name=filename))
        self.filename = filename

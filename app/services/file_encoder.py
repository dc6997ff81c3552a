# app/services/file_encoder.py
"""
Préparation des pièces jointes : empreintes de contenu (clé de cache)
et encodage transportable vers le service d'extraction.
Les fichiers sont traités en parallèle, le résultat garde l'ordre d'upload.
"""

import base64
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from app.exceptions import CacheKeyError
from app.services.cache import compute_file_hash
from app.services.pdf_parser import PDFParserService

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"


@dataclass(frozen=True)
class Attachment:
    """Fichier uploadé (document ou image)"""
    filename: str
    content_type: str
    content: bytes

    @property
    def is_pdf(self) -> bool:
        return self.content_type == PDF_MIME_TYPE or self.filename.lower().endswith(".pdf")

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith("image/")


def _hash_one(attachment: Attachment, language: str) -> str:
    if not isinstance(attachment.content, (bytes, bytearray)):
        raise CacheKeyError(language, attachment.filename)
    return compute_file_hash(bytes(attachment.content))


def hash_attachments(attachments: list[Attachment], language: str, workers: int = 4) -> list[str]:
    """
    Empreintes SHA-256 des fichiers, dans l'ordre d'upload.

    Raises:
        CacheKeyError: contenu illisible
    """
    if not attachments:
        return []
    with ThreadPoolExecutor(max_workers=max(1, min(workers, len(attachments)))) as executor:
        return list(executor.map(lambda a: _hash_one(a, language), attachments))


def _data_url(content: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"


def encode_attachment(attachment: Attachment, max_pdf_pages: int = 50) -> dict | None:
    """
    Convertit un fichier en bloc de contenu pour l'API chat :
    - PDF avec couche texte : texte extrait
    - PDF scanné : fichier base64 inline
    - image : data URL
    Retourne None si le fichier ne peut pas être préparé.
    """
    try:
        if attachment.is_pdf:
            text = PDFParserService.extract_text(
                attachment.content, attachment.filename, max_pages=max_pdf_pages
            )
            if text:
                return {"type": "text", "text": text}
            return {
                "type": "file",
                "file": {
                    "filename": attachment.filename,
                    "file_data": _data_url(attachment.content, PDF_MIME_TYPE),
                },
            }

        if attachment.is_image:
            return {
                "type": "image_url",
                "image_url": {"url": _data_url(attachment.content, attachment.content_type)},
            }

        # Texte brut (txt, csv...) : décodé tel quel
        return {"type": "text", "text": attachment.content.decode("utf-8", errors="replace")}
    except Exception as e:
        logger.error(f"❌ Erreur préparation fichier {attachment.filename}: {e}")
        return None


def encode_attachments(
    attachments: list[Attachment],
    label: str,
    max_pdf_pages: int = 50,
    workers: int = 4,
) -> list[dict]:
    """
    Encode les fichiers en parallèle ; chaque bloc est précédé
    d'une étiquette [LABEL_n]. Les fichiers non préparables sont ignorés.
    """
    if not attachments:
        return []

    with ThreadPoolExecutor(max_workers=max(1, min(workers, len(attachments)))) as executor:
        encoded = list(executor.map(lambda a: encode_attachment(a, max_pdf_pages), attachments))

    parts = []
    index = 0
    for part in encoded:
        if part is None:
            continue
        index += 1
        parts.append({"type": "text", "text": f"[{label}_{index}]"})
        parts.append(part)
    return parts

# app/services/pdf_parser.py
"""
Service d'extraction de texte depuis les fichiers PDF uploadés.
Utilise PyPDF2 pour parser les documents en mémoire.
"""

import io
import logging
import re

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

logger = logging.getLogger(__name__)


class PDFParserService:
    """Extraction de texte depuis les PDFs"""

    @staticmethod
    def extract_text(content: bytes, filename: str = "document.pdf", max_pages: int = 50) -> str | None:
        """
        Extrait le texte d'un PDF.

        Args:
            content: Contenu binaire du PDF
            filename: Nom du fichier (pour les logs)
            max_pages: Nombre maximum de pages à traiter

        Returns:
            Texte extrait ou None si le PDF n'a pas de couche texte
        """
        if not content:
            logger.error(f"❌ Fichier PDF vide: {filename}")
            return None

        try:
            reader = PdfReader(io.BytesIO(content))
            total_pages = len(reader.pages)
        except (PdfReadError, ValueError, OSError) as e:
            logger.error(f"❌ Erreur parsing PDF {filename}: {e}")
            return None

        pages_to_read = min(total_pages, max_pages)
        logger.info(f"📄 Parsing PDF: {filename} ({total_pages} pages)")

        text_parts = []
        for i in range(pages_to_read):
            try:
                page_text = reader.pages[i].extract_text()
                if page_text:
                    text_parts.append(page_text.strip())
            except Exception as e:
                logger.warning(f"⚠️ Erreur page {i+1}: {e}")
                continue

        if not text_parts:
            logger.warning(f"⚠️ Aucun texte extrait de {filename} (document scanné ?)")
            return None

        full_text = PDFParserService._clean_text("\n\n".join(text_parts))
        logger.info(f"✅ Texte extrait: {len(full_text)} caractères depuis {filename}")
        return full_text or None

    @staticmethod
    def _clean_text(text: str) -> str:
        """Nettoie le texte extrait"""
        # Supprimer les caractères de contrôle
        text = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', text)

        # Normaliser les espaces multiples
        text = re.sub(r' {3,}', '  ', text)

        # Normaliser les sauts de ligne multiples
        text = re.sub(r'\n{4,}', '\n\n\n', text)

        # Supprimer les lignes contenant uniquement des tirets ou underscores
        text = re.sub(r'^[-_=]{5,}$', '', text, flags=re.MULTILINE)

        return text.strip()

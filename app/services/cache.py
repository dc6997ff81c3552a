# app/services/cache.py
"""
Cache adressé par contenu des résultats de comparaison.

La clé est un SHA-256 calculé sur le contexte complet de la requête
(textes, empreintes des fichiers, taux, devise, langue, priorité).
Les empreintes de fichiers sont triées : l'ordre d'upload ne change pas la clé.
"""

import hashlib
import json
import logging
import threading
from collections import OrderedDict
from typing import Protocol

from app.schemas.offer import ComparisonBody

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 24


def compute_file_hash(content: bytes) -> str:
    """Empreinte SHA-256 (hex) du contenu d'un fichier"""
    return hashlib.sha256(content).hexdigest()


def build_cache_key(
    title: str,
    needs: str,
    manual_specs: str,
    requirement_hashes: list[str],
    offer_hashes: list[str],
    exchange_rates: dict[str, float],
    currency: str,
    language: str,
    priority: str | None = None,
) -> str:
    """Clé stable du contexte d'analyse"""
    payload = json.dumps(
        {
            "title": title,
            "needs": needs,
            "specs": manual_specs,
            "req": "|".join(sorted(requirement_hashes)),
            "off": "|".join(sorted(offer_hashes)),
            "rates": exchange_rates,
            "curr": currency,
            "lang": language,
            "priority": priority or "price",
        },
        sort_keys=True,
        ensure_ascii=False,
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class AnalysisCache(Protocol):
    """Interface d'un cache de résultats"""

    def get(self, key: str) -> ComparisonBody | None: ...

    def put(self, key: str, result: ComparisonBody) -> None: ...

    def evict(self, key: str) -> None: ...

    def clear(self) -> None: ...

    def __len__(self) -> int: ...


class InMemoryAnalysisCache:
    """Cache borné en mémoire, éviction de l'entrée la plus ancienne"""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        if max_entries < 1:
            raise ValueError("max_entries doit être >= 1")
        self.max_entries = max_entries
        self._entries: OrderedDict[str, ComparisonBody] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> ComparisonBody | None:
        with self._lock:
            result = self._entries.get(key)
        if result is None:
            logger.info(f"[Cache] Miss (SHA-256: {key[:8]}...)")
            return None
        logger.info(f"[Cache] Hit! (SHA-256: {key[:8]}...)")
        return result.model_copy(deep=True)

    def put(self, key: str, result: ComparisonBody) -> None:
        with self._lock:
            self._entries[key] = result.model_copy(deep=True)
            while len(self._entries) > self.max_entries:
                oldest_key, _ = self._entries.popitem(last=False)
                logger.info(f"[Cache] Éviction (SHA-256: {oldest_key[:8]}...)")

    def evict(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries


class NullAnalysisCache:
    """Cache désactivé : ne stocke rien"""

    def get(self, key: str) -> ComparisonBody | None:
        return None

    def put(self, key: str, result: ComparisonBody) -> None:
        pass

    def evict(self, key: str) -> None:
        pass

    def clear(self) -> None:
        pass

    def __len__(self) -> int:
        return 0

# app/services/sanitizers.py
"""
Sanitizers de valeurs - Coercition de champs non fiables
(texte, nombres, devises, listes) vers des valeurs bornées.
Aucune de ces fonctions ne lève d'exception : en cas de doute,
la valeur de repli est retournée.
"""

import math
import re
from typing import Any

MAX_LIST_ENTRIES = 6

CURRENCY_ALIASES = {
    "FCFA": "XOF",
    "CFA": "XOF",
}

_WHITESPACE_RE = re.compile(r"\s+")


def clean_text(value: Any, fallback: str = "") -> str:
    """Réduit les espaces multiples et supprime les bords ; fallback si vide ou non-texte."""
    if not isinstance(value, str):
        return fallback
    cleaned = _WHITESPACE_RE.sub(" ", value).strip()
    return cleaned or fallback


def to_finite_number(value: Any, fallback: float = 0.0) -> float:
    """Convertit en nombre fini, sinon retourne le fallback."""
    # bool est un int en Python, on ne veut pas True -> 1
    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, str):
        value = value.strip()
        # "1_000" est accepté par float() mais pas comme nombre saisi
        if not value or "_" in value:
            return fallback
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return fallback
    if not math.isfinite(number):
        return fallback
    return number


def round_half_up(value: float) -> int | float:
    """
    Arrondi commercial (0.5 -> 1), pas l'arrondi bancaire de round().
    Une valeur non finie est retournée telle quelle.
    """
    if not math.isfinite(value):
        return value
    return int(math.floor(value + 0.5))


def clamp(value: float, minimum: int, maximum: int) -> int:
    """Arrondit puis borne la valeur dans [minimum, maximum]."""
    return max(minimum, min(maximum, round_half_up(value)))


def normalize_currency(value: Any, default_currency: str) -> str:
    """Code devise en majuscules, alias FCFA/CFA -> XOF."""
    code = clean_text(value).upper()
    if not code:
        return default_currency.upper()
    return CURRENCY_ALIASES.get(code, code)


def normalize_string_list(value: Any, fallback: list[str]) -> list[str]:
    """Garde les chaînes non vides (max 6), sinon la liste de repli."""
    if not isinstance(value, (list, tuple)):
        return list(fallback)
    items = [clean_text(item) for item in value]
    items = [item for item in items if item]
    return items[:MAX_LIST_ENTRIES] if items else list(fallback)

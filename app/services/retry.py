# app/services/retry.py
"""
Retry avec backoff exponentiel, indépendant de l'appel protégé.
"""

import logging
from collections.abc import Callable
from typing import TypeVar

from tenacity import (
    Retrying,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_operation(
    operation: Callable[[], T],
    attempts: int = 3,
    base_delay: float = 1.0,
    operation_name: str = "API Call",
    no_retry_on: tuple[type[BaseException], ...] = (),
    sleep: Callable[[float], None] | None = None,
) -> T:
    """
    Exécute `operation` jusqu'à `attempts` fois.
    Délais : base_delay, 2 x base_delay, 4 x base_delay...
    La dernière exception est relancée telle quelle.

    Args:
        no_retry_on: exceptions relancées immédiatement, sans nouvelle tentative
        sleep: fonction d'attente (injectable pour les tests)
    """
    options = {}
    if sleep is not None:
        options["sleep"] = sleep
    if no_retry_on:
        options["retry"] = retry_if_not_exception_type(no_retry_on)

    retryer = Retrying(
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_exponential(multiplier=base_delay, exp_base=2, min=0),
        reraise=True,
        before_sleep=lambda retry_state: logger.warning(
            f"[{operation_name}] Erreur lors de la tentative "
            f"{retry_state.attempt_number}/{attempts}: {retry_state.outcome.exception()} "
            f"- reprise dans {retry_state.next_action.sleep:.1f}s"
        ),
        **options,
    )
    return retryer(operation)

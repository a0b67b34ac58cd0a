from __future__ import annotations

import logging
import secrets
import string
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

FLIGHT_PREFIX = "FL"
CAR_RENTAL_PREFIX = "CR"
SUFFIX_ALPHABET = string.ascii_uppercase + string.digits
SUFFIX_LENGTH = 9


class ReferenceGenerator(Protocol):
    def generate(self, prefix: str) -> str:
        ...


class RandomReferenceGenerator:
    """Prefix plus random uppercase alphanumerics, re-drawn while ``exists``
    reports a collision."""

    def __init__(
        self,
        exists: Callable[[str], bool],
        max_attempts: int = 10,
        suffix_length: int = SUFFIX_LENGTH,
    ) -> None:
        self.exists = exists
        self.max_attempts = max_attempts
        self.suffix_length = suffix_length

    def _draw(self, prefix: str) -> str:
        suffix = "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(self.suffix_length))
        return prefix + suffix

    def generate(self, prefix: str) -> str:
        for attempt in range(1, self.max_attempts + 1):
            reference = self._draw(prefix)
            if not self.exists(reference):
                return reference
            logger.warning("Booking reference collision on attempt %d: %s", attempt, reference)
        raise RuntimeError(
            f"Could not generate a unique {prefix} reference in {self.max_attempts} attempts"
        )

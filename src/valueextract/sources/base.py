"""Abstract base class for all value sources."""
from __future__ import annotations

from abc import ABC, abstractmethod


class ValueSource(ABC):
    """A read-only key -> string lookup feeding an extractor.

    Implementations signal every failure by raising ``SourceError``:
    ``KeyNotFoundError`` for absence, another subclass for anything else.
    The extractor only suppresses ``KeyNotFoundError`` for optional keys.
    """

    @abstractmethod
    def get(self, key: str) -> str:
        """Look up the raw string value for a key.

        Args:
            key: The key to look up.

        Returns:
            The raw string value.

        Raises:
            KeyNotFoundError: If the key is absent.
            SourceError: If the source failed for any other reason.
        """

"""Value kind detection for encodable structures."""

import logging
import numbers
from collections.abc import Mapping
from typing import Any, Iterator, Optional, Tuple
from .types import ValueKind


class ValueTypeDetector:
    """
    Classifies arbitrary Python values into the closed set of ValueKind variants.

    The encoder dispatches on the returned kind only, so every value it sees
    falls into exactly one branch.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the value type detector.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def detect(self, value: Any) -> ValueKind:
        """
        Detect the kind of a single value.

        Args:
            value: Value to classify

        Returns:
            ValueKind enum indicating the value variant
        """
        if value is None:
            return ValueKind.ABSENT
        # bool subclasses int, so it must be checked first
        if isinstance(value, bool):
            return ValueKind.BOOLEAN
        if isinstance(value, numbers.Number) and not isinstance(value, complex):
            return ValueKind.NUMBER
        if isinstance(value, (str, bytes)):
            return ValueKind.STRING
        if isinstance(value, (list, tuple)):
            return ValueKind.SEQUENCE
        if isinstance(value, Mapping):
            return ValueKind.MAPPING
        if callable(value):
            return ValueKind.ABSENT
        return ValueKind.MAPPING

    def own_items(self, value: Any) -> Iterator[Tuple[str, Any]]:
        """
        Iterate the own key/value pairs of a mapping-kind value.

        Mappings yield their items in insertion order. Other objects yield
        their instance attributes; class-level attributes are inherited and
        therefore skipped. Objects without an instance ``__dict__`` have no
        own keys.

        Args:
            value: Value previously classified as ValueKind.MAPPING

        Yields:
            (key, child) tuples with keys converted to str
        """
        if isinstance(value, Mapping):
            items = value.items()
        else:
            items = getattr(value, "__dict__", {}).items()

        for key, child in items:
            yield str(key), child

    @staticmethod
    def as_text(value: Any) -> str:
        """Render a STRING-kind value as text."""
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        return value

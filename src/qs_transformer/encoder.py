"""Recursive encoder turning nested values into bracket-style query strings."""

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional
from .types import CyclicReferenceError, ValueKind
from .data_type_detector import ValueTypeDetector
from .key_path import EscapeFunction, append_key, child_key, default_escape


DEFAULT_SEPARATOR = "&"
DEFAULT_ASSIGNER = "="


class CycleGuard:
    """
    Ancestor chain of containers currently being encoded.

    Membership is by identity, so equal but distinct containers never count
    as a cycle. One guard belongs to exactly one top-level encode call.
    """

    def __init__(self):
        self._stack: List[Any] = []

    def __len__(self) -> int:
        return len(self._stack)

    def __contains__(self, value: Any) -> bool:
        return any(ancestor is value for ancestor in self._stack)

    @contextmanager
    def visiting(self, value: Any, key_prefix: str = "") -> Iterator[None]:
        """
        Mark ``value`` as an ancestor for the duration of the block.

        Raises:
            CyclicReferenceError: If ``value`` is already on the ancestor chain
        """
        if value in self:
            raise CyclicReferenceError(key_prefix)

        self._stack.append(value)
        try:
            yield
        finally:
            self._stack.pop()


class QueryStringEncoder:
    """
    Depth-first, pre-order encoder for the bracket query-string convention.

    Scalars become ``key=value`` segments, sequences repeat their key with a
    trailing ``[]`` and mappings nest their keys in brackets. Segments are
    joined with the configured separator.
    """

    def __init__(self, separator: str = DEFAULT_SEPARATOR,
                 assigner: str = DEFAULT_ASSIGNER,
                 escape: Optional[EscapeFunction] = None,
                 detector: Optional[ValueTypeDetector] = None):
        """
        Initialize the encoder.

        Args:
            separator: Text placed between segments (empty falls back to "&")
            assigner: Text placed between key and value (empty falls back to "=")
            escape: Percent-encoding function for keys and scalar values
            detector: Optional ValueTypeDetector instance
        """
        self.separator = separator or DEFAULT_SEPARATOR
        self.assigner = assigner or DEFAULT_ASSIGNER
        self.escape = escape or default_escape
        self.detector = detector or ValueTypeDetector()

        self._handlers: Dict[ValueKind, Callable[[Any, str, CycleGuard], str]] = {
            ValueKind.ABSENT: self._encode_absent,
            ValueKind.BOOLEAN: self._encode_boolean,
            ValueKind.NUMBER: self._encode_scalar,
            ValueKind.STRING: self._encode_string,
            ValueKind.SEQUENCE: self._encode_sequence,
            ValueKind.MAPPING: self._encode_mapping,
        }

    def encode(self, value: Any, key_prefix: str = "") -> str:
        """
        Encode ``value`` into a query string.

        Args:
            value: Arbitrary nested value
            key_prefix: Key under which ``value`` is stored ("" for the root)

        Returns:
            The encoded query string ("" when nothing is emitted)

        Raises:
            CyclicReferenceError: If ``value`` contains itself
        """
        return self._encode(value, key_prefix or "", CycleGuard())

    def _encode(self, value: Any, key: str, guard: CycleGuard) -> str:
        kind = self.detector.detect(value)
        return self._handlers[kind](value, key, guard)

    def _join(self, parts: List[str]) -> str:
        return self.separator.join(part for part in parts if part)

    def _encode_absent(self, value: Any, key: str, guard: CycleGuard) -> str:
        if key:
            return self.escape(key) + self.assigner
        return ""

    def _encode_boolean(self, value: bool, key: str, guard: CycleGuard) -> str:
        return self._encode_scalar(int(value), key, guard)

    def _encode_string(self, value: Any, key: str, guard: CycleGuard) -> str:
        return self._encode_scalar(self.detector.as_text(value), key, guard)

    def _encode_scalar(self, value: Any, key: str, guard: CycleGuard) -> str:
        return self.escape(key) + self.assigner + self.escape(value)

    def _encode_sequence(self, value: Any, key: str, guard: CycleGuard) -> str:
        element_key = append_key(key)
        with guard.visiting(value, key):
            parts = [self._encode(item, element_key, guard) for item in value]
        return self._join(parts)

    def _encode_mapping(self, value: Any, key: str, guard: CycleGuard) -> str:
        with guard.visiting(value, key):
            parts = [
                self._encode(child, child_key(key, name), guard)
                for name, child in self.detector.own_items(value)
            ]
        encoded = self._join(parts)

        # An empty mapping still reserves its key
        if not encoded and key:
            return key + self.assigner
        return encoded


def stringify(value: Any, separator: str = DEFAULT_SEPARATOR,
              assigner: str = DEFAULT_ASSIGNER, key_prefix: str = "",
              escape: Optional[EscapeFunction] = None) -> str:
    """
    Convert an arbitrary value to its query-string representation.

    >>> stringify({"a": {"b": [1, 2]}})
    'a[b][]=1&a[b][]=2'

    Raises:
        CyclicReferenceError: If the value references one of its ancestors
    """
    encoder = QueryStringEncoder(separator=separator, assigner=assigner, escape=escape)
    return encoder.encode(value, key_prefix)

"""
Query String Transformer - Bidirectional query string transformation tool.

Converts between nested key-value structures and their flattened
bracket-style query string encoding, e.g. ``a[b][]=1&a[b][]=2``.
"""

__version__ = "1.0.0"

from .encoder import stringify, QueryStringEncoder, CycleGuard
from .decoder import parse, QueryStringDecoder
from .key_path import default_escape, default_unescape
from .qs_transformer import QueryStringTransformer
from .types import CyclicReferenceError, ProcessingError, EncodeResult, DecodeResult

__all__ = [
    "stringify",
    "parse",
    "QueryStringEncoder",
    "QueryStringDecoder",
    "CycleGuard",
    "QueryStringTransformer",
    "CyclicReferenceError",
    "ProcessingError",
    "EncodeResult",
    "DecodeResult",
    "default_escape",
    "default_unescape",
]

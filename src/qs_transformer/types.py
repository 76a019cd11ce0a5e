"""Core type definitions for the Query String Transformer."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ValueKind(Enum):
    """Enumeration of the value variants the encoder understands."""
    ABSENT = "absent"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


class ErrorType(Enum):
    """Enumeration of error types."""
    CIRCULAR = "circular"
    SYNTAX = "syntax"
    STRUCTURE = "structure"


@dataclass
class EncodeResult:
    """Result of stringify operation."""
    success: bool
    query_string: str
    errors: Optional[List[str]] = None


@dataclass
class DecodeResult:
    """Result of parse operation."""
    success: bool
    data: Dict[str, Any]
    warnings: List[str] = field(default_factory=list)
    errors: Optional[List[str]] = None


@dataclass
class ValidationError:
    """Validation error details."""
    type: ErrorType
    message: str
    location: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of input validation."""
    is_valid: bool
    errors: List[ValidationError]
    warnings: List[str]


@dataclass
class ErrorResponse:
    """Response for error handling."""
    can_recover: bool
    suggested_action: str
    partial_results: Optional[Any] = None


class ProcessingError(Exception):
    """Custom exception for processing errors."""

    def __init__(self, message: str, error_type: ErrorType, context: Optional[Any] = None):
        super().__init__(message)
        self.error_type = error_type
        self.context = context


class CyclicReferenceError(ProcessingError):
    """Raised when a value being stringified revisits one of its ancestors."""

    def __init__(self, key_prefix: str = ""):
        location = f" at '{key_prefix}'" if key_prefix else ""
        super().__init__(
            f"querystring: cyclical reference{location}",
            ErrorType.CIRCULAR,
            context={"key_prefix": key_prefix},
        )
        self.key_prefix = key_prefix


# Abstract base classes for interfaces

class QueryStringTransformerInterface(ABC):
    """Abstract interface for the Query String Transformer."""

    @abstractmethod
    def stringify(self, value: Any) -> EncodeResult:
        """Encode a nested value into a query string."""
        pass

    @abstractmethod
    def parse(self, query_string: str) -> DecodeResult:
        """Decode a query string into a nested mapping."""
        pass

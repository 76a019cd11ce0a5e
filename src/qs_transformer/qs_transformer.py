"""Main Query String Transformer implementation."""

import logging
from contextlib import nullcontext
from typing import Any, Optional
from .types import (
    QueryStringTransformerInterface,
    EncodeResult,
    DecodeResult,
    ProcessingError,
    ValidationResult,
    ErrorType
)
from .encoder import QueryStringEncoder, DEFAULT_SEPARATOR, DEFAULT_ASSIGNER
from .decoder import QueryStringDecoder
from .key_path import EscapeFunction
from .error_handler import ErrorHandler
from .profiler import PerformanceProfiler


class QueryStringTransformer(QueryStringTransformerInterface):
    """
    Main implementation of the Query String Transformer interface.

    Provides bidirectional conversion between nested values and bracket-style
    query strings. Unlike the module-level ``stringify``/``parse`` functions,
    these methods never raise; failures are reported on the result object.
    """

    def __init__(self, separator: str = DEFAULT_SEPARATOR,
                 assigner: str = DEFAULT_ASSIGNER,
                 escape: Optional[EscapeFunction] = None,
                 logger: Optional[logging.Logger] = None,
                 enable_profiling: bool = False):
        """
        Initialize the Query String Transformer.

        Args:
            separator: Text placed between encoded segments
            assigner: Text placed between keys and values when encoding
            escape: Optional percent-encoding function for encoding
            logger: Optional logger instance
            enable_profiling: Record timing and memory metrics per operation
        """
        self.logger = logger or logging.getLogger(__name__)
        self.error_handler = ErrorHandler(self.logger)
        self.encoder = QueryStringEncoder(separator=separator, assigner=assigner, escape=escape)
        self.decoder = QueryStringDecoder()
        self.profiler = PerformanceProfiler(self.logger) if enable_profiling else None

    def _profile(self, operation_name: str, input_size: int):
        if self.profiler is None:
            return nullcontext({"output_size": 0})
        return self.profiler.profile_operation(operation_name, input_size)

    def stringify(self, value: Any, key_prefix: str = "") -> EncodeResult:
        """
        Encode a nested value into a query string.

        Args:
            value: Value to encode
            key_prefix: Optional key the whole value is nested under

        Returns:
            EncodeResult with the query string or the failure reasons
        """
        with self._profile("stringify", 0) as report:
            try:
                query_string = self.encoder.encode(value, key_prefix)
            except RecursionError:
                error = ProcessingError("Value is nested too deeply to encode", ErrorType.STRUCTURE)
                return self._encode_failure(error)
            except ProcessingError as e:
                return self._encode_failure(e)

            report["output_size"] = len(query_string.encode("utf-8"))

        self.logger.debug(f"Encoded value into {len(query_string)} characters")
        return EncodeResult(success=True, query_string=query_string)

    def _encode_failure(self, error: ProcessingError) -> EncodeResult:
        response = self.error_handler.handle_processing_error(error)
        return EncodeResult(
            success=False,
            query_string="",
            errors=[str(error), response.suggested_action]
        )

    def parse(self, query_string: str) -> DecodeResult:
        """
        Decode a query string into a nested mapping.

        Args:
            query_string: Query string to decode

        Returns:
            DecodeResult with the mapping and any malformed-input warnings
        """
        text = self.decoder.coerce(query_string)

        with self._profile("parse", len(text.encode("utf-8"))):
            validation = self.error_handler.validate_query_string(text)
            data = self.decoder.decode(text)

        self.logger.debug(f"Decoded {len(data)} top-level keys")
        return DecodeResult(success=True, data=data, warnings=validation.warnings)

    def validate(self, value: Any) -> ValidationResult:
        """
        Check a value for cycles and lossy constructs before encoding.

        Args:
            value: Value to validate

        Returns:
            ValidationResult with validation details
        """
        return self.error_handler.validate_value(value)

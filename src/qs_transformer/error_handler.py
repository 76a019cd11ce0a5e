"""Error handling implementation for the Query String Transformer."""

import logging
from typing import Any, Optional
from .types import (
    ValidationResult,
    ValidationError,
    ErrorResponse,
    ProcessingError,
    ErrorType
)
from .utils.validation import ValidationUtils


class ErrorHandler:
    """
    Error handler for Query String Transformer operations.

    Validates inputs ahead of encoding and decoding, and turns processing
    errors into responses callers can act on.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            logger: Optional logger instance for error reporting
        """
        self.logger = logger or logging.getLogger(__name__)

    def validate_query_string(self, query_string: str) -> ValidationResult:
        """
        Validate a query string before decoding.

        Args:
            query_string: Query string to validate

        Returns:
            ValidationResult with validation details
        """
        result = ValidationUtils.validate_query_string(query_string)
        for warning in result.warnings:
            self.logger.warning(warning)
        return result

    def validate_value(self, value: Any) -> ValidationResult:
        """
        Validate a value before encoding.

        Args:
            value: Value to validate

        Returns:
            ValidationResult with validation details
        """
        try:
            result = ValidationUtils.validate_value(value)
        except RecursionError:
            self.logger.error("Value is nested too deeply to validate")
            return ValidationResult(
                is_valid=False,
                errors=[ValidationError(
                    type=ErrorType.STRUCTURE,
                    message="Value is nested too deeply to validate",
                    location="value"
                )],
                warnings=[]
            )

        for warning in result.warnings:
            self.logger.warning(warning)
        return result

    def handle_processing_error(self, error: ProcessingError) -> ErrorResponse:
        """
        Handle processing errors and provide recovery suggestions.

        Args:
            error: ProcessingError to handle

        Returns:
            ErrorResponse with recovery information
        """
        self.logger.error(f"Processing error: {error.error_type.value} - {error}")

        if error.error_type == ErrorType.CIRCULAR:
            return self._handle_circular_error(error)
        elif error.error_type == ErrorType.STRUCTURE:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Flatten the value or reduce its nesting depth before encoding.",
                partial_results=None
            )
        else:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Unknown error type. Please check logs and retry.",
                partial_results=None
            )

    def _handle_circular_error(self, error: ProcessingError) -> ErrorResponse:
        """Handle circular reference errors."""
        key_prefix = error.context.get("key_prefix") if error.context else None
        location = f" (detected under key '{key_prefix}')" if key_prefix else ""
        return ErrorResponse(
            can_recover=False,
            suggested_action="Remove circular references from the value. "
                             f"Check for containers that reference themselves or an ancestor{location}.",
            partial_results=None
        )

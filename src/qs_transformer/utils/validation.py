"""Validation utilities for query strings and encodable values."""

import re
from collections.abc import Mapping
from typing import Any, List, Set
from ..types import ValidationResult, ValidationError, ErrorType, ValueKind
from ..data_type_detector import ValueTypeDetector
from ..key_path import default_unescape, parse_key_path, split_pair


_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_CONTAINER_KINDS = (ValueKind.SEQUENCE, ValueKind.MAPPING)
_detector = ValueTypeDetector()


class ValidationUtils:
    """Utility class for validating query strings and values before transformation."""

    MAX_RECOMMENDED_DEPTH = 20

    @staticmethod
    def validate_query_string(query_string: str) -> ValidationResult:
        """
        Inspect a query string for constructs the decoder resolves leniently.

        Decoding never fails, so the result is always valid. Warnings point
        at pairs whose outcome depends on malformed-input resolution.

        Args:
            query_string: Query string to inspect

        Returns:
            ValidationResult with validation details
        """
        warnings = []

        for index, raw_pair in enumerate(query_string.split("&")):
            if not raw_pair:
                continue

            location = f"pair {index}"
            if _MALFORMED_ESCAPE.search(raw_pair):
                warnings.append(f"Malformed percent escape kept literally in {location}: '{raw_pair}'")

            key, _ = split_pair(default_unescape(raw_pair.replace("+", " ")))
            warnings.extend(
                f"{message} in {location}: '{key}'"
                for message in ValidationUtils._inspect_key(key)
            )

        return ValidationResult(is_valid=True, errors=[], warnings=warnings)

    @staticmethod
    def _inspect_key(key: str) -> List[str]:
        """Describe bracket problems in a single decoded key."""
        problems = []
        if "[" not in key and "]" not in key:
            return problems

        depth = 0
        balanced = True
        nested = False
        for char in key:
            if char == "[":
                nested = nested or depth > 0
                depth += 1
            elif char == "]":
                depth -= 1
                if depth < 0:
                    balanced = False
                    depth = 0
        if depth != 0:
            balanced = False

        if not balanced:
            problems.append("Unbalanced brackets")
        if nested:
            problems.append("Nested brackets")
        if "]" in key and parse_key_path(key) is None:
            problems.append("Bracketed key without a leading name is stored verbatim")
        if re.search(r"\][^\[]", key):
            problems.append("Text after a closing bracket is ignored")

        return problems

    @staticmethod
    def validate_value(value: Any) -> ValidationResult:
        """
        Validate a value before encoding.

        Args:
            value: Value to validate

        Returns:
            ValidationResult with validation details
        """
        errors = []
        warnings = []

        if ValidationUtils._has_circular_references(value):
            errors.append(ValidationError(
                type=ErrorType.CIRCULAR,
                message="Circular references detected in value",
                location="value"
            ))
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

        max_depth = ValidationUtils._calculate_max_depth(value)
        if max_depth > ValidationUtils.MAX_RECOMMENDED_DEPTH:
            warnings.append(f"Deep nesting detected (depth: {max_depth}). Keys will be very long.")

        if ValidationUtils._has_non_string_keys(value):
            warnings.append("Non-string mapping keys are converted with str() and decode as strings")

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings
        )

    @staticmethod
    def _children(data: Any) -> List[Any]:
        if _detector.detect(data) == ValueKind.SEQUENCE:
            return list(data)
        return [child for _, child in _detector.own_items(data)]

    @staticmethod
    def _has_circular_references(data: Any, seen: Set[int] = None) -> bool:
        """Check for circular references in data structure."""
        if seen is None:
            seen = set()

        if _detector.detect(data) in _CONTAINER_KINDS:
            obj_id = id(data)
            if obj_id in seen:
                return True
            seen.add(obj_id)

            try:
                for child in ValidationUtils._children(data):
                    if ValidationUtils._has_circular_references(child, seen):
                        return True
            finally:
                seen.remove(obj_id)

        return False

    @staticmethod
    def _calculate_max_depth(data: Any, current_depth: int = 0) -> int:
        """Calculate maximum nesting depth."""
        if _detector.detect(data) not in _CONTAINER_KINDS:
            return current_depth

        max_child_depth = current_depth
        for child in ValidationUtils._children(data):
            child_depth = ValidationUtils._calculate_max_depth(child, current_depth + 1)
            max_child_depth = max(max_child_depth, child_depth)

        return max_child_depth

    @staticmethod
    def _has_non_string_keys(data: Any) -> bool:
        """Check whether any mapping in the structure has a non-str key."""
        if isinstance(data, Mapping) and any(not isinstance(key, str) for key in data):
            return True
        if _detector.detect(data) in _CONTAINER_KINDS:
            return any(ValidationUtils._has_non_string_keys(child) for child in ValidationUtils._children(data))
        return False

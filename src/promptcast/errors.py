# src/promptcast/errors.py
"""
Error classes for promptcast.

Transport failures raised by the OpenAI SDK (``openai.APIError`` and
friends, ``httpx.HTTPError``) are *not* wrapped: once the retry budget is
spent they reach the caller unchanged.  Everything promptcast itself
raises derives from :class:`PromptcastError`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence


class PromptcastError(Exception):
    """Base exception for all promptcast errors."""


class ConfigurationError(PromptcastError, ValueError):
    """Raised when the client is built without a usable configuration."""


class UsageError(PromptcastError, ValueError):
    """Raised on invalid arguments, before any network call is made."""


class MissingFunctionCallError(PromptcastError):
    """
    Raised when the model response carries no function call.

    Treated like a transport failure: the request is retried.
    """

    def __init__(self, message: str, *, raw_output: Any = None):
        super().__init__(message)
        self.raw_output = raw_output


class ResponseParseError(PromptcastError):
    """
    Raised when the function-call arguments are not valid JSON.

    Attributes:
        raw_output: The arguments string returned by the model
        parse_position: Offset of the decode failure, if known
    """

    def __init__(
        self,
        message: str,
        *,
        raw_output: Any = None,
        parse_position: int | None = None,
    ):
        super().__init__(message)
        self.raw_output = raw_output
        self.parse_position = parse_position


class SchemaViolationError(PromptcastError):
    """
    Raised when a decoded value doesn't match the requested descriptor.

    Example:
        # Descriptor expects {"age": number}, model returns {"age": "old"}
        SchemaViolationError(
            "age: Input should be a valid integer",
            expected={"type": "object", ...},
            value={"age": "old"},
            field_errors=[{"field": "age", "error": "..."}],
        )
    """

    def __init__(
        self,
        message: str,
        *,
        expected: Dict[str, Any] | None = None,
        value: Any = None,
        field_errors: List[Dict[str, Any]] | None = None,
    ):
        super().__init__(message)
        self.expected = expected or {}
        self.value = value
        self.field_errors = field_errors or []

    def describe(self) -> str:
        """Human-readable summary of the failed fields."""
        if self.field_errors:
            errors = "\n".join(
                f"  - {e.get('field') or '<root>'}: {e.get('error', 'invalid')}"
                for e in self.field_errors
            )
            return f"Value {self.value!r} does not match the expected shape:\n{errors}"
        return f"Value {self.value!r} does not match the expected shape: {self}"


class CategoryMismatchError(SchemaViolationError):
    """Raised by strict categorization when the label is outside the allowed set."""

    def __init__(
        self,
        message: str,
        *,
        allowed: Sequence[str],
        value: Any = None,
        expected: Dict[str, Any] | None = None,
    ):
        super().__init__(
            message,
            expected=expected,
            value=value,
            field_errors=[{"field": "value", "error": f"expected one of {list(allowed)}"}],
        )
        self.allowed = list(allowed)

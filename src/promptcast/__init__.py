"""
promptcast: ask a chat model for values of a given type.

This package translates type descriptors into OpenAI function-calling
schemas and validates the model's answer back into Python values.
"""

from promptcast import descriptors
from promptcast._shared.model_config import ModelTier
from promptcast.client import PromptClient
from promptcast.config import ClientSettings, RequestOptions
from promptcast.errors import (
    CategoryMismatchError,
    ConfigurationError,
    MissingFunctionCallError,
    PromptcastError,
    ResponseParseError,
    SchemaViolationError,
    UsageError,
)

__version__ = "0.1.0"

__all__ = [
    "CategoryMismatchError",
    "ClientSettings",
    "ConfigurationError",
    "MissingFunctionCallError",
    "ModelTier",
    "PromptClient",
    "PromptcastError",
    "RequestOptions",
    "ResponseParseError",
    "SchemaViolationError",
    "UsageError",
    "descriptors",
]

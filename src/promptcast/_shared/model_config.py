"""Model tiers and model-specific quirks.

Centralises model-family detection so that the request builder doesn't
need to duplicate the same string-matching logic.
"""

from __future__ import annotations

from enum import Enum


class ModelTier(str, Enum):
    """Capability class of the model serving a request."""

    STANDARD = "standard"
    ADVANCED = "advanced"


DEFAULT_MODELS: dict[ModelTier, str] = {
    ModelTier.STANDARD: "gpt-3.5-turbo",
    ModelTier.ADVANCED: "gpt-4",
}


def is_strict_defaults_model(model: str) -> bool:
    """Some models only accept default sampling parameters."""
    m = (model or "").lower()
    return m.startswith("gpt-5")

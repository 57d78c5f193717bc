"""
Client configuration and per-request options.

Usage::

    from promptcast import ClientSettings, RequestOptions

    settings = ClientSettings.from_env()          # OPENAI_API_KEY, .env
    settings = ClientSettings(api_key="sk-...", max_attempts=5)

    options = RequestOptions(use_higher_capability_model=True)
"""

from __future__ import annotations

import os
from typing import Dict, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from promptcast._shared.model_config import DEFAULT_MODELS, ModelTier
from promptcast.errors import ConfigurationError


class ClientSettings(BaseModel):
    """Everything :class:`~promptcast.client.PromptClient` needs to reach OpenAI."""

    model_config = ConfigDict(extra="forbid")

    api_key: Optional[str] = Field(None, repr=False)
    base_url: Optional[str] = None
    organization: Optional[str] = None
    timeout: float = Field(30.0, gt=0, description="Request timeout in seconds.")
    max_attempts: int = Field(
        3, ge=1, description="Total attempts per request, including the first."
    )
    initial_delay: float = Field(
        0.5, ge=0, description="Seconds to wait after the first failure; doubles each retry."
    )
    models: Dict[ModelTier, str] = Field(default_factory=lambda: dict(DEFAULT_MODELS))
    async_mode: bool = Field(
        True, description="``True`` → ``AsyncOpenAI``, ``False`` → ``OpenAI``."
    )

    @classmethod
    def from_env(
        cls,
        *,
        load_env_file: bool = True,
        dotenv_path: Optional[str] = None,
        **overrides,
    ) -> "ClientSettings":
        """
        Build settings from the process environment.

        Reads ``OPENAI_API_KEY``, ``OPENAI_API_BASE`` and ``OPENAI_ORG_ID``,
        loading a ``.env`` file first when *load_env_file* is set (searched
        upwards from the working directory unless *dotenv_path* is given).
        Variables already set in the environment are not overridden.
        Keyword *overrides* win over the environment.
        """
        if load_env_file:
            load_dotenv(dotenv_path or find_dotenv(usecwd=True))
        values = {
            "api_key": os.getenv("OPENAI_API_KEY"),
            "base_url": os.getenv("OPENAI_API_BASE"),
            "organization": os.getenv("OPENAI_ORG_ID"),
        }
        values.update(overrides)
        return cls(**values)

    def model_for(self, tier: ModelTier) -> str:
        try:
            return self.models[tier]
        except KeyError:
            raise ConfigurationError(f"No model configured for tier '{tier.value}'") from None


class RequestOptions(BaseModel):
    """Per-call options."""

    model_config = ConfigDict(extra="forbid")

    use_higher_capability_model: bool = False
    tier: Optional[ModelTier] = Field(
        None, description="Explicit model tier; wins over use_higher_capability_model."
    )

    def resolve_tier(self) -> ModelTier:
        if self.tier is not None:
            return self.tier
        if self.use_higher_capability_model:
            return ModelTier.ADVANCED
        return ModelTier.STANDARD

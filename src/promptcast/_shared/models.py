"""Typed Pydantic models for the outgoing Chat Completions request."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from promptcast._shared.model_config import is_strict_defaults_model


class FunctionDefinition(BaseModel):
    """A function the model may call; *parameters* is a JSON Schema object."""

    name: str
    description: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)


class FunctionToolSpec(BaseModel):
    """Chat Completions function-tool format (nested ``function`` key)."""

    type: str = "function"
    function: FunctionDefinition


class ChatCompletionsPayload(BaseModel):
    """Typed payload for ``client.chat.completions.create(**payload)``."""

    model: str
    messages: list[dict[str, Any]]
    temperature: float | None = None
    tools: list[FunctionToolSpec] | None = None
    tool_choice: Any | None = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @classmethod
    def build(
        cls,
        *,
        model: str,
        messages: list[dict[str, Any]],
        temperature: float = 0.0,
        tools: list[FunctionToolSpec] | None = None,
        tool_choice: Any | None = None,
    ) -> ChatCompletionsPayload:
        """Construct a payload with model-aware parameter mapping."""
        sampling = {}
        if not is_strict_defaults_model(model):
            sampling = {"temperature": temperature}

        return cls(
            model=model,
            messages=messages,
            **sampling,
            tools=tools,
            tool_choice=tool_choice,
        )

    def to_api_kwargs(self) -> dict[str, Any]:
        """Serialize to kwargs for ``chat.completions.create()``, dropping ``None`` values."""
        return self.model_dump(exclude_none=True)

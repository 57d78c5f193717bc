"""Lightweight response wrappers.

The SDK response is normalised into ``_LLMResponse`` so that the rest of
the package never touches SDK objects directly.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ToolCallFunction(BaseModel):
    """Function metadata inside a tool call."""

    name: str
    arguments: str


class ToolCall(BaseModel):
    """A single tool call returned by the model."""

    id: str
    type: str = "function"
    function: ToolCallFunction


class AssistantMessage(BaseModel):
    """Typed replacement for the raw ``Dict[str, Any]`` message."""

    role: str = "assistant"
    content: str | None = None
    tool_calls: list[ToolCall] | None = None
    function_call: ToolCallFunction | None = None

    def first_function_call(self) -> ToolCallFunction | None:
        """The first function call, from ``tool_calls`` or the legacy field."""
        if self.tool_calls:
            return self.tool_calls[0].function
        return self.function_call


class UsageInfo(BaseModel):
    """Token usage statistics from an API response."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class _Choice(BaseModel):
    message: AssistantMessage


class _LLMResponse(BaseModel):
    """Normalised Chat Completions response."""

    choices: list[_Choice]
    usage: UsageInfo | None = None
    response_id: str | None = None
    model: str | None = None

    def to_log_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True, include={"response_id", "model", "usage"})

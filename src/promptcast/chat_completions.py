"""Chat Completions API backend.

Builds the payload, dispatches the call (sync or async), normalises the
response and extracts the function-call arguments.  Retry logic is
delegated to ``_shared.retry.call_with_backoff``, which wraps the network
call and the extraction of the arguments string; decoding and validating
those arguments happens outside the retry loop.
"""

from __future__ import annotations

import logging
from typing import Any

from promptcast._shared.models import ChatCompletionsPayload, FunctionToolSpec
from promptcast._shared.response_models import (
    AssistantMessage,
    ToolCall,
    ToolCallFunction,
    UsageInfo,
    _Choice,
    _LLMResponse,
)
from promptcast._shared.retry import call_with_backoff
from promptcast.errors import MissingFunctionCallError


def _extract_usage(resp: Any) -> UsageInfo | None:
    """Extract token usage from an OpenAI SDK response object."""
    usage = getattr(resp, "usage", None)
    if not usage:
        return None
    return UsageInfo(
        prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
        completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
        total_tokens=getattr(usage, "total_tokens", 0) or 0,
    )


def _sdk_message_to_assistant(raw: dict[str, Any]) -> AssistantMessage:
    """Convert an OpenAI SDK ``message.model_dump()`` dict to ``AssistantMessage``."""
    raw_tcs = raw.get("tool_calls")
    typed_tcs = None
    if raw_tcs:
        typed_tcs = [
            ToolCall(
                id=tc.get("id", ""),
                type=tc.get("type", "function"),
                function=ToolCallFunction(
                    name=tc.get("function", {}).get("name", ""),
                    arguments=tc.get("function", {}).get("arguments", ""),
                ),
            )
            for tc in raw_tcs
        ]
    raw_fc = raw.get("function_call")
    legacy = None
    if raw_fc:
        legacy = ToolCallFunction(
            name=raw_fc.get("name", ""),
            arguments=raw_fc.get("arguments", ""),
        )
    return AssistantMessage(
        role=raw.get("role", "assistant"),
        content=raw.get("content"),
        tool_calls=typed_tcs,
        function_call=legacy,
    )


def _normalize(resp: Any) -> _LLMResponse:
    if not resp.choices:
        raise MissingFunctionCallError("Model response has no choices", raw_output=resp)
    msg = _sdk_message_to_assistant(resp.choices[0].message.model_dump())
    model = getattr(resp, "model", None)
    response_id = getattr(resp, "id", None)
    return _LLMResponse(
        choices=[_Choice(message=msg)],
        usage=_extract_usage(resp),
        model=model if isinstance(model, str) else None,
        response_id=response_id if isinstance(response_id, str) else None,
    )


def function_call_arguments(response: _LLMResponse) -> str:
    """Return the arguments string of the first choice's function call.

    Raises:
        MissingFunctionCallError: If the first choice carries no function call.
    """
    message = response.choices[0].message
    call = message.first_function_call()
    if call is None:
        raise MissingFunctionCallError(
            "Model response carries no function call", raw_output=message.content
        )
    return call.arguments


async def call_chat_completions(
    client: Any,
    *,
    model: str,
    messages: list[dict[str, Any]],
    tools: list[FunctionToolSpec],
    tool_choice: Any,
    temperature: float = 0.0,
    max_attempts: int = 3,
    initial_delay: float = 0.5,
    async_mode: bool = True,
    logger: logging.Logger | None = None,
) -> str:
    """Call OpenAI **Chat Completions API** and return the function-call arguments.

    Returns:
        The JSON-encoded ``arguments`` string of the first function call.
    """
    _log = logger or logging.getLogger(__name__)

    payload = ChatCompletionsPayload.build(
        model=model,
        messages=messages,
        temperature=temperature,
        tools=tools,
        tool_choice=tool_choice,
    ).to_api_kwargs()

    def _finish(resp: Any) -> str:
        normalized = _normalize(resp)
        _log.debug("Chat completion received: %s", normalized.to_log_dict())
        return function_call_arguments(normalized)

    if async_mode:

        async def _call() -> str:
            resp = await client.chat.completions.create(**payload)
            return _finish(resp)

        return await call_with_backoff(
            _call,
            max_attempts=max_attempts,
            initial_delay=initial_delay,
            async_mode=True,
            logger=_log,
        )
    else:

        def _call_sync() -> str:
            resp = client.chat.completions.create(**payload)
            return _finish(resp)

        return await call_with_backoff(
            _call_sync,
            max_attempts=max_attempts,
            initial_delay=initial_delay,
            async_mode=False,
            logger=_log,
        )

"""
Typed extraction over OpenAI function calling.

:class:`PromptClient` asks a chat model for a value of a given shape and
returns it validated::

    from promptcast import PromptClient, ClientSettings, descriptors as d

    client = PromptClient(ClientSettings.from_env())

    await client.as_type("what is 2+2", d.number())                  # → 4
    await client.as_type("hey i'm jose and i'm 42 years old",
                         d.object_of(name=d.string(), age=d.number()))
    # → {"name": "jose", "age": 42}
    await client.as_bool("the sky is blue")                          # → True
    await client.categorize("My favorite color is red", ["red", "blue", "green"])
    # → "red"

Each call makes at most one request (plus sequential retries) and keeps
no state between calls.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import openai

from promptcast.chat_completions import call_chat_completions
from promptcast.config import ClientSettings, RequestOptions
from promptcast.descriptors import Descriptor, Enum, Object, boolean, from_python_type
from promptcast.errors import (
    CategoryMismatchError,
    ConfigurationError,
    SchemaViolationError,
    UsageError,
)
from promptcast.structured_output import (
    answer_tool_choice,
    build_answer_tool,
    build_function_parameters,
    materialize,
    parse_arguments,
    validate_and_unwrap,
)

logger = logging.getLogger(__name__)

STRUCTURED_SYSTEM_PROMPT = (
    "You are a precise assistant. Respond only by calling the provided function "
    "with valid structured JSON that matches the given shape exactly."
)

BOOLEAN_SYSTEM_PROMPT = (
    "You are a precise assistant. Answer the user's statement or question with "
    "true or false by calling the provided function."
)

BOOLEAN_ANSWER = Object({"value": boolean()}, name="BooleanAnswer")
BOOLEAN_PARAMETERS = BOOLEAN_ANSWER.json_schema()


class PromptClient:
    """
    Ask an OpenAI chat model for values of a requested type.

    Args:
        settings: Connection, retry and model-tier configuration.
        client: Pre-built ``AsyncOpenAI``/``OpenAI`` client.  When omitted one
            is created from *settings*, which then must carry an API key.

    Raises:
        ConfigurationError: If no client is given and *settings* has no API key.
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        *,
        client: Any = None,
    ) -> None:
        self.settings = settings or ClientSettings()

        if client is not None:
            self._client = client
            return

        if not self.settings.api_key:
            raise ConfigurationError(
                "An OpenAI API key is required (ClientSettings.api_key or OPENAI_API_KEY)"
            )

        # Retries are handled by call_with_backoff, not by the SDK.
        client_cls = openai.AsyncOpenAI if self.settings.async_mode else openai.OpenAI
        self._client = client_cls(
            api_key=self.settings.api_key,
            base_url=self.settings.base_url,
            organization=self.settings.organization,
            timeout=self.settings.timeout,
            max_retries=0,
        )

    # ------------------------------------------------------------------ #
    # Public API                                                          #
    # ------------------------------------------------------------------ #

    async def as_type(
        self,
        prompt: str,
        descriptor: Descriptor | Any,
        options: Optional[RequestOptions] = None,
    ) -> Any:
        """
        Fetch a value shaped like *descriptor* from the model.

        *descriptor* may also be a Python type hint (``int``, ``list[str]``,
        a pydantic model, a dataclass...); model and dataclass targets come
        back as instances.

        An empty prompt skips the model and validates ``""`` instead, so a
        string descriptor yields ``""`` and other shapes fail fast.

        Raises:
            ResponseParseError: The function-call arguments are not JSON.
            SchemaViolationError: The decoded value doesn't match.
            openai.APIError: Transport failure after all retries.
        """
        resolved = from_python_type(descriptor)
        if not prompt:
            return materialize(resolved.validate(""), descriptor)

        parameters, effective, wrapped = build_function_parameters(resolved)
        data = await self._request(
            prompt,
            system=STRUCTURED_SYSTEM_PROMPT,
            parameters=parameters,
            options=options,
        )
        value = validate_and_unwrap(data, effective, wrapped=wrapped)
        return materialize(value, descriptor)

    async def as_bool(
        self,
        prompt: str,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        """Ask a yes/no question; an empty prompt is ``False`` without a request."""
        if not prompt:
            return False

        data = await self._request(
            prompt,
            system=BOOLEAN_SYSTEM_PROMPT,
            parameters=BOOLEAN_PARAMETERS,
            options=options,
        )
        return validate_and_unwrap(data, BOOLEAN_ANSWER, wrapped=True)

    async def categorize(
        self,
        prompt: str,
        labels: Sequence[str],
        options: Optional[RequestOptions] = None,
        *,
        strict: bool = False,
    ) -> Optional[str]:
        """
        Pick one of *labels* for *prompt*.

        When the model answers with something outside *labels* the call
        logs a warning and returns ``None``; with ``strict=True`` it raises
        :class:`CategoryMismatchError` instead.

        Raises:
            UsageError: *labels* is empty or contains non-strings.
        """
        if isinstance(labels, str) or not labels:
            raise UsageError("categorize() needs a non-empty sequence of labels")
        descriptor = Enum(tuple(labels))

        try:
            return await self.as_type(prompt, descriptor, options)
        except SchemaViolationError as e:
            value = e.value
            if isinstance(value, dict):
                value = value.get("value")
            if strict:
                raise CategoryMismatchError(
                    f"Label {value!r} is not one of {list(descriptor.labels)}",
                    allowed=descriptor.labels,
                    value=value,
                    expected=descriptor.json_schema(),
                ) from e
            logger.warning(
                "Model picked %r, which is not one of %s; returning None",
                value,
                list(descriptor.labels),
            )
            return None

    # ------------------------------------------------------------------ #
    # Internals                                                           #
    # ------------------------------------------------------------------ #

    async def _request(
        self,
        prompt: str,
        *,
        system: str,
        parameters: dict[str, Any],
        options: Optional[RequestOptions],
    ) -> Any:
        """Send one forced ``answer`` call and return its decoded arguments."""
        options = options or RequestOptions()
        model = self.settings.model_for(options.resolve_tier())
        logger.debug("Requesting structured answer from %s", model)

        arguments = await call_chat_completions(
            self._client,
            model=model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            tools=[build_answer_tool(parameters)],
            tool_choice=answer_tool_choice(),
            temperature=0.0,
            max_attempts=self.settings.max_attempts,
            initial_delay=self.settings.initial_delay,
            async_mode=self.settings.async_mode,
            logger=logger,
        )
        return parse_arguments(arguments)

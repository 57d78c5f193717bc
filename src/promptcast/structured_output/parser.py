"""Decode function-call arguments into validated Python values.

Supports returning:
- plain Python data (dicts, lists, scalars) for descriptors
- instances of the requested type hint (pydantic models, dataclasses,
  ``list[Model]``, ``Optional[Model]``, nested at any depth) via ``TypeAdapter``
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import TypeAdapter

from promptcast.descriptors import Descriptor
from promptcast.errors import ResponseParseError
from promptcast.structured_output.builder import WRAPPED_FIELD


def parse_arguments(arguments: str) -> Any:
    """Decode the JSON-encoded arguments of a function call.

    Raises:
        ResponseParseError: If *arguments* is empty or not valid JSON.
    """
    if not arguments:
        raise ResponseParseError("Model returned empty function-call arguments", raw_output=arguments)

    try:
        return json.loads(arguments)
    except json.JSONDecodeError as e:
        raise ResponseParseError(
            f"Function-call arguments are not valid JSON: {e}",
            raw_output=arguments,
            parse_position=e.pos,
        ) from e


def validate_and_unwrap(data: Any, descriptor: Descriptor, *, wrapped: bool) -> Any:
    """Validate *data* against *descriptor*, unwrapping ``value`` if needed."""
    validated = descriptor.validate(data)
    if wrapped:
        return validated[WRAPPED_FIELD]
    return validated


def materialize(value: Any, target: Any) -> Any:
    """Turn validated plain data into an instance of the type hint *target*.

    Descriptor targets keep the plain data.
    """
    if isinstance(target, Descriptor):
        return value
    return TypeAdapter(target).validate_python(value)

"""Build the function-call framing for a descriptor.

OpenAI function calling only accepts an object schema at the top level,
so non-object descriptors are wrapped in ``{"value": <descriptor>}``
before conversion.
"""

from __future__ import annotations

import logging
from typing import Any

from promptcast._shared.models import FunctionDefinition, FunctionToolSpec
from promptcast.descriptors import Descriptor, DescriptorKind, Object

logger = logging.getLogger(__name__)

ANSWER_FUNCTION = "answer"
ROOT_DEFINITION = "wrapper"
WRAPPED_FIELD = "value"

JSON_SCHEMA_DRAFT = "http://json-schema.org/draft-07/schema#"


def wrap_descriptor(descriptor: Descriptor) -> tuple[Descriptor, bool]:
    """Return ``(descriptor, wrapped)`` with a top-level object guaranteed."""
    if descriptor.kind is DescriptorKind.OBJECT:
        return descriptor, False
    return Object({WRAPPED_FIELD: descriptor}, name="Wrapper"), True


def to_interchange_schema(
    descriptor: Descriptor,
    name: str = ROOT_DEFINITION,
) -> dict[str, Any]:
    """Render *descriptor* as a JSON Schema document rooted at ``definitions[name]``."""
    return {
        "$schema": JSON_SCHEMA_DRAFT,
        "$ref": f"#/definitions/{name}",
        "definitions": {name: descriptor.json_schema()},
    }


def root_schema(interchange: dict[str, Any], name: str = ROOT_DEFINITION) -> dict[str, Any]:
    """Read the root definition back out of an interchange document."""
    return interchange["definitions"][name]


def build_answer_tool(parameters: dict[str, Any]) -> FunctionToolSpec:
    """The single ``answer`` function the model is forced to call."""
    return FunctionToolSpec(
        function=FunctionDefinition(
            name=ANSWER_FUNCTION,
            description="Return the answer in the required shape.",
            parameters=parameters,
        )
    )


def answer_tool_choice() -> dict[str, Any]:
    return {"type": "function", "function": {"name": ANSWER_FUNCTION}}


def build_function_parameters(descriptor: Descriptor) -> tuple[dict[str, Any], Descriptor, bool]:
    """
    Prepare everything the request needs for *descriptor*.

    Returns:
        ``(parameters, effective_descriptor, wrapped)`` where *parameters*
        is the JSON Schema sent as the function's parameters and
        *effective_descriptor* is what the response is validated against.
    """
    effective, wrapped = wrap_descriptor(descriptor)
    parameters = root_schema(to_interchange_schema(effective))
    logger.debug("Function parameters (wrapped=%s): %s", wrapped, parameters)
    return parameters, effective, wrapped

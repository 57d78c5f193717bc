"""Structured output over OpenAI function calling.

Turns descriptors into a forced ``answer`` function call and decodes the
call's arguments back into validated values.

Usage::

    from promptcast.structured_output import (
        build_function_parameters,
        parse_arguments,
        validate_and_unwrap,
    )

    parameters, effective, wrapped = build_function_parameters(d.number())
    # → ({"type": "object", "properties": {"value": {"type": "number"}}, ...}, Object(...), True)

    value = validate_and_unwrap(parse_arguments('{"value": 4}'), effective, wrapped=wrapped)
    # → 4
"""

from promptcast.structured_output.builder import (
    ANSWER_FUNCTION,
    answer_tool_choice,
    build_answer_tool,
    build_function_parameters,
    to_interchange_schema,
    wrap_descriptor,
)
from promptcast.structured_output.parser import (
    materialize,
    parse_arguments,
    validate_and_unwrap,
)

__all__ = [
    "ANSWER_FUNCTION",
    "answer_tool_choice",
    "build_answer_tool",
    "build_function_parameters",
    "materialize",
    "parse_arguments",
    "to_interchange_schema",
    "validate_and_unwrap",
    "wrap_descriptor",
]

# src/promptcast/descriptors.py
"""
Type descriptors: the shapes a caller can ask the model for.

A descriptor is one of a closed set of kinds (:class:`DescriptorKind`).
Each kind knows how to:

* render itself as a JSON Schema fragment (``json_schema()``),
* build the pydantic annotation used to validate candidate values
  (``annotation()``),
* validate a decoded value (``validate()``), returning plain Python data
  or raising :class:`~promptcast.errors.SchemaViolationError`.

Usage::

    from promptcast import descriptors as d

    person = d.object_of(name=d.string(), age=d.number())
    person.validate({"name": "jose", "age": 42})
    # → {"name": "jose", "age": 42}

    d.from_python_type(list[str])
    # → Array(items=Primitive(type=PrimitiveType.STRING, ...))
"""

from __future__ import annotations

import abc
import collections.abc
import dataclasses
import sys
import types
from enum import Enum as _StdEnum
from typing import (
    Annotated,
    Any,
    ClassVar,
    Dict,
    List,
    Literal,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from pydantic import (
    BaseModel,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    create_model,
)

from promptcast.errors import SchemaViolationError, UsageError

if sys.version_info >= (3, 11):
    from typing import is_typeddict
else:
    from typing_extensions import is_typeddict


class DescriptorKind(str, _StdEnum):
    """The closed set of descriptor variants."""

    PRIMITIVE = "primitive"
    ENUM = "enum"
    OBJECT = "object"
    ARRAY = "array"
    COMPOSITE = "composite"


class PrimitiveType(str, _StdEnum):
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    NULL = "null"


_PRIMITIVE_ANNOTATIONS: Dict[PrimitiveType, Any] = {
    PrimitiveType.STRING: StrictStr,
    PrimitiveType.NUMBER: Union[StrictInt, StrictFloat],
    PrimitiveType.INTEGER: StrictInt,
    PrimitiveType.BOOLEAN: StrictBool,
    PrimitiveType.NULL: None,
}


# ============================================================================
# DESCRIPTOR VARIANTS
# ============================================================================


@dataclasses.dataclass(frozen=True)
class Descriptor(abc.ABC):
    """Base class shared by every descriptor variant."""

    kind: ClassVar[DescriptorKind]

    def json_schema(self) -> Dict[str, Any]:
        schema = self._schema()
        description = getattr(self, "description", None)
        if description:
            schema["description"] = description
        return schema

    @abc.abstractmethod
    def _schema(self) -> Dict[str, Any]:
        """JSON Schema for this kind, without the shared description."""

    @abc.abstractmethod
    def annotation(self) -> Any:
        """The pydantic annotation that validates values of this kind."""

    def validate(self, value: Any) -> Any:
        """
        Validate *value* against this descriptor.

        Returns:
            The validated value as plain Python data (dicts, lists, scalars).

        Raises:
            SchemaViolationError: If the value doesn't match.
        """
        adapter = TypeAdapter(self.annotation())
        try:
            validated = adapter.validate_python(value)
        except ValidationError as e:
            field_errors = [
                {"field": ".".join(str(x) for x in err["loc"]), "error": err["msg"]}
                for err in e.errors()
            ]
            raise SchemaViolationError(
                "; ".join(f"{fe['field'] or '<root>'}: {fe['error']}" for fe in field_errors),
                expected=self.json_schema(),
                value=value,
                field_errors=field_errors,
            ) from e
        return adapter.dump_python(validated, by_alias=True)


@dataclasses.dataclass(frozen=True)
class Primitive(Descriptor):
    type: PrimitiveType
    description: Optional[str] = None

    kind = DescriptorKind.PRIMITIVE

    def _schema(self) -> Dict[str, Any]:
        return {"type": self.type.value}

    def annotation(self) -> Any:
        return _PRIMITIVE_ANNOTATIONS[self.type]


@dataclasses.dataclass(frozen=True)
class Enum(Descriptor):
    """A closed set of string labels."""

    labels: Tuple[str, ...]
    description: Optional[str] = None

    kind = DescriptorKind.ENUM

    def __post_init__(self) -> None:
        labels = tuple(dict.fromkeys(self.labels))
        if not labels:
            raise UsageError("An enum descriptor needs at least one label")
        for label in labels:
            if not isinstance(label, str):
                raise UsageError(f"Enum labels must be strings, got {label!r}")
        object.__setattr__(self, "labels", labels)

    def _schema(self) -> Dict[str, Any]:
        return {"type": "string", "enum": list(self.labels)}

    def annotation(self) -> Any:
        return Literal[self.labels]


@dataclasses.dataclass(frozen=True)
class Object(Descriptor):
    """
    Named fields, each with its own descriptor.

    Every field is required; keys not listed in *fields* are dropped on
    validation.
    """

    fields: Mapping[str, Descriptor]
    description: Optional[str] = None
    name: str = "ObjectValue"

    kind = DescriptorKind.OBJECT

    def _schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {k: v.json_schema() for k, v in self.fields.items()},
            "required": list(self.fields.keys()),
            "additionalProperties": False,
        }

    def annotation(self) -> Any:
        # Positional attribute names keep keys like "_id" or "model_config"
        # out of pydantic's namespace; the real key travels as the alias.
        field_defs = {
            f"field_{i}": (desc.annotation(), Field(..., alias=key))
            for i, (key, desc) in enumerate(self.fields.items())
        }
        return create_model(self.name, **field_defs)


@dataclasses.dataclass(frozen=True)
class Array(Descriptor):
    """A list of elements; *description* is the list's semantic label."""

    items: Descriptor
    description: Optional[str] = None

    kind = DescriptorKind.ARRAY

    def _schema(self) -> Dict[str, Any]:
        return {"type": "array", "items": self.items.json_schema()}

    def annotation(self) -> Any:
        return List[self.items.annotation()]


@dataclasses.dataclass(frozen=True)
class Composite(Descriptor):
    """A value matching any one of *options*."""

    options: Tuple[Descriptor, ...]
    description: Optional[str] = None

    kind = DescriptorKind.COMPOSITE

    def __post_init__(self) -> None:
        if not self.options:
            raise UsageError("A composite descriptor needs at least one option")
        object.__setattr__(self, "options", tuple(self.options))

    def _schema(self) -> Dict[str, Any]:
        return {"anyOf": [opt.json_schema() for opt in self.options]}

    def annotation(self) -> Any:
        return Union[tuple(opt.annotation() for opt in self.options)]


# ============================================================================
# FACTORIES
# ============================================================================


def string(description: str | None = None) -> Primitive:
    return Primitive(PrimitiveType.STRING, description)


def number(description: str | None = None) -> Primitive:
    return Primitive(PrimitiveType.NUMBER, description)


def integer(description: str | None = None) -> Primitive:
    return Primitive(PrimitiveType.INTEGER, description)


def boolean(description: str | None = None) -> Primitive:
    return Primitive(PrimitiveType.BOOLEAN, description)


def null() -> Primitive:
    return Primitive(PrimitiveType.NULL)


def enum_of(labels: Sequence[str], description: str | None = None) -> Enum:
    return Enum(tuple(labels), description)


def object_of(
    fields: Mapping[str, Descriptor] | None = None,
    *,
    description: str | None = None,
    **kwargs: Descriptor,
) -> Object:
    """Build an object descriptor from a mapping and/or keyword fields."""
    merged = dict(fields or {})
    merged.update(kwargs)
    return Object(merged, description)


def array_of(items: Descriptor, description: str | None = None) -> Array:
    return Array(items, description)


def one_of(*options: Descriptor, description: str | None = None) -> Composite:
    return Composite(tuple(options), description)


def nullable(inner: Descriptor) -> Composite:
    return Composite((inner, null()))


# ============================================================================
# PYTHON TYPE HINTS → DESCRIPTORS
# ============================================================================


def is_pydantic(tp: Any) -> bool:
    """Check if type is a Pydantic BaseModel."""
    try:
        return isinstance(tp, type) and issubclass(tp, BaseModel)
    except TypeError:
        return False


def is_dataclass(tp: Any) -> bool:
    """Check if type is a dataclass."""
    return dataclasses.is_dataclass(tp) and isinstance(tp, type)


def from_python_type(hint: Any) -> Descriptor:
    """
    Derive a descriptor from a Python type hint.

    Supports ``str``, ``int``, ``float``, ``bool``, ``None``, string
    ``Literal`` values, ``list[T]``, ``Optional``/unions, ``Annotated``,
    pydantic models, dataclasses and TypedDicts.  Descriptors pass through.

    Raises:
        UsageError: If the hint has no descriptor equivalent.
    """
    if isinstance(hint, Descriptor):
        return hint

    if hint is None or hint is type(None):
        return null()

    origin = get_origin(hint)
    args = get_args(hint)

    if origin is Annotated:
        return from_python_type(args[0])

    if origin is Union or origin is types.UnionType:
        return Composite(tuple(from_python_type(a) for a in args))

    if origin is Literal:
        if not all(isinstance(a, str) for a in args):
            raise UsageError(f"Only string literals are supported, got {hint!r}")
        return Enum(args)

    if origin in (list, collections.abc.Sequence) or hint is list:
        return Array(from_python_type(args[0]) if args else string())

    if is_pydantic(hint):
        fields = {}
        for name, info in hint.model_fields.items():
            key = info.alias or name
            inner = from_python_type(info.annotation)
            if info.description:
                inner = dataclasses.replace(inner, description=info.description)
            fields[key] = inner
        return Object(fields, name=hint.__name__)

    if is_dataclass(hint):
        hints = get_type_hints(hint, include_extras=True)
        return Object(
            {f.name: from_python_type(hints[f.name]) for f in dataclasses.fields(hint)},
            name=hint.__name__,
        )

    if is_typeddict(hint):
        hints = get_type_hints(hint, include_extras=True)
        return Object(
            {name: from_python_type(h) for name, h in hints.items()},
            name=hint.__name__,
        )

    type_map = {
        str: PrimitiveType.STRING,
        int: PrimitiveType.INTEGER,
        float: PrimitiveType.NUMBER,
        bool: PrimitiveType.BOOLEAN,
    }
    if isinstance(hint, type) and hint in type_map:
        return Primitive(type_map[hint])

    raise UsageError(f"Cannot build a descriptor for type hint {hint!r}")

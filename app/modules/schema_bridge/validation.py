"""Validation schema model: the local, runtime-checked description of a shape.

Nodes are frozen pydantic models so trees compare structurally with ``==``
and cannot be mutated after construction. Build them with the small helpers
at the bottom of the module::

    quiz = obj(
        title=string(),
        questions=array(obj(question=string(), hint=optional(string()))),
    )
"""

from __future__ import annotations

from typing import Annotated, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ObjectNode(_Node):
    kind: Literal["object"] = "object"
    fields: dict[str, "ValidationNode"] = Field(default_factory=dict)
    description: Optional[str] = None


class ArrayNode(_Node):
    kind: Literal["array"] = "array"
    element: "ValidationNode"
    description: Optional[str] = None


class StringNode(_Node):
    kind: Literal["string"] = "string"
    description: Optional[str] = None


class NumberNode(_Node):
    kind: Literal["number"] = "number"
    description: Optional[str] = None


class BooleanNode(_Node):
    kind: Literal["boolean"] = "boolean"
    description: Optional[str] = None


class LiteralNode(_Node):
    """A leaf accepting exactly one string or number."""

    kind: Literal["literal"] = "literal"
    value: Union[StrictStr, StrictInt, StrictFloat]
    description: Optional[str] = None


class EnumNode(_Node):
    """A string leaf restricted to a closed set of values."""

    kind: Literal["enum"] = "enum"
    values: tuple[StrictStr, ...] = Field(min_length=1)
    description: Optional[str] = None


class OptionalNode(_Node):
    """Marks a field value or array element as optional (nullable on the wire)."""

    kind: Literal["optional"] = "optional"
    inner: "ValidationNode"


ValidationNode = Annotated[
    Union[
        ObjectNode,
        ArrayNode,
        StringNode,
        NumberNode,
        BooleanNode,
        LiteralNode,
        EnumNode,
        OptionalNode,
    ],
    Field(discriminator="kind"),
]

ObjectNode.model_rebuild()
ArrayNode.model_rebuild()
OptionalNode.model_rebuild()


def obj(
    fields: Mapping[str, ValidationNode] | None = None, /, **kwargs: ValidationNode
) -> ObjectNode:
    """Object node; fields keep the order they are given in.

    Pass a mapping when a field name is not a valid identifier. Use
    ``ObjectNode(fields=..., description=...)`` to attach a description.
    """
    merged: dict[str, ValidationNode] = dict(fields or {})
    merged.update(kwargs)
    return ObjectNode(fields=merged)


def array(element: ValidationNode, *, description: str | None = None) -> ArrayNode:
    return ArrayNode(element=element, description=description)


def string(*, description: str | None = None) -> StringNode:
    return StringNode(description=description)


def number(*, description: str | None = None) -> NumberNode:
    return NumberNode(description=description)


def boolean(*, description: str | None = None) -> BooleanNode:
    return BooleanNode(description=description)


def literal(value: str | int | float, *, description: str | None = None) -> LiteralNode:
    return LiteralNode(value=value, description=description)


def enum_of(*values: str, description: str | None = None) -> EnumNode:
    return EnumNode(values=tuple(values), description=description)


def optional(inner: ValidationNode) -> OptionalNode:
    return OptionalNode(inner=inner)

"""Pydantic glue for validation schemas.

- ``from_model`` reads a ``BaseModel`` class into an ``ObjectNode`` so shapes
  can be authored the usual way (as pydantic models) and still go through the
  schema bridge.
- ``parse`` checks data against a ``ValidationNode`` with a ``TypeAdapter``
  built from the tree.
"""

from __future__ import annotations

import types
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union, get_args, get_origin

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    create_model,
)

from app.modules.schema_bridge.errors import UnsupportedSchemaError
from app.modules.schema_bridge.validation import (
    ArrayNode,
    BooleanNode,
    EnumNode,
    LiteralNode,
    NumberNode,
    ObjectNode,
    OptionalNode,
    StringNode,
    ValidationNode,
)

_NONE_TYPE = type(None)
_UNION_ORIGINS = (Union, types.UnionType)


# BaseModel -> ValidationNode


def from_model(model: type[BaseModel]) -> ObjectNode:
    """Build an object node from a pydantic model class.

    A field is optional when its annotation admits ``None``; a default value
    alone does not make it optional.
    """
    return _from_model(model, "$")


def _from_model(model: type[BaseModel], path: str) -> ObjectNode:
    fields: dict[str, ValidationNode] = {}
    for name, info in model.model_fields.items():
        key = info.alias or name
        fields[key] = _embedded_from_annotation(
            info.annotation, f"{path}.{key}", info.description
        )
    return ObjectNode(fields=fields)


def _split_optional(annotation: Any) -> tuple[Any, bool]:
    if get_origin(annotation) in _UNION_ORIGINS:
        args = get_args(annotation)
        rest = [arg for arg in args if arg is not _NONE_TYPE]
        if len(rest) < len(args):
            if len(rest) == 1:
                return rest[0], True
            return Union[tuple(rest)], True
    return annotation, False


def _embedded_from_annotation(
    annotation: Any, path: str, description: str | None = None
) -> ValidationNode:
    inner, is_optional = _split_optional(_strip_annotated(annotation))
    node = _from_annotation(inner, path, description)
    return OptionalNode(inner=node) if is_optional else node


def _strip_annotated(annotation: Any) -> Any:
    while get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    return annotation


def _from_annotation(
    annotation: Any, path: str, description: str | None = None
) -> ValidationNode:
    annotation = _strip_annotated(annotation)
    origin = get_origin(annotation)

    if annotation is str:
        return StringNode(description=description)
    # bool before int: bool is an int subclass
    if annotation is bool:
        return BooleanNode(description=description)
    if annotation in (int, float):
        return NumberNode(description=description)

    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        node = _from_model(annotation, path)
        if description is not None:
            node = node.model_copy(update={"description": description})
        return node

    if isinstance(annotation, type) and issubclass(annotation, Enum):
        values = [member.value for member in annotation]
        if values and all(isinstance(v, str) for v in values):
            return EnumNode(values=tuple(values), description=description)
        raise UnsupportedSchemaError(
            f"unsupported schema construct: non-string enum {annotation.__name__}",
            path,
        )

    if origin is Literal:
        values = get_args(annotation)
        if len(values) == 1:
            value = values[0]
            if isinstance(value, bool) or not isinstance(value, (str, int, float)):
                raise UnsupportedSchemaError(
                    f"unsupported literal value {value!r}", path
                )
            return LiteralNode(value=value, description=description)
        if all(isinstance(v, str) for v in values):
            return EnumNode(values=tuple(values), description=description)
        raise UnsupportedSchemaError(
            f"unsupported schema construct: literal union {values!r}", path
        )

    if origin is list:
        (element,) = get_args(annotation) or (Any,)
        return ArrayNode(
            element=_embedded_from_annotation(element, f"{path}[]"),
            description=description,
        )

    raise UnsupportedSchemaError(f"unsupported schema construct: {annotation!r}", path)


# ValidationNode -> pydantic validator


def parse(node: ValidationNode, data: Any) -> Any:
    """Validate ``data`` against ``node`` and return it as plain Python data.

    Leaves are strict (no string-to-number coercion); optional fields that are
    absent stay absent in the result.

    Raises:
        pydantic.ValidationError: data does not match the schema.
    """
    adapter = type_adapter(node)
    value = adapter.validate_python(data)
    return adapter.dump_python(value, by_alias=True, exclude_unset=True)


def type_adapter(node: ValidationNode) -> TypeAdapter:
    return TypeAdapter(python_type(node))


def python_type(node: ValidationNode) -> Any:
    """The Python annotation a ``ValidationNode`` describes."""
    return _python_type(node, "$")


def _same_kind(expected: Any):
    # Literal validation is lax: True passes for 1 and "1" for 1.
    def check(value: Any) -> Any:
        if isinstance(expected, str):
            ok = isinstance(value, str)
        else:
            ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        if not ok:
            raise ValueError(f"expected {type(expected).__name__} literal {expected!r}")
        return value

    return check


def _python_type(node: ValidationNode, path: str) -> Any:
    if isinstance(node, OptionalNode):
        return Optional[_python_type(node.inner, path)]
    if isinstance(node, ObjectNode):
        return _object_model(node, path)
    if isinstance(node, ArrayNode):
        return list[_python_type(node.element, f"{path}[]")]
    if isinstance(node, StringNode):
        return StrictStr
    if isinstance(node, NumberNode):
        return Union[StrictInt, StrictFloat]
    if isinstance(node, BooleanNode):
        return StrictBool
    if isinstance(node, LiteralNode):
        return Annotated[Literal[node.value], BeforeValidator(_same_kind(node.value))]
    if isinstance(node, EnumNode):
        return Annotated[
            Literal[tuple(node.values)], BeforeValidator(_same_kind(node.values[0]))
        ]
    raise UnsupportedSchemaError(
        f"unsupported schema construct: {type(node).__name__}", path
    )


def _object_model(node: ObjectNode, path: str) -> type[BaseModel]:
    # Wire names may not be valid identifiers; fields are addressed by alias.
    definitions: dict[str, Any] = {}
    for index, (name, field) in enumerate(node.fields.items()):
        annotation = _python_type(field, f"{path}.{name}")
        if isinstance(field, OptionalNode):
            definitions[f"field_{index}"] = (annotation, Field(None, alias=name))
        else:
            definitions[f"field_{index}"] = (annotation, Field(..., alias=name))
    return create_model(
        "ParsedObject",
        __config__=ConfigDict(extra="ignore"),
        **definitions,
    )

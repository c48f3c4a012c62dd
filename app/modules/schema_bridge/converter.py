"""Conversion between validation schemas and generation schemas.

``to_generation_schema`` produces the contract a generative model is held to;
``to_validation_schema`` derives a local validator from a generation schema.
For every tree the forward converter produces, the reverse converter gives
back a tree that converts forward to the same result.

Optional/nullable only has meaning where a node is embedded as an object
field value or an array element; it is passed down as a flag instead of being
kept as a node of its own on the generation side.
"""

from __future__ import annotations

from app.modules.schema_bridge.errors import (
    MalformedWrappingError,
    SchemaConsistencyError,
    UnsupportedSchemaError,
)
from app.modules.schema_bridge.generation import (
    ArraySchema,
    BooleanSchema,
    GenerationNode,
    NumberSchema,
    ObjectSchema,
    StringSchema,
)
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


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# Validation -> generation


def to_generation_schema(node: ValidationNode) -> GenerationNode:
    """Convert a validation schema into a generation schema.

    Raises:
        UnsupportedSchemaError: a node outside the supported set (e.g. a union).
        MalformedWrappingError: ``OptionalNode`` at the root, nested in another
            ``OptionalNode``, or wrapping an object/array.
    """
    return _forward(node, nullable=False, path="$")


def _forward_embedded(node: ValidationNode, path: str) -> GenerationNode:
    if isinstance(node, OptionalNode):
        return _forward(node.inner, nullable=True, path=path)
    return _forward(node, nullable=False, path=path)


def _forward(node: ValidationNode, *, nullable: bool, path: str) -> GenerationNode:
    if isinstance(node, OptionalNode):
        where = "inside another optional" if nullable else "outside a field or element"
        raise MalformedWrappingError(f"optional {where}", path)

    if isinstance(node, ObjectNode):
        if nullable:
            raise MalformedWrappingError("optional object is not supported", path)
        properties: dict[str, GenerationNode] = {}
        required: list[str] = []
        for name, field in node.fields.items():
            properties[name] = _forward_embedded(field, f"{path}.{name}")
            if not isinstance(field, OptionalNode):
                required.append(name)
        return ObjectSchema(
            properties=properties, required=required, description=node.description
        )

    if isinstance(node, ArrayNode):
        if nullable:
            raise MalformedWrappingError("optional array is not supported", path)
        return ArraySchema(
            items=_forward_embedded(node.element, f"{path}[]"),
            description=node.description,
        )

    if isinstance(node, StringNode):
        return StringSchema(nullable=nullable, description=node.description)
    if isinstance(node, NumberNode):
        return NumberSchema(nullable=nullable, description=node.description)
    if isinstance(node, BooleanNode):
        return BooleanSchema(nullable=nullable, description=node.description)

    if isinstance(node, LiteralNode):
        if isinstance(node.value, str):
            return StringSchema(
                const=node.value, nullable=nullable, description=node.description
            )
        if _is_number(node.value):
            return NumberSchema(
                const=node.value, nullable=nullable, description=node.description
            )
        raise UnsupportedSchemaError(
            f"unsupported literal value {node.value!r}", path
        )

    if isinstance(node, EnumNode):
        return StringSchema(
            enum=tuple(node.values), nullable=nullable, description=node.description
        )

    raise UnsupportedSchemaError(
        f"unsupported schema construct: {type(node).__name__}", path
    )


# Generation -> validation


def to_validation_schema(schema: GenerationNode) -> ValidationNode:
    """Derive a validation schema from a generation schema.

    Raises:
        SchemaConsistencyError: ``required`` names a missing property, a required
            property is nullable, or ``const``/``enum`` disagree with the leaf.
        MalformedWrappingError: the root schema is nullable.
        UnsupportedSchemaError: a node outside the supported set.
    """
    if getattr(schema, "nullable", False):
        raise MalformedWrappingError("nullable root schema", "$")
    return _reverse(schema, "$")


def _reverse_embedded(
    schema: GenerationNode, *, optional: bool, path: str
) -> ValidationNode:
    node = _reverse(schema, path)
    return OptionalNode(inner=node) if optional else node


def _reverse(schema: GenerationNode, path: str) -> ValidationNode:
    if isinstance(schema, ObjectSchema):
        missing = [name for name in schema.required if name not in schema.properties]
        if missing:
            raise SchemaConsistencyError(
                "required references unknown properties: " + ", ".join(missing), path
            )
        required = set(schema.required)
        fields: dict[str, ValidationNode] = {}
        for name, prop in schema.properties.items():
            prop_path = f"{path}.{name}"
            if name in required and getattr(prop, "nullable", False):
                raise SchemaConsistencyError(
                    "property is both required and nullable", prop_path
                )
            fields[name] = _reverse_embedded(
                prop, optional=name not in required, path=prop_path
            )
        return ObjectNode(fields=fields, description=schema.description)

    if isinstance(schema, ArraySchema):
        return ArrayNode(
            element=_reverse_embedded(
                schema.items,
                optional=getattr(schema.items, "nullable", False),
                path=f"{path}[]",
            ),
            description=schema.description,
        )

    if isinstance(schema, StringSchema):
        if schema.const is not None:
            if schema.enum is not None:
                raise SchemaConsistencyError("string has both const and enum", path)
            if not isinstance(schema.const, str):
                raise SchemaConsistencyError(
                    f"const {schema.const!r} does not match string schema", path
                )
            return LiteralNode(value=schema.const, description=schema.description)
        if schema.enum is not None:
            if not schema.enum:
                raise SchemaConsistencyError("enum must not be empty", path)
            return EnumNode(values=schema.enum, description=schema.description)
        return StringNode(description=schema.description)

    if isinstance(schema, NumberSchema):
        if schema.const is not None:
            if not _is_number(schema.const):
                raise SchemaConsistencyError(
                    f"const {schema.const!r} does not match number schema", path
                )
            return LiteralNode(value=schema.const, description=schema.description)
        return NumberNode(description=schema.description)

    if isinstance(schema, BooleanSchema):
        return BooleanNode(description=schema.description)

    raise UnsupportedSchemaError(
        f"unsupported schema construct: {type(schema).__name__}", path
    )

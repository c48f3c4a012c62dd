"""Generation schema model: the JSON-Schema-like contract sent to the model.

``to_wire`` / ``from_wire`` translate between the node classes and the plain
dicts that go into a structured-output request, e.g.::

    {
        "type": "object",
        "properties": {"title": {"type": "string", "nullable": False}},
        "required": ["title"],
    }
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    model_validator,
)

from app.modules.schema_bridge.errors import (
    MalformedWrappingError,
    SchemaConsistencyError,
    UnsupportedSchemaError,
)


class SchemaType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


class _Schema(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ObjectSchema(_Schema):
    type: Literal[SchemaType.OBJECT] = SchemaType.OBJECT
    properties: dict[str, "GenerationNode"] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)
    description: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _canonical_required(cls, data: Any) -> Any:
        # required is a set: kept in property order, unknown names last.
        if not isinstance(data, Mapping):
            return data
        required, properties = data.get("required"), data.get("properties", {})
        if not isinstance(required, list) or not isinstance(properties, Mapping):
            return data
        if not all(isinstance(name, str) for name in required):
            return data
        names = list(dict.fromkeys(required))
        ordered = [name for name in properties if name in names]
        ordered += [name for name in names if name not in properties]
        return {**data, "required": ordered}


class ArraySchema(_Schema):
    type: Literal[SchemaType.ARRAY] = SchemaType.ARRAY
    items: "GenerationNode"
    description: Optional[str] = None


class StringSchema(_Schema):
    type: Literal[SchemaType.STRING] = SchemaType.STRING
    # Type is checked by the reverse converter, not here.
    const: Union[StrictStr, StrictInt, StrictFloat, None] = None
    enum: Optional[tuple[StrictStr, ...]] = None
    nullable: bool = False
    description: Optional[str] = None


class NumberSchema(_Schema):
    type: Literal[SchemaType.NUMBER] = SchemaType.NUMBER
    const: Union[StrictStr, StrictInt, StrictFloat, None] = None
    nullable: bool = False
    description: Optional[str] = None


class BooleanSchema(_Schema):
    type: Literal[SchemaType.BOOLEAN] = SchemaType.BOOLEAN
    nullable: bool = False
    description: Optional[str] = None


GenerationNode = Annotated[
    Union[ObjectSchema, ArraySchema, StringSchema, NumberSchema, BooleanSchema],
    Field(discriminator="type"),
]

ObjectSchema.model_rebuild()
ArraySchema.model_rebuild()


def to_wire(schema: GenerationNode) -> dict[str, Any]:
    """Serialize a generation schema into the request dict."""
    out: dict[str, Any] = {"type": SchemaType(schema.type).value}
    if isinstance(schema, ObjectSchema):
        out["properties"] = {
            name: to_wire(prop) for name, prop in schema.properties.items()
        }
        if schema.required:
            out["required"] = list(schema.required)
    elif isinstance(schema, ArraySchema):
        out["items"] = to_wire(schema.items)
    elif isinstance(schema, (StringSchema, NumberSchema, BooleanSchema)):
        if getattr(schema, "const", None) is not None:
            out["const"] = schema.const
        if getattr(schema, "enum", None) is not None:
            out["enum"] = list(schema.enum)
        out["nullable"] = schema.nullable
    else:
        raise UnsupportedSchemaError(
            f"unsupported schema construct: {type(schema).__name__}"
        )
    if schema.description is not None:
        out["description"] = schema.description
    return out


_COMMON_KEYS = {"type", "description"}
_ALLOWED_KEYS = {
    SchemaType.OBJECT: _COMMON_KEYS | {"properties", "required", "nullable"},
    SchemaType.ARRAY: _COMMON_KEYS | {"items", "nullable"},
    SchemaType.STRING: _COMMON_KEYS | {"const", "enum", "nullable"},
    SchemaType.NUMBER: _COMMON_KEYS | {"const", "nullable"},
    SchemaType.BOOLEAN: _COMMON_KEYS | {"nullable"},
}


def from_wire(data: Mapping[str, Any]) -> GenerationNode:
    """Parse a request dict (hand-written or received) into schema nodes."""
    return _from_wire(data, "$")


def _from_wire(data: Any, path: str) -> GenerationNode:
    if not isinstance(data, Mapping):
        raise UnsupportedSchemaError(
            f"schema must be an object, got {type(data).__name__}", path
        )
    raw_type = data.get("type")
    try:
        schema_type = SchemaType(raw_type)
    except ValueError:
        raise UnsupportedSchemaError(
            f"unsupported schema construct: type={raw_type!r}", path
        ) from None
    allowed = _ALLOWED_KEYS.get(schema_type)
    if allowed is None:
        raise UnsupportedSchemaError(
            f"unsupported schema construct: type={schema_type.value!r}", path
        )
    unknown = [key for key in data if key not in allowed]
    if unknown:
        raise UnsupportedSchemaError(
            f"unsupported schema keyword(s) for {schema_type.value}: "
            + ", ".join(sorted(unknown)),
            path,
        )

    nullable = data.get("nullable", False)
    if not isinstance(nullable, bool):
        raise SchemaConsistencyError("nullable must be a boolean", path)
    description = data.get("description")
    if description is not None and not isinstance(description, str):
        raise SchemaConsistencyError("description must be a string", path)

    if schema_type in (SchemaType.OBJECT, SchemaType.ARRAY) and nullable:
        raise MalformedWrappingError(
            f"nullable {schema_type.value} is not supported", path
        )

    if schema_type is SchemaType.OBJECT:
        properties = data.get("properties", {})
        if not isinstance(properties, Mapping):
            raise SchemaConsistencyError("properties must be an object", path)
        required = data.get("required", [])
        if not isinstance(required, list) or not all(
            isinstance(name, str) for name in required
        ):
            raise SchemaConsistencyError("required must be a list of names", path)
        return ObjectSchema(
            properties={
                name: _from_wire(prop, f"{path}.{name}")
                for name, prop in properties.items()
            },
            required=required,
            description=description,
        )

    if schema_type is SchemaType.ARRAY:
        if "items" not in data:
            raise SchemaConsistencyError("array schema without items", path)
        return ArraySchema(
            items=_from_wire(data["items"], f"{path}[]"), description=description
        )

    if schema_type is SchemaType.STRING:
        const = data.get("const")
        if const is not None and not isinstance(const, str):
            raise SchemaConsistencyError(
                f"const {const!r} does not match string schema", path
            )
        enum = data.get("enum")
        if enum is not None:
            if not isinstance(enum, list) or not all(isinstance(v, str) for v in enum):
                raise SchemaConsistencyError("enum must be a list of strings", path)
            enum = tuple(enum)
        return StringSchema(
            const=const, enum=enum, nullable=nullable, description=description
        )

    if schema_type is SchemaType.NUMBER:
        const = data.get("const")
        if const is not None and (
            isinstance(const, bool) or not isinstance(const, (int, float))
        ):
            raise SchemaConsistencyError(
                f"const {const!r} does not match number schema", path
            )
        return NumberSchema(const=const, nullable=nullable, description=description)

    return BooleanSchema(nullable=nullable, description=description)

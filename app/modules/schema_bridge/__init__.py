"""Schema bridge exports."""

from .adapters import from_model, parse, python_type, type_adapter
from .converter import to_generation_schema, to_validation_schema
from .errors import (
    MalformedWrappingError,
    SchemaBridgeError,
    SchemaConsistencyError,
    UnsupportedSchemaError,
)
from .generation import (
    ArraySchema,
    BooleanSchema,
    GenerationNode,
    NumberSchema,
    ObjectSchema,
    SchemaType,
    StringSchema,
    from_wire,
    to_wire,
)
from .validation import (
    ArrayNode,
    BooleanNode,
    EnumNode,
    LiteralNode,
    NumberNode,
    ObjectNode,
    OptionalNode,
    StringNode,
    ValidationNode,
    array,
    boolean,
    enum_of,
    literal,
    number,
    obj,
    optional,
    string,
)

__all__ = [
    "from_model",
    "parse",
    "python_type",
    "type_adapter",
    "to_generation_schema",
    "to_validation_schema",
    "MalformedWrappingError",
    "SchemaBridgeError",
    "SchemaConsistencyError",
    "UnsupportedSchemaError",
    "ArraySchema",
    "BooleanSchema",
    "GenerationNode",
    "NumberSchema",
    "ObjectSchema",
    "SchemaType",
    "StringSchema",
    "from_wire",
    "to_wire",
    "ArrayNode",
    "BooleanNode",
    "EnumNode",
    "LiteralNode",
    "NumberNode",
    "ObjectNode",
    "OptionalNode",
    "StringNode",
    "ValidationNode",
    "array",
    "boolean",
    "enum_of",
    "literal",
    "number",
    "obj",
    "optional",
    "string",
]

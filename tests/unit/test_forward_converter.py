import pytest
from pydantic import BaseModel

from app.modules.schema_bridge import (
    ArraySchema,
    MalformedWrappingError,
    NumberSchema,
    ObjectNode,
    ObjectSchema,
    StringNode,
    StringSchema,
    UnsupportedSchemaError,
    array,
    boolean,
    enum_of,
    literal,
    number,
    obj,
    optional,
    string,
    to_generation_schema,
    to_wire,
)


class UnionNode(BaseModel):
    """A node kind the bridge does not know about."""

    kind: str = "union"
    options: list[str] = []


@pytest.mark.unit
def test_object_required_and_nullable():
    schema = to_generation_schema(
        obj(
            name=string(),
            age=number(),
            is_student=boolean(),
            nickname=optional(string()),
        )
    )

    assert to_wire(schema) == {
        "type": "object",
        "properties": {
            "name": {"type": "string", "nullable": False},
            "age": {"type": "number", "nullable": False},
            "is_student": {"type": "boolean", "nullable": False},
            "nickname": {"type": "string", "nullable": True},
        },
        "required": ["name", "age", "is_student"],
    }


@pytest.mark.unit
def test_required_set_for_single_optional_field():
    schema = to_generation_schema(obj(a=string(), b=optional(string())))

    assert schema.required == ["a"]
    assert schema.properties["b"].nullable is True
    assert schema.properties["a"].nullable is False


@pytest.mark.unit
def test_field_order_is_preserved():
    schema = to_generation_schema(
        obj(zeta=string(), alpha=optional(number()), mid=boolean(), beta=string())
    )

    assert list(schema.properties) == ["zeta", "alpha", "mid", "beta"]
    assert schema.required == ["zeta", "mid", "beta"]
    assert list(to_wire(schema)["properties"]) == ["zeta", "alpha", "mid", "beta"]


@pytest.mark.unit
def test_array_of_numbers():
    schema = to_generation_schema(array(number()))

    assert schema == ArraySchema(items=NumberSchema(nullable=False))
    assert to_wire(schema) == {
        "type": "array",
        "items": {"type": "number", "nullable": False},
    }


@pytest.mark.unit
def test_array_element_optional_becomes_nullable_items():
    schema = to_generation_schema(array(optional(string())))

    assert schema.items == StringSchema(nullable=True)


@pytest.mark.unit
def test_nested_objects_keep_their_own_required_sets():
    schema = to_generation_schema(
        obj(
            user=obj(name=string(), age=optional(number())),
            scores=array(number()),
            note=optional(string()),
        )
    )

    assert schema.required == ["user", "scores"]
    assert schema.properties["user"].required == ["name"]
    assert to_wire(schema)["properties"]["user"] == {
        "type": "object",
        "properties": {
            "name": {"type": "string", "nullable": False},
            "age": {"type": "number", "nullable": True},
        },
        "required": ["name"],
    }


@pytest.mark.unit
def test_string_literal():
    assert to_wire(to_generation_schema(literal("hello"))) == {
        "type": "string",
        "const": "hello",
        "nullable": False,
    }


@pytest.mark.unit
def test_number_literal():
    assert to_wire(to_generation_schema(literal(42))) == {
        "type": "number",
        "const": 42,
        "nullable": False,
    }


@pytest.mark.unit
def test_optional_literal_field_is_nullable():
    schema = to_generation_schema(obj(kind=optional(literal("written"))))

    assert schema.properties["kind"] == StringSchema(const="written", nullable=True)
    assert schema.required == []
    assert "required" not in to_wire(schema)


@pytest.mark.unit
def test_enum_becomes_string_with_enum():
    assert to_wire(to_generation_schema(enum_of("pass", "fail"))) == {
        "type": "string",
        "enum": ["pass", "fail"],
        "nullable": False,
    }


@pytest.mark.unit
def test_descriptions_are_carried():
    node = ObjectNode(
        fields={"title": StringNode(description="Short title")},
        description="Quiz",
    )

    wire = to_wire(to_generation_schema(node))

    assert wire["description"] == "Quiz"
    assert wire["properties"]["title"]["description"] == "Short title"


@pytest.mark.unit
def test_root_optional_is_malformed():
    with pytest.raises(MalformedWrappingError):
        to_generation_schema(optional(string()))


@pytest.mark.unit
def test_double_optional_is_malformed():
    with pytest.raises(MalformedWrappingError) as exc:
        to_generation_schema(obj(a=optional(optional(string()))))
    assert exc.value.path == "$.a"


@pytest.mark.unit
@pytest.mark.parametrize(
    "inner", [obj(x=string()), array(string())], ids=["object", "array"]
)
def test_optional_container_is_malformed(inner):
    with pytest.raises(MalformedWrappingError):
        to_generation_schema(obj(field=optional(inner)))


@pytest.mark.unit
def test_unsupported_node_fails():
    with pytest.raises(UnsupportedSchemaError) as exc:
        to_generation_schema(UnionNode(options=["a", "b"]))
    assert "UnionNode" in str(exc.value)


@pytest.mark.unit
def test_unsupported_node_inside_object_fails_with_path():
    node = ObjectNode.model_construct(fields={"ok": string(), "bad": UnionNode()})

    with pytest.raises(UnsupportedSchemaError) as exc:
        to_generation_schema(node)
    assert exc.value.path == "$.bad"


@pytest.mark.unit
def test_conversion_builds_generation_nodes():
    schema = to_generation_schema(obj(items=array(obj(v=number()))))

    assert isinstance(schema, ObjectSchema)
    assert isinstance(schema.properties["items"], ArraySchema)
    assert isinstance(schema.properties["items"].items, ObjectSchema)

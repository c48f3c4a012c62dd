from enum import Enum
from typing import Literal, Optional, Union

import pytest
from pydantic import BaseModel, Field, ValidationError

from app.modules.quiz.models import ContentAnalysis, GeneratedQuiz
from app.modules.schema_bridge import (
    StringNode,
    UnsupportedSchemaError,
    array,
    boolean,
    enum_of,
    from_model,
    literal,
    number,
    obj,
    optional,
    parse,
    string,
    to_generation_schema,
    to_wire,
)


class Verdict(str, Enum):
    PASS = "pass"
    FAIL = "fail"


class Card(BaseModel):
    front: str
    back: str
    hint: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    ease: float | None = None
    reviews: int
    suspended: bool


class Review(BaseModel):
    verdict: Verdict
    level: Literal["easy", "medium", "hard"]
    correct: bool = Field(alias="isCorrect")
    cards: list[Card]


@pytest.mark.unit
def test_from_model_fields_and_optionals():
    node = from_model(Card)

    assert node == obj(
        front=string(),
        back=string(),
        hint=optional(string()),
        tags=array(string()),
        ease=optional(number()),
        reviews=number(),
        suspended=boolean(),
    )
    assert list(node.fields) == [
        "front",
        "back",
        "hint",
        "tags",
        "ease",
        "reviews",
        "suspended",
    ]


@pytest.mark.unit
def test_from_model_enums_aliases_and_nesting():
    node = from_model(Review)

    assert node.fields["verdict"] == enum_of("pass", "fail")
    assert node.fields["level"] == enum_of("easy", "medium", "hard")
    assert "isCorrect" in node.fields
    assert node.fields["cards"] == array(from_model(Card))


@pytest.mark.unit
def test_from_model_generated_quiz():
    choice = obj(text=string(), is_correct=boolean())

    assert from_model(GeneratedQuiz) == obj(
        title=string(),
        multiple_choice_questions=array(
            obj(
                question_type=literal("multiple_choice"),
                question=string(),
                choices=array(choice),
            )
        ),
        written_questions=array(
            obj(question_type=literal("written"), question=string())
        ),
    )


@pytest.mark.unit
def test_field_descriptions_reach_the_wire():
    wire = to_wire(to_generation_schema(from_model(ContentAnalysis)))

    assert wire["required"] == ["title", "overview", "slug"]
    assert wire["properties"]["slug"]["description"].startswith("A URL-friendly slug")
    assert from_model(ContentAnalysis).fields["title"] == StringNode(
        description="A concise, descriptive title for the content."
    )


@pytest.mark.unit
def test_union_field_is_unsupported():
    class Mixed(BaseModel):
        value: Union[int, str]

    with pytest.raises(UnsupportedSchemaError) as exc:
        from_model(Mixed)
    assert exc.value.path == "$.value"


@pytest.mark.unit
@pytest.mark.parametrize(
    "annotation",
    [dict[str, str], tuple[int, int], Literal[True], Literal[1, "a"]],
    ids=["dict", "tuple", "bool_literal", "mixed_literal"],
)
def test_other_constructs_are_unsupported(annotation):
    from pydantic import create_model

    model = create_model("Other", field=(annotation, ...))

    with pytest.raises(UnsupportedSchemaError):
        from_model(model)


@pytest.mark.unit
def test_parse_object_with_optional_fields():
    node = obj(a=string(), b=optional(number()))

    assert parse(node, {"a": "x"}) == {"a": "x"}
    assert parse(node, {"a": "x", "b": None}) == {"a": "x", "b": None}
    assert parse(node, {"a": "x", "b": 2.5}) == {"a": "x", "b": 2.5}


@pytest.mark.unit
@pytest.mark.parametrize(
    "data",
    [{"a": 1}, {"a": "x", "b": "3"}, {"b": 3}, {"a": "x", "b": True}, ["a"]],
    ids=["number_for_string", "string_for_number", "missing_required", "bool_for_number", "not_object"],
)
def test_parse_rejects_mismatches(data):
    with pytest.raises(ValidationError):
        parse(obj(a=string(), b=optional(number())), data)


@pytest.mark.unit
def test_parse_keeps_wire_names_and_order():
    node = obj({"is-correct": boolean(), "2nd": string(), "model_name": string()})

    result = parse(node, {"2nd": "x", "model_name": "m", "is-correct": True})

    assert result == {"is-correct": True, "2nd": "x", "model_name": "m"}
    assert list(result) == ["is-correct", "2nd", "model_name"]


@pytest.mark.unit
def test_parse_drops_unknown_keys():
    assert parse(obj(a=string()), {"a": "x", "z": 1}) == {"a": "x"}


@pytest.mark.unit
def test_parse_arrays_and_enums():
    assert parse(array(optional(number())), [1, None, 2.5]) == [1, None, 2.5]
    assert parse(enum_of("pass", "fail"), "pass") == "pass"
    with pytest.raises(ValidationError):
        parse(enum_of("pass", "fail"), "maybe")


@pytest.mark.unit
def test_parse_generated_quiz(sample_quiz_output):
    node = from_model(GeneratedQuiz)

    assert parse(node, sample_quiz_output) == sample_quiz_output

    broken = dict(sample_quiz_output, written_questions=[{"question_type": "essay", "question": "?"}])
    with pytest.raises(ValidationError):
        parse(node, broken)


@pytest.mark.unit
@pytest.mark.parametrize(
    "node,value",
    [
        (literal(1), True),
        (literal(0), False),
        (literal(1), "1"),
        (literal(2.5), "2.5"),
        (literal("a"), b"a"),
        (enum_of("pass", "fail"), b"pass"),
    ],
    ids=["true_for_one", "false_for_zero", "str_for_int", "str_for_float", "bytes_for_str", "bytes_for_enum"],
)
def test_literals_are_strict(node, value):
    with pytest.raises(ValidationError):
        parse(node, value)


@pytest.mark.unit
def test_number_literal_inside_object():
    node = obj(points=literal(1), bonus=optional(literal(0.5)))

    assert parse(node, {"points": 1, "bonus": None}) == {"points": 1, "bonus": None}
    assert parse(node, {"points": 1, "bonus": 0.5}) == {"points": 1, "bonus": 0.5}
    with pytest.raises(ValidationError):
        parse(node, {"points": True})

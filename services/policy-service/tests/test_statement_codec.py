import json

import pytest

from app.models import Statement
from app.services.statement_codec import ParseOk, parse, parse_documents, serialize


CONDITIONS = {"StringEquals": {"documents:Classification": ["internal", "public"]}, "Bool": {"mfa": True}}


def sample():
    return [
        Statement(
            sid="ReadDocs",
            effect="Allow",
            actions=["documents:GetDocument", "documents:ListDocuments"],
            resources=["urn:revet:documents::document/*"],
            conditions=CONDITIONS,
        ),
        Statement(effect="Deny", actions=["documents:DeleteDocument"], resources=["*"]),
    ]


def test_round_trip_preserves_every_field():
    original = sample()
    result = parse(serialize(original))
    assert isinstance(result, ParseOk)
    assert list(result.statements) == original
    assert [s.to_document() for s in result.statements] == [s.to_document() for s in original]
    assert result.statements[0].conditions == CONDITIONS


def test_serialize_key_order_and_optional_conditions():
    docs = json.loads(serialize(sample()))
    assert list(docs[0]) == ["sid", "effect", "actions", "resources", "conditions"]
    assert list(docs[1]) == ["sid", "effect", "actions", "resources"]
    assert docs[1]["sid"] is None


def test_explicit_null_conditions_survive():
    text = '[{"effect": "Allow", "actions": ["a:B"], "resources": ["*"], "conditions": null}]'
    result = parse(text)
    assert isinstance(result, ParseOk)
    assert "conditions" in json.loads(serialize(result.statements))[0]


def test_scenario_c_single_object_fails_shape_gate():
    result = parse('{"effect":"Maybe","actions":[],"resources":[]}')
    assert result.kind == "shape"
    assert result.statement_index is None
    assert result.message == "Statements must be an array"


def test_invalid_json():
    result = parse('[{"effect": "Allow",')
    assert result.kind == "shape"
    assert result.message == "Invalid JSON syntax"


def test_too_deeply_nested_json_is_a_shape_error():
    depth = 100000
    text = '[{"effect": "Allow", "actions": ["*"], "resources": ["*"], "conditions": ' + "[" * depth + "]" * depth + "}]"
    result = parse(text)
    assert result.kind == "shape"
    assert result.message == "Invalid JSON syntax"


@pytest.mark.parametrize(
    "element, field, message",
    [
        ("42", None, "Statement 2: must be an object"),
        ('{"effect": "Maybe", "actions": [], "resources": []}', "effect", 'Statement 2: effect must be "Allow" or "Deny"'),
        ('{"effect": 1, "actions": [], "resources": []}', "effect", 'Statement 2: effect must be "Allow" or "Deny"'),
        ('{"effect": "Allow", "resources": ["*"]}', "actions", "Statement 2: actions must be an array"),
        ('{"effect": "Allow", "actions": "a:B", "resources": ["*"]}', "actions", "Statement 2: actions must be an array"),
        ('{"effect": "Allow", "actions": ["a:B"]}', "resources", "Statement 2: resources must be an array"),
        ('{"effect": "Allow", "actions": ["a:B"], "resources": [7]}', "resources", "Statement 2: resources must contain only strings"),
        ('{"sid": 5, "effect": "Allow", "actions": ["a:B"], "resources": ["*"]}', "sid", "Statement 2: sid must be a string or null"),
        ('{"effect": "Allow", "actions": ["a:B"], "resources": ["*"], "Principal": "x"}', "Principal", 'Statement 2: unknown field "Principal"'),
    ],
)
def test_shape_errors_point_at_statement_and_field(element, field, message):
    good = '{"effect": "Allow", "actions": ["a:B"], "resources": ["*"]}'
    result = parse(f"[{good}, {element}]")
    assert result.kind == "shape"
    assert result.statement_index == 1
    assert result.field == field
    assert result.message == message


def test_shape_runs_before_semantic_validation():
    # statement 1 is semantically invalid, statement 2 is malformed: shape wins
    text = '[{"effect": "Allow", "actions": [], "resources": ["*"]}, {"effect": "Allow"}]'
    result = parse(text)
    assert result.kind == "shape"
    assert result.statement_index == 1


def test_semantic_error_after_shape_passes():
    result = parse('[{"effect": "Allow", "actions": ["a:B"], "resources": []}]')
    assert result.kind == "validation"
    assert result.field == "resources"
    assert result.statement_index == 0


def test_missing_arrays_are_not_padded():
    result = parse('[{"effect": "Allow", "actions": ["a:B"]}]')
    assert result.kind == "shape"
    assert result.field == "resources"


def test_empty_array_is_ok():
    result = parse("[]")
    assert isinstance(result, ParseOk)
    assert result.statements == ()


def test_parse_documents_on_decoded_payload():
    result = parse_documents([{"effect": "Deny", "actions": ["*"], "resources": ["*"], "conditions": {"k": [1, 2]}}])
    assert isinstance(result, ParseOk)
    assert result.statements[0].conditions == {"k": [1, 2]}
    assert parse_documents({"effect": "Deny"}).kind == "shape"

import pytest

from app.models import Statement
from app.services.validator import is_valid, validate_list, validate_statement


def test_scenario_a_valid_statement():
    s = Statement(effect="Allow", actions=["documents:GetDocument"], resources=["urn:x:documents::document/42"])
    assert validate_statement(s) is None


def test_scenario_b_empty_actions():
    err = validate_statement(Statement(effect="Allow", actions=[], resources=["*"]))
    assert err is not None
    assert err.field == "actions"
    assert err.statement_index == 0
    assert err.message == "Statement 1 must have at least one action"


@pytest.mark.parametrize(
    "effect, actions, resources, expected",
    [
        ("Allow", ["a:B"], ["*"], None),
        ("Deny", ["*"], ["urn:x:iam::user/u1"], None),
        (None, ["a:B"], ["*"], "effect"),
        ("allow", ["a:B"], ["*"], "effect"),
        ("Maybe", [], [], "effect"),
        ("Deny", [], [], "actions"),
        ("Deny", ["a:B"], [], "resources"),
    ],
)
def test_validity_iff_effect_actions_resources(effect, actions, resources, expected):
    err = validate_statement(Statement(effect=effect, actions=actions, resources=resources))
    if expected is None:
        assert err is None
    else:
        assert err.field == expected


def test_accepts_plain_mappings():
    assert validate_statement({"effect": "Allow", "actions": ["a:B"], "resources": ["*"]}) is None
    err = validate_statement({"effect": "Allow", "resources": ["*"]}, index=4)
    assert err.field == "actions"
    assert err.statement_index == 4
    assert err.message.startswith("Statement 5 ")


def test_list_reports_first_error_in_statement_order():
    good = Statement(effect="Allow", actions=["a:B"], resources=["*"])
    no_resources = Statement(effect="Allow", actions=["a:B"], resources=[])
    bad_effect = Statement(effect="Nope", actions=[], resources=[])

    err = validate_list([good, no_resources, bad_effect])
    assert (err.statement_index, err.field) == (1, "resources")
    assert err.message == "Statement 2 must have at least one resource"

    err = validate_list([good, bad_effect, no_resources])
    assert (err.statement_index, err.field) == (1, "effect")


def test_empty_list_is_valid():
    assert validate_list([]) is None
    assert is_valid([])

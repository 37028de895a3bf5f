from design_consensus.io.dtcg import EXTENSION_KEY, format_motion_token, token_name
from design_consensus.io.models import ConfidenceScore, MotionToken
from design_consensus.io.schema import validate_dtcg_output

SCORE = ConfidenceScore(value=0.8, level="high", reasoning="test")


def test_token_names():
    assert token_name("color", 0, 3) == "color-1"
    assert token_name("spacing", 2, 8) == "spacing-md"
    assert token_name("spacing", 6, 8) == "spacing-7"
    assert [token_name("typography", index, 10) for index in range(10)] == [
        "heading-1",
        "heading-2",
        "subheading-1",
        "subheading-2",
        "subheading-3",
        "body-1",
        "body-2",
        "body-3",
        "body-4",
        "body-5",
    ]


def test_motion_token_types():
    easing = format_motion_token(MotionToken(property="easing", value="ease-in-out"), SCORE)
    duration = format_motion_token(MotionToken(property="duration", value="200ms", duration_ms=200), SCORE)
    assert easing["$type"] == "cubicBezier"
    assert duration["$type"] == "duration"
    assert duration["$extensions"][EXTENSION_KEY]["durationMs"] == 200
    assert duration["$extensions"][EXTENSION_KEY]["level"] == "high"


def test_valid_tree():
    tree = {
        "colors": {"color-1": {"$type": "color", "$value": "#000000", "$description": "black"}},
        "spacing": {"nested": {"spacing-sm": {"$type": "dimension", "$value": "8px"}}},
    }
    result = validate_dtcg_output(tree)
    assert result.valid
    assert result.errors == []


def test_empty_tree_is_valid():
    assert validate_dtcg_output({}).valid


def test_unknown_type_is_reported():
    result = validate_dtcg_output({"colors": {"c": {"$type": "colour", "$value": "#000"}}})
    assert not result.valid
    assert any(error.startswith("root.colors.c") for error in result.errors)


def test_missing_value_is_reported():
    result = validate_dtcg_output({"radii": {"r": {"$type": "dimension"}}})
    assert not result.valid
    assert "root.radii.r: Token has $type but missing $value" in result.errors


def test_group_with_dollar_key_is_reported():
    result = validate_dtcg_output({"colors": {"$description": "palette"}})
    assert result.errors == ["root.colors.$description: Group nodes should not have $ properties (only tokens)"]


def test_non_object_node_is_reported():
    result = validate_dtcg_output({"colors": ["#000"]})
    assert result.errors == ["root.colors: Expected object, got list"]


def test_unexpected_token_keys_are_reported():
    result = validate_dtcg_output({"c": {"$type": "color", "$value": "#000", "$mode": "dark"}})
    assert not result.valid

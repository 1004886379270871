"""
Unit tests for the JSON document tree.
"""

import json

import pytest

from validator.json_tree import (
    JsonKind,
    kind_of,
    kind_of_safe,
    child_path,
    root_node,
    walk,
    parse_json,
)


class TestKindOf:
    """Test value classification."""

    @pytest.mark.parametrize("value,kind", [
        (None, JsonKind.NULL),
        (True, JsonKind.BOOL),
        (False, JsonKind.BOOL),
        (0, JsonKind.NUMBER),
        (1.5, JsonKind.NUMBER),
        ("5", JsonKind.STRING),
        ([], JsonKind.ARRAY),
        ({}, JsonKind.OBJECT),
    ])
    def test_kinds(self, value, kind):
        assert kind_of(value) == kind

    def test_non_json_value(self):
        with pytest.raises(TypeError):
            kind_of(object())
        assert kind_of_safe(object()) is None


class TestPaths:
    """Test path construction."""

    def test_child_paths(self):
        assert child_path("", "messages") == "messages"
        assert child_path("messages", 0) == "messages[0]"
        assert child_path("messages[0]", "value") == "messages[0].value"

    def test_root_path_is_empty(self):
        assert root_node({"a": 1}).path == ""


class TestWalk:
    """Test depth-first traversal."""

    def test_document_order(self):
        document = parse_json('{"a": {"b": [1, 2]}, "c": "x"}')
        paths = [node.path for node in walk(document)]

        assert paths == ["", "a", "a.b", "a.b[0]", "a.b[1]", "c"]

    def test_nulls_skipped(self):
        paths = [node.path for node in walk({"a": None, "b": 1})]
        assert paths == ["", "b"]

    def test_parent_links(self):
        nodes = {node.path: node for node in walk({"messages": [{"value": {"amount": 5}}]})}
        amount = nodes["messages[0].value.amount"]

        assert amount.key == "amount"
        assert amount.parent.path == "messages[0].value"
        assert [a.path for a in amount.ancestors()] == ["messages[0].value", "messages[0]", "messages", ""]

    def test_container_key(self):
        nodes = {node.path: node for node in walk({"transfers": [{"x": "1"}]})}

        assert nodes["transfers[0]"].container_key == "transfers"
        assert nodes["transfers"].container_key is None

    def test_get_on_non_object(self):
        node = root_node([1, 2])
        assert node.get("a", "default") == "default"

    def test_parse_json_error(self):
        with pytest.raises(json.JSONDecodeError):
            parse_json("{not json")

"""Tests for the immutable graph document and node field probing."""

from __future__ import annotations

import json

import pytest

from comfymcp.core.document import (
    Document,
    InputsTextSlot,
    WidgetsValuesSlot,
    node_class,
    node_title,
    resolve_text_slot,
)


class TestDocument:
    def test_preserves_node_order(self):
        doc = Document({"9": {}, "1": {}, "45": {}})
        assert list(doc) == ["9", "1", "45"]

    def test_nested_values_are_read_only(self, titled_graph):
        doc = Document(titled_graph)
        with pytest.raises(TypeError):
            doc["6"]["inputs"]["text"] = "changed"
        assert isinstance(doc["6"]["inputs"]["clip"], tuple)

    def test_source_mapping_changes_do_not_leak_in(self, titled_graph):
        doc = Document(titled_graph)
        titled_graph["6"]["inputs"]["text"] = "mutated after load"
        assert doc["6"]["inputs"]["text"] == "old prompt"

    def test_with_node_returns_new_document(self, titled_graph):
        doc = Document(titled_graph)
        updated = doc.with_node("6", {"class_type": "CLIPTextEncode", "inputs": {"text": "new"}})

        assert updated is not doc
        assert updated["6"]["inputs"]["text"] == "new"
        assert doc["6"]["inputs"]["text"] == "old prompt"
        assert list(updated) == list(doc)

    def test_with_node_appends_unknown_id(self):
        doc = Document({"1": {}})
        assert list(doc.with_node("2", {"class_type": "SaveImage"})) == ["1", "2"]

    def test_to_dict_is_plain_json(self, titled_graph):
        plain = Document(titled_graph).to_dict()
        assert plain == titled_graph
        assert isinstance(plain["6"]["inputs"]["clip"], list)
        json.dumps(plain)

    def test_to_dict_copies(self, titled_graph):
        doc = Document(titled_graph)
        plain = doc.to_dict()
        plain["6"]["inputs"]["text"] = "edited copy"
        assert doc["6"]["inputs"]["text"] == "old prompt"

    def test_equality_with_plain_mapping(self, titled_graph):
        assert Document(titled_graph) == titled_graph
        assert Document(titled_graph) == Document(titled_graph)


class TestNodeProbing:
    def test_class_from_class_type_or_type(self):
        assert node_class({"class_type": "CLIPTextEncode"}) == "CLIPTextEncode"
        assert node_class({"type": "CLIPTextEncode"}) == "CLIPTextEncode"
        assert node_class({}) == ""
        assert node_class("not a node") == ""

    def test_title_direct_then_meta(self):
        assert node_title({"title": "Direct", "_meta": {"title": "Meta"}}) == "Direct"
        assert node_title({"_meta": {"title": "Meta"}}) == "Meta"
        assert node_title({}) == ""

    def test_inputs_text_slot(self):
        assert resolve_text_slot({"inputs": {"text": "cat"}}) == InputsTextSlot(text="cat")

    def test_widgets_values_slot(self):
        assert resolve_text_slot({"widgets_values": ["dog", 3]}) == WidgetsValuesSlot(text="dog")
        assert resolve_text_slot({"widgets_values": []}) == WidgetsValuesSlot(text="")

    def test_linked_text_input_is_not_a_slot(self):
        assert resolve_text_slot({"inputs": {"text": ["12", 0]}}) is None

    def test_no_slot(self):
        assert resolve_text_slot({"inputs": {"clip": ["4", 1]}}) is None

"""Tests for prompt injection."""

from __future__ import annotations

from comfymcp.core.document import Document, InputsTextSlot
from comfymcp.workflows.injector import inject_prompt, write_text_slot


def test_overwrites_inputs_text(titled_graph):
    doc = Document(titled_graph)
    updated = inject_prompt(doc, "6", "a cat")

    assert updated["6"]["inputs"]["text"] == "a cat"
    assert updated["6"]["inputs"]["clip"] == ("4", 1)
    assert "widgets_values" not in updated["6"]
    # original untouched
    assert doc["6"]["inputs"]["text"] == "old prompt"


def test_replaces_widgets_values(widgets_graph):
    updated = inject_prompt(Document(widgets_graph), "12", "a castle")

    assert updated["12"]["widgets_values"] == ("a castle",)
    assert "inputs" not in updated["12"]


def test_node_without_slot_is_left_alone(no_text_graph):
    doc = Document(no_text_graph)
    assert inject_prompt(doc, "2", "ignored") is doc


def test_unknown_node_is_left_alone(titled_graph):
    doc = Document(titled_graph)
    assert inject_prompt(doc, "404", "ignored") is doc


def test_write_text_slot_uses_given_slot(titled_graph):
    doc = Document(titled_graph)
    updated = write_text_slot(doc, "7", InputsTextSlot(text="blurry"), "lowres")
    assert updated["7"]["inputs"]["text"] == "lowres"
    assert updated["6"] == doc["6"]


def test_write_text_slot_none_is_noop(titled_graph):
    doc = Document(titled_graph)
    assert write_text_slot(doc, "6", None, "ignored") is doc

"""Write prompt text into a workflow node."""

from __future__ import annotations

import logging

from comfymcp.core.document import (
    Document,
    InputsTextSlot,
    TextValueSlot,
    WidgetsValuesSlot,
    resolve_text_slot,
    thaw,
)

logger = logging.getLogger("comfymcp.workflows")


def inject_prompt(document: Document, node_id: str, text: str) -> Document:
    """Return a copy of ``document`` with ``text`` written into ``node_id``."""
    if node_id not in document:
        logger.debug("Prompt injection skipped: node %s not in graph", node_id)
        return document
    return write_text_slot(document, node_id, resolve_text_slot(document[node_id]), text)


def write_text_slot(
    document: Document,
    node_id: str,
    slot: TextValueSlot,
    text: str,
) -> Document:
    """Write ``text`` using an already-resolved slot.

    A node without a text slot is left alone; some workflows take no
    prompt at all.
    """
    if slot is None or node_id not in document:
        logger.debug("Prompt injection skipped: node %s has no text slot", node_id)
        return document

    node = thaw(document[node_id])
    if isinstance(slot, InputsTextSlot):
        node["inputs"]["text"] = text
    elif isinstance(slot, WidgetsValuesSlot):
        node["widgets_values"] = [text]
    return document.with_node(node_id, node)

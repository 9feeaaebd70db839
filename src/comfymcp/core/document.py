"""Immutable ComfyUI graph documents.

A ComfyUI prompt graph is a JSON object mapping node ids to node
definitions. Catalog graphs are shared between every submission, so the
document type here is read-only all the way down:

- nested objects are exposed as ``MappingProxyType``
- nested arrays are exposed as tuples

The only way to change a node is ``Document.with_node``, which returns a
new document. ``to_dict`` thaws the whole graph back into plain JSON-ready
``dict``/``list`` values for submission.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Union

TEXT_ENCODE_CLASS = "CLIPTextEncode"


def freeze(value: Any) -> Any:
    """Return a deeply read-only view of a JSON-like value."""
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Return a plain, mutable deep copy of a (possibly frozen) JSON-like value."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(v) for v in value]
    return value


class Document(Mapping[str, Any]):
    """Read-only, insertion-ordered mapping of node id to node definition."""

    __slots__ = ("_nodes",)

    def __init__(self, nodes: Optional[Mapping[str, Any]] = None):
        self._nodes: Dict[str, Any] = {
            str(node_id): freeze(node) for node_id, node in (nodes or {}).items()
        }

    def __getitem__(self, node_id: str) -> Any:
        return self._nodes[node_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Document):
            return thaw(self._nodes) == thaw(other._nodes)
        if isinstance(other, Mapping):
            return thaw(self._nodes) == thaw(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._nodes))

    def __repr__(self) -> str:
        return f"Document(nodes={list(self._nodes)})"

    def with_node(self, node_id: str, node: Mapping[str, Any]) -> "Document":
        """Return a copy of this document with ``node_id`` replaced (or appended)."""
        updated = dict(self._nodes)
        updated[str(node_id)] = node
        return Document(updated)

    def to_dict(self) -> Dict[str, Any]:
        return thaw(self._nodes)


# -----------------------------------------------------------------------------
# Node field probing
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class InputsTextSlot:
    """Node holds its prompt in ``inputs.text`` (API export format)."""

    text: str


@dataclass(frozen=True)
class WidgetsValuesSlot:
    """Node holds its prompt in ``widgets_values[0]`` (UI export format)."""

    text: str


TextValueSlot = Optional[Union[InputsTextSlot, WidgetsValuesSlot]]


def node_class(node: Any) -> str:
    if not isinstance(node, Mapping):
        return ""
    tag = node.get("class_type") or node.get("type") or ""
    return tag if isinstance(tag, str) else ""


def node_title(node: Any) -> str:
    if not isinstance(node, Mapping):
        return ""
    title = node.get("title")
    if not title:
        meta = node.get("_meta")
        title = meta.get("title") if isinstance(meta, Mapping) else None
    return title if isinstance(title, str) else ""


def resolve_text_slot(node: Any) -> TextValueSlot:
    """Work out which value shape carries the node's text, if any.

    ``inputs.text`` wins when it is a literal string; a list there is a link
    to another node's output and cannot take a prompt.
    """
    if not isinstance(node, Mapping):
        return None
    inputs = node.get("inputs")
    if isinstance(inputs, Mapping) and isinstance(inputs.get("text"), str):
        return InputsTextSlot(text=inputs["text"])
    widgets = node.get("widgets_values")
    if isinstance(widgets, (list, tuple)):
        first = widgets[0] if widgets else ""
        return WidgetsValuesSlot(text=first if isinstance(first, str) else "")
    return None


def is_text_encode(node: Any) -> bool:
    return node_class(node) == TEXT_ENCODE_CLASS

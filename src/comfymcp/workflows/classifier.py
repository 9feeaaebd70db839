"""Locate and label the text-encode nodes of a workflow graph.

Workflows do not follow a fixed schema, so the prompt slot is found by
heuristics. Order matters: the graph's own node order decides which
untitled node counts as the positive prompt.
"""

from __future__ import annotations

from typing import List, Mapping, Optional

from comfymcp.core.document import is_text_encode, node_title, resolve_text_slot
from comfymcp.core.models import ClassifiedNode, NodeKind


def classify_text_nodes(document: Mapping[str, object]) -> List[ClassifiedNode]:
    """Classify every text-encode node as positive, negative or unknown."""
    classified: List[ClassifiedNode] = []
    seen_positive = False

    for node_id, node in document.items():
        if not is_text_encode(node):
            continue
        title = node_title(node)
        slot = resolve_text_slot(node)
        current_text = slot.text if slot is not None else ""

        kind = _classify(title, current_text, seen_positive, first=not classified)
        seen_positive = seen_positive or kind == NodeKind.POSITIVE
        classified.append(
            ClassifiedNode(
                id=node_id,
                kind=kind,
                current_text=current_text,
                title=title,
                slot=slot,
            )
        )

    if classified and not seen_positive:
        first = classified[0]
        classified[0] = ClassifiedNode(
            id=first.id,
            kind=NodeKind.POSITIVE,
            current_text=first.current_text,
            title=first.title,
            slot=first.slot,
        )
    return classified


def _classify(title: str, current_text: str, seen_positive: bool, *, first: bool) -> NodeKind:
    lowered = title.lower()
    if "negative" in lowered:
        return NodeKind.NEGATIVE
    if "positive" in lowered or "prompt" in lowered:
        return NodeKind.POSITIVE
    # An empty encoder after the positive one is usually the negative slot.
    if not current_text and seen_positive:
        return NodeKind.NEGATIVE
    if first:
        return NodeKind.POSITIVE
    return NodeKind.UNKNOWN


def select_prompt_target(classified: List[ClassifiedNode]) -> Optional[ClassifiedNode]:
    """Pick the node that should receive the caller's prompt text."""
    for kind in (NodeKind.POSITIVE, NodeKind.UNKNOWN):
        for node in classified:
            if node.kind == kind:
                return node
    return classified[0] if classified else None

"""Workflow catalog, text-node classification and prompt injection."""

from comfymcp.workflows.classifier import classify_text_nodes, select_prompt_target
from comfymcp.workflows.injector import inject_prompt, write_text_slot
from comfymcp.workflows.registry import (
    WorkflowEntry,
    WorkflowRegistry,
    format_workflow_uri,
    parse_workflow_uri,
)

__all__ = [
    "WorkflowEntry",
    "WorkflowRegistry",
    "classify_text_nodes",
    "format_workflow_uri",
    "inject_prompt",
    "parse_workflow_uri",
    "select_prompt_target",
    "write_text_slot",
]

"""Tool for listing the workflow catalog."""

from __future__ import annotations

import json
from typing import Any, Dict

from .core import Tool, error_result, missing_orchestrator


class GetWorkflowsForSelectionTool(Tool):
    """List every catalog workflow with its URI and full graph.

    The agent uses the URIs with submitWorkflow.
    """

    name = "getWorkflowsForSelection"
    description = (
        "List the available ComfyUI workflows. Each entry has a workflow URI "
        "(workflow://<id>) to pass to submitWorkflow and the workflow graph."
    )
    parameters = []

    def execute(self, args: Dict[str, Any], **kwargs: Any) -> Dict[str, Any]:
        action = "listing workflows"
        orchestrator = kwargs.get("orchestrator")
        if orchestrator is None:
            return missing_orchestrator(action)

        try:
            workflows = [
                {"uri": entry.uri, "graph": entry.graph.to_dict()}
                for entry in orchestrator.registry.entries()
            ]
        except Exception as exc:
            return error_result(action, exc, error_code="LIST_FAILED")

        return {
            "success": True,
            "count": len(workflows),
            "workflows": workflows,
            "message": f"Found {len(workflows)} workflows:\n{json.dumps(workflows, indent=2)}",
        }

"""MCP server exposing the ComfyUI job tools."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from comfymcp import __version__
from comfymcp.config.settings import Settings
from comfymcp.jobs.orchestrator import JobOrchestrator
from comfymcp.tools import ToolRegistry, build_tool_registry
from comfymcp.utils.logging import setup_logging
from comfymcp.workflows.registry import format_workflow_uri

logger = logging.getLogger("comfymcp.mcp")

SERVER_NAME = "ComfyUI MCP Server"


def build_mcp_server(
    settings: Optional[Settings] = None,
    orchestrator: Optional[JobOrchestrator] = None,
) -> FastMCP:
    setup_logging()
    settings = settings or Settings()
    orchestrator = orchestrator or JobOrchestrator.from_settings(settings)
    tools = build_tool_registry()

    server = FastMCP(
        name=SERVER_NAME,
        instructions=(
            "Submit ComfyUI image workflows, poll their status and fetch result URLs. "
            "Call getWorkflowsForSelection to pick a workflow, submitWorkflow to queue it, "
            "then getJobStatus with the returned prompt ID until the job is complete."
        ),
        host=settings.mcp_host,
        port=settings.mcp_port,
        json_response=True,
        stateless_http=True,
    )
    logger.info(
        "Building %s v%s comfyui_url=%s tools=%s",
        SERVER_NAME,
        __version__,
        settings.comfyui_url,
        ", ".join(tools.names()),
    )

    def _call(name: str, args: dict[str, Any]) -> str:
        result = tools.execute(name, args, orchestrator=orchestrator)
        return result["message"]

    @server.tool(name="getWorkflowsForSelection", description=_description(tools, "getWorkflowsForSelection"))
    def get_workflows_for_selection() -> str:
        return _call("getWorkflowsForSelection", {})

    @server.tool(name="submitWorkflow", description=_description(tools, "submitWorkflow"))
    def submit_workflow(workflowUri: str | None = None, prompt: str | None = None) -> str:
        return _call("submitWorkflow", {"workflowUri": workflowUri, "prompt": prompt})

    @server.tool(name="getJobStatus", description=_description(tools, "getJobStatus"))
    def get_job_status(prompt_id: str) -> str:
        return _call("getJobStatus", {"prompt_id": prompt_id})

    @server.tool(name="getJobHistory", description=_description(tools, "getJobHistory"))
    def get_job_history(limit: int = 10) -> str:
        return _call("getJobHistory", {"limit": limit})

    @server.tool(name="healthCheck", description=_description(tools, "healthCheck"))
    def health_check() -> str:
        return _call("healthCheck", {})

    @server.resource(
        format_workflow_uri("{workflow_id}"),
        name="workflow",
        description="ComfyUI workflow graph from the catalog",
        mime_type="application/json",
    )
    def workflow_resource(workflow_id: str) -> str:
        graph = orchestrator.registry.resolve(workflow_id)
        return json.dumps(graph.to_dict(), indent=2)

    return server


def _description(tools: ToolRegistry, name: str) -> str:
    tool = tools.get(name)
    return tool.description if tool is not None else ""


def _resolve_transport() -> str:
    raw = os.environ.get("COMFYMCP_TRANSPORT", "stdio").strip().lower()
    transport_map = {
        "stdio": "stdio",
        "sse": "sse",
        "streamable-http": "streamable-http",
        "http": "streamable-http",
        "streamable": "streamable-http",
    }
    transport = transport_map.get(raw)
    if not transport:
        raise ValueError(
            f"Unknown COMFYMCP_TRANSPORT '{raw}'. Use stdio, sse, or streamable-http."
        )
    return transport


def main() -> None:
    transport = _resolve_transport()
    settings = Settings()
    server = build_mcp_server(settings)
    logger.info(
        "Starting MCP server transport=%s host=%s port=%s",
        transport,
        settings.mcp_host,
        settings.mcp_port,
    )
    server.run(transport=transport)


if __name__ == "__main__":
    main()

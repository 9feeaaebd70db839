"""Job tools: submit a workflow, check a job, list past jobs, probe ComfyUI."""

from __future__ import annotations

import json
from typing import Any, Dict

from comfymcp.core.models import JobStatus
from comfymcp.jobs.orchestrator import DEFAULT_HISTORY_LIMIT

from .core import Tool, ToolParameter, error_result, missing_orchestrator


class SubmitWorkflowTool(Tool):
    """Queue a catalog workflow on ComfyUI, optionally with prompt text.

    The prompt is written into the workflow's positive text-encode node,
    found by title and position since workflows have no fixed schema.
    """

    name = "submitWorkflow"
    description = (
        "Submit a workflow to ComfyUI for processing. Optionally pass a workflow URI "
        "(workflow://<id>, see getWorkflowsForSelection) and prompt text to use in the "
        "workflow. Returns the prompt ID to poll with getJobStatus."
    )
    parameters = [
        ToolParameter(
            "workflowUri",
            "string",
            "Workflow URI of the form workflow://<id>; defaults to the server's default workflow",
            required=False,
        ),
        ToolParameter(
            "prompt",
            "string",
            "Optional prompt text to use in the workflow",
            required=False,
        ),
    ]

    def execute(self, args: Dict[str, Any], **kwargs: Any) -> Dict[str, Any]:
        action = "submitting workflow"
        orchestrator = kwargs.get("orchestrator")
        if orchestrator is None:
            return missing_orchestrator(action)

        try:
            job = orchestrator.submit(args.get("workflowUri"), args.get("prompt"))
        except Exception as exc:
            return error_result(action, exc, error_code="SUBMIT_FAILED")

        return {
            "success": True,
            "prompt_id": job.prompt_id,
            "status": job.status.value,
            "message": (
                f"Workflow submitted successfully!\n"
                f"Prompt ID: {job.prompt_id}\n"
                f"Status: {job.status.value}"
            ),
        }


class GetJobStatusTool(Tool):
    """Report a job's status, fetching from ComfyUI until it completes."""

    name = "getJobStatus"
    description = (
        "Check the status of a submitted job. Returns the image location "
        "(filename, fullPath, viewUrl) once the job is complete."
    )
    parameters = [
        ToolParameter(
            "prompt_id",
            "string",
            "The prompt ID returned from submitWorkflow",
            required=True,
        ),
    ]

    def execute(self, args: Dict[str, Any], **kwargs: Any) -> Dict[str, Any]:
        action = "checking job status"
        orchestrator = kwargs.get("orchestrator")
        if orchestrator is None:
            return missing_orchestrator(action)

        prompt_id = args.get("prompt_id")
        if not prompt_id or not isinstance(prompt_id, str):
            return {
                "success": False,
                "error": "'prompt_id' is required",
                "error_code": "MISSING_PROMPT_ID",
                "message": f"Error {action}: prompt_id is required",
            }

        try:
            report = orchestrator.query_status(prompt_id)
        except Exception as exc:
            return error_result(action, exc, error_code="STATUS_FAILED")

        if report.status == JobStatus.RUNNING:
            return {
                "success": True,
                "status": report.status.value,
                "message": "Job Status: Running\nThe job is still being processed.",
            }

        payload = report.result.to_payload()
        return {
            "success": True,
            "status": report.status.value,
            "cached": report.cached,
            "result": payload,
            "message": f"Job Status: Complete\n{json.dumps(payload, indent=2)}",
        }


class GetJobHistoryTool(Tool):
    """List stored jobs as last written; no status refresh."""

    name = "getJobHistory"
    description = "Retrieve the list of jobs submitted to this server."
    parameters = [
        ToolParameter(
            "limit",
            "integer",
            f"Maximum number of jobs to return (default: {DEFAULT_HISTORY_LIMIT})",
            required=False,
        ),
    ]

    def execute(self, args: Dict[str, Any], **kwargs: Any) -> Dict[str, Any]:
        action = "retrieving job history"
        orchestrator = kwargs.get("orchestrator")
        if orchestrator is None:
            return missing_orchestrator(action)

        limit = args.get("limit")
        if limit is None:
            limit = DEFAULT_HISTORY_LIMIT
        if isinstance(limit, bool) or not isinstance(limit, int):
            return {
                "success": False,
                "error": "'limit' must be an integer",
                "error_code": "INVALID_LIMIT",
                "message": f"Error {action}: limit must be an integer",
            }

        try:
            jobs = orchestrator.history(limit)
        except Exception as exc:
            return error_result(action, exc, error_code="HISTORY_FAILED")

        payload = [job.to_payload() for job in jobs]
        return {
            "success": True,
            "count": len(payload),
            "jobs": payload,
            "message": f"Found {len(payload)} jobs:\n{json.dumps(payload, indent=2)}",
        }


class HealthCheckTool(Tool):
    name = "healthCheck"
    description = "Check if ComfyUI server is accessible and healthy"
    parameters = []

    def execute(self, args: Dict[str, Any], **kwargs: Any) -> Dict[str, Any]:
        orchestrator = kwargs.get("orchestrator")
        if orchestrator is None:
            return missing_orchestrator("checking health")

        report = orchestrator.health()
        if not report.reachable:
            return {
                "success": False,
                "healthy": False,
                "error": report.error,
                "message": f"ComfyUI Status: Unreachable\nError: {report.error}",
            }

        if not report.healthy:
            message = "ComfyUI Status: Unhealthy"
        elif report.stats is None:
            message = "ComfyUI Status: Healthy\nSystem stats available but could not parse response"
        else:
            message = f"ComfyUI Status: Healthy\nSystem Stats: {json.dumps(report.stats, indent=2)}"
        return {
            "success": True,
            "healthy": report.healthy,
            "stats": report.stats,
            "message": message,
        }

"""Job lifecycle: submit, poll, cache.

States::

    submitted --(history has image output)--> complete
        \--(no history entry yet)--> running (reported, never stored)

A job that errors is reported to the caller and never recorded, so the
store only ever holds ``submitted`` and ``complete`` records. Completed
results are served from the store without touching ComfyUI again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from comfymcp.comfy.client import ComfyUIClient, HealthReport
from comfymcp.config.settings import Settings
from comfymcp.core.document import Document
from comfymcp.core.exceptions import ConfigurationError, NoImageOutputError
from comfymcp.core.models import Job, JobResult, JobStatus
from comfymcp.storage.jobs import JobStore
from comfymcp.storage.repository import SQLiteKeyValueStore
from comfymcp.workflows.classifier import classify_text_nodes, select_prompt_target
from comfymcp.workflows.injector import write_text_slot
from comfymcp.workflows.registry import WorkflowRegistry

logger = logging.getLogger("comfymcp.jobs")

DEFAULT_HISTORY_LIMIT = 10


@dataclass(frozen=True)
class StatusReport:
    prompt_id: str
    status: JobStatus
    result: Optional[JobResult] = None
    cached: bool = False


class JobOrchestrator:
    """Coordinates the workflow catalog, ComfyUI and the job store."""

    def __init__(
        self,
        registry: WorkflowRegistry,
        client: ComfyUIClient,
        store: JobStore,
        *,
        default_workflow_id: str = "w1",
    ):
        self.registry = registry
        self.client = client
        self.store = store
        self.default_workflow_id = default_workflow_id

    @classmethod
    def from_settings(cls, settings: Settings) -> "JobOrchestrator":
        registry = WorkflowRegistry.default(settings.workflows_dir)
        if settings.default_workflow_id not in registry:
            raise ConfigurationError(
                f"Default workflow {settings.default_workflow_id!r} is not in the catalog",
                context={"available": registry.ids()},
            )
        return cls(
            registry,
            ComfyUIClient(settings.comfyui_url, timeout=settings.request_timeout),
            JobStore(SQLiteKeyValueStore(settings.jobs_db_path)),
            default_workflow_id=settings.default_workflow_id,
        )

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def prepare_submission(
        self,
        workflow_uri: Optional[str] = None,
        prompt_text: Optional[str] = None,
    ) -> Document:
        """Resolve the workflow and write ``prompt_text`` into its prompt node."""
        if workflow_uri:
            graph = self.registry.resolve_uri(workflow_uri)
        else:
            graph = self.registry.resolve(self.default_workflow_id)

        if not prompt_text:
            return graph

        target = select_prompt_target(classify_text_nodes(graph))
        if target is None:
            logger.warning(
                "Workflow %s has no text-encode nodes; submitting without prompt text",
                workflow_uri or self.default_workflow_id,
            )
            return graph
        logger.debug("Injecting prompt into node %s (%s)", target.id, target.kind.value)
        return write_text_slot(graph, target.id, target.slot, prompt_text)

    def submit(
        self,
        workflow_uri: Optional[str] = None,
        prompt_text: Optional[str] = None,
    ) -> Job:
        graph = self.prepare_submission(workflow_uri, prompt_text)
        prompt_id = self.client.submit_prompt(graph.to_dict())
        job = Job(prompt_id=prompt_id, status=JobStatus.SUBMITTED, prompt_text=prompt_text)
        return self.store.create(job)

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    def query_status(self, prompt_id: str) -> StatusReport:
        stored = self.store.get(prompt_id)
        if stored is not None and stored.is_complete:
            return StatusReport(prompt_id, JobStatus.COMPLETE, stored.result, cached=True)

        entry = self.client.get_history(prompt_id)
        if entry is None:
            return StatusReport(prompt_id, JobStatus.RUNNING)

        image = first_image(entry)
        if image is None:
            raise NoImageOutputError("No images found in job output", context={"prompt_id": prompt_id})

        result = JobResult.from_image(
            image,
            view_url=self.client.view_url(
                str(image["filename"]),
                image.get("type") or "output",
                image.get("subfolder") or "",
            ),
        )
        if stored is not None:
            self.store.update(stored.completed(result))
        else:
            logger.info("Job %s completed but has no stored record; not persisting", prompt_id)
        return StatusReport(prompt_id, JobStatus.COMPLETE, result)

    # -------------------------------------------------------------------------
    # History / health
    # -------------------------------------------------------------------------

    def history(self, limit: int = DEFAULT_HISTORY_LIMIT) -> List[Job]:
        return self.store.history(limit=max(1, limit))

    def health(self) -> HealthReport:
        return self.client.system_stats()


def first_image(entry: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    """First image descriptor across the entry's outputs, in output order."""
    outputs = entry.get("outputs")
    if not isinstance(outputs, Mapping):
        return None
    for output in outputs.values():
        images = output.get("images") if isinstance(output, Mapping) else None
        if isinstance(images, list) and images:
            image = images[0]
            if isinstance(image, Mapping) and image.get("filename"):
                return dict(image)
            return None
    return None

"""Static workflow catalog.

Workflows are ComfyUI prompt graphs stored as ``<id>.json`` files. The
bundled catalog ships with the package; an extra directory can add or
override entries. Entries are loaded once and never mutated.

Workflows are addressed by URI::

    workflow://w1
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from comfymcp.core.document import Document
from comfymcp.core.exceptions import ConfigurationError, InvalidReferenceError

logger = logging.getLogger("comfymcp.workflows")

WORKFLOW_URI_PREFIX = "workflow://"

BUNDLED_CATALOG_DIR = Path(__file__).parent / "catalog"


def parse_workflow_uri(uri: str) -> Optional[str]:
    """Return the workflow id from ``workflow://{id}``, or None if malformed."""
    if not isinstance(uri, str) or not uri.startswith(WORKFLOW_URI_PREFIX):
        return None
    workflow_id = uri[len(WORKFLOW_URI_PREFIX):]
    return workflow_id or None


def format_workflow_uri(workflow_id: str) -> str:
    return f"{WORKFLOW_URI_PREFIX}{workflow_id}"


@dataclass(frozen=True)
class WorkflowEntry:
    id: str
    graph: Document

    @property
    def uri(self) -> str:
        return format_workflow_uri(self.id)


class WorkflowRegistry:
    """Read-only lookup of workflow graphs by id."""

    def __init__(self, entries: Iterable[WorkflowEntry] = ()):
        self._entries: Dict[str, WorkflowEntry] = {}
        for entry in entries:
            self._entries[entry.id] = entry

    @classmethod
    def from_directory(cls, directory: Path) -> "WorkflowRegistry":
        return cls(_load_directory(directory))

    @classmethod
    def default(cls, extra_dir: Optional[Path] = None) -> "WorkflowRegistry":
        """Bundled catalog, optionally extended or overridden by ``extra_dir``."""
        entries = _load_directory(BUNDLED_CATALOG_DIR)
        if extra_dir is not None:
            entries.extend(_load_directory(extra_dir))
        registry = cls(entries)
        logger.info("Workflow catalog loaded: %s", ", ".join(registry.ids()) or "(empty)")
        return registry

    def get(self, workflow_id: str) -> Optional[WorkflowEntry]:
        return self._entries.get(workflow_id)

    def resolve(self, workflow_id: str) -> Document:
        entry = self._entries.get(workflow_id)
        if entry is None:
            raise InvalidReferenceError(f"Workflow not found: {workflow_id}")
        return entry.graph

    def resolve_uri(self, uri: str) -> Document:
        workflow_id = parse_workflow_uri(uri)
        if workflow_id is None:
            raise InvalidReferenceError(
                f"Invalid workflow URI: {uri!r}. Expected {WORKFLOW_URI_PREFIX}<id>"
            )
        return self.resolve(workflow_id)

    def entries(self) -> List[WorkflowEntry]:
        return list(self._entries.values())

    def ids(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, workflow_id: object) -> bool:
        return workflow_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _load_directory(directory: Path) -> List[WorkflowEntry]:
    directory = Path(directory)
    if not directory.is_dir():
        raise ConfigurationError(
            "Workflow directory not found",
            context={"path": str(directory)},
        )
    return [_load_file(path) for path in sorted(directory.glob("*.json"))]


def _load_file(path: Path) -> WorkflowEntry:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(
            f"Could not load workflow {path.stem}",
            context={"path": str(path), "error": str(exc)},
        ) from exc
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Workflow {path.stem} must be a JSON object of nodes",
            context={"path": str(path)},
        )
    return WorkflowEntry(id=path.stem, graph=Document(data))

"""Shared test fixtures for job lifecycle and tool tests.

The ComfyUI client is replaced by a MagicMock with the real view_url
builder, so no test touches the network.
"""

import json
from pathlib import Path
from typing import Any, Dict
from unittest.mock import MagicMock

import pytest

from comfymcp.comfy.client import ComfyUIClient
from comfymcp.core.document import Document
from comfymcp.jobs.orchestrator import JobOrchestrator
from comfymcp.storage.jobs import JobStore
from comfymcp.storage.repository import InMemoryKeyValueStore, SQLiteKeyValueStore
from comfymcp.workflows.registry import WorkflowEntry, WorkflowRegistry

COMFY_URL = "http://comfy.test:8188"


# -----------------------------------------------------------------------------
# Graphs
# -----------------------------------------------------------------------------


@pytest.fixture
def titled_graph() -> Dict[str, Any]:
    """API-format graph with titled positive and negative encoders."""
    return {
        "4": {"class_type": "CheckpointLoaderSimple", "inputs": {"ckpt_name": "model.safetensors"}},
        "6": {
            "class_type": "CLIPTextEncode",
            "inputs": {"text": "old prompt", "clip": ["4", 1]},
            "_meta": {"title": "CLIP Text Encode (Positive)"},
        },
        "7": {
            "class_type": "CLIPTextEncode",
            "inputs": {"text": "blurry", "clip": ["4", 1]},
            "_meta": {"title": "CLIP Text Encode (Negative)"},
        },
        "9": {"class_type": "SaveImage", "inputs": {"images": ["8", 0]}},
    }


@pytest.fixture
def single_encoder_graph() -> Dict[str, Any]:
    return {
        "1": {"class_type": "CLIPTextEncode", "inputs": {"text": ""}},
        "2": {"class_type": "SaveImage", "inputs": {"filename_prefix": "out"}},
    }


@pytest.fixture
def widgets_graph() -> Dict[str, Any]:
    """UI-export graph where the prompt lives in widgets_values."""
    return {
        "12": {"type": "CLIPTextEncode", "title": "Prompt", "widgets_values": ["a house"]},
        "14": {"type": "KSampler", "widgets_values": [0, "randomize", 20]},
    }


@pytest.fixture
def no_text_graph() -> Dict[str, Any]:
    return {
        "1": {"class_type": "LoadImage", "inputs": {"image": "in.png"}},
        "2": {"class_type": "SaveImage", "inputs": {"images": ["1", 0]}},
    }


@pytest.fixture
def registry(titled_graph, single_encoder_graph, widgets_graph, no_text_graph) -> WorkflowRegistry:
    return WorkflowRegistry(
        [
            WorkflowEntry(id="titled", graph=Document(titled_graph)),
            WorkflowEntry(id="single", graph=Document(single_encoder_graph)),
            WorkflowEntry(id="widgets", graph=Document(widgets_graph)),
            WorkflowEntry(id="notext", graph=Document(no_text_graph)),
        ]
    )


@pytest.fixture
def catalog_dir(tmp_path: Path, titled_graph, widgets_graph) -> Path:
    directory = tmp_path / "catalog"
    directory.mkdir()
    (directory / "b.json").write_text(json.dumps(widgets_graph), encoding="utf-8")
    (directory / "a.json").write_text(json.dumps(titled_graph), encoding="utf-8")
    return directory


# -----------------------------------------------------------------------------
# Storage
# -----------------------------------------------------------------------------


@pytest.fixture(params=["sqlite", "memory"])
def kv_store(request):
    """Parameterized fixture that tests both key-value store implementations."""
    if request.param == "sqlite":
        return SQLiteKeyValueStore(":memory:")
    return InMemoryKeyValueStore()


@pytest.fixture
def job_store() -> JobStore:
    return JobStore(InMemoryKeyValueStore())


# -----------------------------------------------------------------------------
# ComfyUI + orchestrator
# -----------------------------------------------------------------------------


@pytest.fixture
def comfy_client() -> MagicMock:
    """Mocked ComfyUI client; view_url keeps its real behaviour."""
    real = ComfyUIClient(COMFY_URL)
    client = MagicMock(spec=ComfyUIClient)
    client.base_url = COMFY_URL
    client.view_url.side_effect = real.view_url
    client.submit_prompt.return_value = "prompt-123"
    client.get_history.return_value = None
    return client


@pytest.fixture
def orchestrator(registry, comfy_client, job_store) -> JobOrchestrator:
    return JobOrchestrator(registry, comfy_client, job_store, default_workflow_id="titled")

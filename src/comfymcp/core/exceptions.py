"""Custom exception hierarchy for the ComfyUI MCP server.

Messages are shown to the calling agent verbatim, so they never carry raw
exception text from lower layers. Diagnostic detail goes into ``context``
and the logs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ComfyMCPError(Exception):
    """Base exception type for all ComfyUI MCP errors."""

    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        if not self.context:
            return self.message
        return f"{self.message} | context={self.context}"


class ConfigurationError(ComfyMCPError):
    """Raised when configuration or the workflow catalog is invalid."""


class InvalidReferenceError(ComfyMCPError):
    """Raised for a malformed workflow URI or an unknown workflow id."""


@dataclass
class SubmissionError(ComfyMCPError):
    """Raised when ComfyUI rejects a prompt or cannot be reached at submit time."""

    status: Optional[int] = None
    body: str = ""


@dataclass
class StatusFetchError(ComfyMCPError):
    """Raised when the job history cannot be fetched or parsed."""

    status: Optional[int] = None


class NoImageOutputError(ComfyMCPError):
    """Raised when a finished job has no recognizable image output."""


class StorageError(ComfyMCPError):
    """Raised when a job record cannot be read or written."""

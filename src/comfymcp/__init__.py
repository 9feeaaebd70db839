"""ComfyUI MCP server - submit image workflows and track their results."""

from typing import TYPE_CHECKING

__version__ = "1.0.0"

__all__ = ["Settings", "JobOrchestrator"]

if TYPE_CHECKING:
    from .config.settings import Settings
    from .jobs.orchestrator import JobOrchestrator


def __getattr__(name: str):
    if name == "Settings":
        from .config.settings import Settings

        return Settings
    if name == "JobOrchestrator":
        from .jobs.orchestrator import JobOrchestrator

        return JobOrchestrator
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

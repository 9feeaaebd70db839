"""Tool registry and ComfyUI job tools."""

from .core import Tool, ToolParameter, ToolRegistry
from .discovery import build_tool_registry, discover_tool_classes
from .jobs import GetJobHistoryTool, GetJobStatusTool, HealthCheckTool, SubmitWorkflowTool
from .workflows import GetWorkflowsForSelectionTool

__all__ = [
    "Tool",
    "ToolParameter",
    "ToolRegistry",
    "build_tool_registry",
    "discover_tool_classes",
    "GetWorkflowsForSelectionTool",
    "SubmitWorkflowTool",
    "GetJobStatusTool",
    "GetJobHistoryTool",
    "HealthCheckTool",
]

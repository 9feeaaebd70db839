"""Core tool abstractions and registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from comfymcp.core.exceptions import ComfyMCPError

logger = logging.getLogger("comfymcp.tools")

UNKNOWN_ERROR = "Unknown error occurred"


@dataclass
class ToolParameter:
    name: str
    type: str
    description: str
    required: bool = True


class Tool:
    name: str
    description: str
    parameters: List[ToolParameter]

    def execute(self, args: Dict[str, Any], **kwargs: Any) -> Dict[str, Any]:
        raise NotImplementedError


class ToolRegistry:
    def __init__(self) -> None:
        self._tools: Dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        self._tools[tool.name] = tool

    def get(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools)

    def execute(self, name: str, args: Dict[str, Any], **kwargs: Any) -> Dict[str, Any]:
        tool = self._tools.get(name)
        if tool is None:
            raise ValueError(f"Unknown tool: {name}")
        logger.info("Tool call start name=%s args=%s", name, args)
        result = tool.execute(args, **kwargs)
        logger.info("Tool call complete name=%s success=%s", name, result.get("success"))
        return result


def error_result(action: str, exc: Exception, *, error_code: str) -> Dict[str, Any]:
    """Render an exception as a failed tool result.

    Only messages of our own exceptions reach the caller; anything else is
    logged with its traceback and reported generically.
    """
    if isinstance(exc, ComfyMCPError):
        logger.warning("%s failed: %s", action, exc)
        message = exc.message
    else:
        logger.exception("%s failed unexpectedly", action)
        message = UNKNOWN_ERROR
    return {
        "success": False,
        "error": message,
        "error_code": error_code,
        "message": f"Error {action}: {message}",
    }


def missing_orchestrator(action: str) -> Dict[str, Any]:
    return {
        "success": False,
        "error": "No orchestrator provided",
        "error_code": "NO_ORCHESTRATOR",
        "message": f"Error {action}: server is not configured",
    }

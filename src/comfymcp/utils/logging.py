"""Logging helpers for the MCP server."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path
from typing import Optional

from .paths import data_dir

_CONFIGURED = False


def setup_logging(log_path: Optional[Path] = None) -> Path:
    """Configure logging to file handlers, one extra file per noisy channel."""
    global _CONFIGURED
    prefix = os.environ.get("COMFYMCP_LOG_PREFIX", "comfymcp").strip() or "comfymcp"
    resolved = _resolve_log_path(log_path, prefix)
    if _CONFIGURED:
        return resolved

    resolved.parent.mkdir(parents=True, exist_ok=True)

    level_name = os.environ.get("COMFYMCP_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    rotate_bytes = int(os.environ.get("COMFYMCP_LOG_ROTATE_BYTES", "0"))
    backup_count = int(os.environ.get("COMFYMCP_LOG_BACKUP_COUNT", "3"))

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s"
    )

    root_handler = _build_handler(
        resolved,
        rotate_bytes=rotate_bytes,
        backup_count=backup_count,
    )
    root_handler.setFormatter(formatter)

    tool_handler = _build_handler(
        resolved.parent / f"{prefix}_tool_calls.log",
        rotate_bytes=rotate_bytes,
        backup_count=backup_count,
    )
    tool_handler.setFormatter(formatter)

    comfy_handler = _build_handler(
        resolved.parent / f"{prefix}_comfy.log",
        rotate_bytes=rotate_bytes,
        backup_count=backup_count,
    )
    comfy_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(root_handler)
    if os.environ.get("COMFYMCP_LOG_STDOUT", "").lower() in {"1", "true", "yes"}:
        # stdout carries the protocol for the stdio transport, so log to stderr.
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    # Sub-channels also reach the main log through propagation.
    _attach_logger("comfymcp.tools", level, tool_handler)
    _attach_logger("comfymcp.mcp", level, tool_handler)
    _attach_logger("comfymcp.comfy", level, comfy_handler)

    _CONFIGURED = True
    logging.getLogger(__name__).info("Logging initialized: %s", resolved)
    return resolved


def _resolve_log_path(log_path: Optional[Path], prefix: str) -> Path:
    if log_path is not None:
        return log_path
    env_path = os.environ.get("COMFYMCP_LOG_FILE")
    if env_path:
        return Path(env_path)
    return data_dir() / "logs" / f"{prefix}.log"


def _attach_logger(name: str, level: int, handler: logging.Handler) -> None:
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.addHandler(handler)


def _build_handler(path: Path, *, rotate_bytes: int, backup_count: int) -> logging.Handler:
    if rotate_bytes > 0:
        return RotatingFileHandler(
            path,
            maxBytes=rotate_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    return logging.FileHandler(
        path,
        encoding="utf-8",
    )

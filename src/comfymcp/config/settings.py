"""Application settings.

All configuration is sourced from environment variables (and optionally `.env`).
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from comfymcp.utils.paths import data_dir as _default_data_dir


class Settings(BaseSettings):
    """Typed environment-backed settings for the ComfyUI MCP server."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    comfyui_url: str = Field(
        default="http://127.0.0.1:8188",
        validation_alias=AliasChoices("COMFYUI_URL", "COMFYUI_BASE_URL"),
    )
    request_timeout: float = Field(default=30.0, validation_alias="COMFYUI_TIMEOUT")

    # Workflow catalog
    default_workflow_id: str = Field(default="w1", validation_alias="COMFYMCP_DEFAULT_WORKFLOW")
    workflows_dir: Optional[Path] = Field(default=None, validation_alias="COMFYMCP_WORKFLOWS_DIR")

    # Local storage
    data_dir: Path = Field(default_factory=_default_data_dir, validation_alias="COMFYMCP_DATA_DIR")
    jobs_db: Optional[Path] = Field(default=None, validation_alias="COMFYMCP_JOBS_DB")

    # MCP server
    mcp_host: str = Field(default="127.0.0.1", validation_alias="COMFYMCP_HOST")
    mcp_port: int = Field(default=8000, validation_alias="COMFYMCP_PORT")

    @field_validator("comfyui_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @property
    def jobs_db_path(self) -> Path:
        return self.jobs_db or self.data_dir / "jobs.sqlite"

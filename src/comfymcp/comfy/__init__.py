"""ComfyUI server access."""

from comfymcp.comfy.client import ComfyUIClient, HealthReport

__all__ = ["ComfyUIClient", "HealthReport"]

"""ComfyUI HTTP client.

Thin blocking wrapper over the ComfyUI server API:

- POST /prompt          queue a prompt graph
- GET  /history/{id}    finished-job outputs (absent while still running)
- GET  /system_stats    liveness
- GET  /view            asset download (only the URL is built here)

Usage:
    client = ComfyUIClient("http://127.0.0.1:8188")
    prompt_id = client.submit_prompt(graph)
    entry = client.get_history(prompt_id)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote, urlencode

import requests

from comfymcp.core.exceptions import StatusFetchError, SubmissionError

logger = logging.getLogger("comfymcp.comfy")

# Request timeout in seconds
REQUEST_TIMEOUT = 30

# Response bodies are echoed into error context; keep them short.
MAX_ERROR_BODY = 2000


@dataclass
class HealthReport:
    """Result of a /system_stats probe."""

    reachable: bool
    healthy: bool
    status_code: Optional[int] = None
    stats: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class ComfyUIClient:
    """Client for the ComfyUI server API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: Optional[float] = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json"})

    def submit_prompt(self, graph: Dict[str, Any]) -> str:
        """Queue a prompt graph and return the backend-assigned prompt id.

        Raises:
            SubmissionError: If the request fails or the response is unusable
        """
        url = f"{self.base_url}/prompt"
        try:
            response = self._session.post(url, json={"prompt": graph}, timeout=self.timeout)
        except requests.exceptions.Timeout:
            raise SubmissionError("Request to ComfyUI timed out")
        except requests.exceptions.ConnectionError:
            raise SubmissionError("Could not connect to ComfyUI")
        except requests.exceptions.RequestException as e:
            logger.warning("ComfyUI /prompt request failed: %s", e)
            raise SubmissionError("ComfyUI request failed")

        if not response.ok:
            body = (response.text or "")[:MAX_ERROR_BODY]
            logger.warning("ComfyUI rejected prompt status=%s body=%s", response.status_code, body)
            raise SubmissionError(
                f"Workflow submission failed: {response.status_code}",
                status=response.status_code,
                body=body,
            )

        data = _json_or_none(response)
        prompt_id = data.get("prompt_id") if isinstance(data, dict) else None
        if not prompt_id:
            raise SubmissionError(
                "ComfyUI response did not include a prompt_id",
                status=response.status_code,
                body=(response.text or "")[:MAX_ERROR_BODY],
            )
        logger.info("Prompt queued prompt_id=%s number=%s", prompt_id, data.get("number"))
        return str(prompt_id)

    def get_history(self, prompt_id: str) -> Optional[Dict[str, Any]]:
        """Fetch the history entry for ``prompt_id``.

        Returns:
            The entry, or None when ComfyUI has no history for the id yet

        Raises:
            StatusFetchError: If the request fails or the response is malformed
        """
        url = f"{self.base_url}/history/{quote(prompt_id, safe='')}"
        try:
            response = self._session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout:
            raise StatusFetchError("Request to ComfyUI timed out")
        except requests.exceptions.ConnectionError:
            raise StatusFetchError("Could not connect to ComfyUI")
        except requests.exceptions.RequestException as e:
            logger.warning("ComfyUI /history request failed prompt_id=%s: %s", prompt_id, e)
            raise StatusFetchError("ComfyUI request failed")

        if not response.ok:
            raise StatusFetchError(
                f"Failed to fetch job status: {response.status_code}",
                status=response.status_code,
            )

        data = _json_or_none(response)
        if not isinstance(data, dict):
            raise StatusFetchError("Malformed history response from ComfyUI")
        entry = data.get(prompt_id)
        if entry is None:
            return None
        if not isinstance(entry, dict):
            raise StatusFetchError("Malformed history response from ComfyUI")
        return entry

    def system_stats(self) -> HealthReport:
        """Probe /system_stats. Never raises."""
        url = f"{self.base_url}/system_stats"
        try:
            response = self._session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout:
            return HealthReport(reachable=False, healthy=False, error="Request to ComfyUI timed out")
        except requests.exceptions.RequestException:
            return HealthReport(reachable=False, healthy=False, error="Could not connect to ComfyUI")

        if not response.ok:
            return HealthReport(reachable=True, healthy=False, status_code=response.status_code)
        stats = _json_or_none(response)
        return HealthReport(
            reachable=True,
            healthy=True,
            status_code=response.status_code,
            stats=stats if isinstance(stats, dict) else None,
        )

    def view_url(self, filename: str, type_: str = "output", subfolder: str = "") -> str:
        """Build the asset URL; parameter order is filename, type, subfolder."""
        params = [("filename", filename), ("type", type_)]
        if subfolder:
            params.append(("subfolder", subfolder))
        return f"{self.base_url}/view?{urlencode(params)}"


def _json_or_none(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None

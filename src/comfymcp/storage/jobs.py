"""Typed job records on top of a key-value store."""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from pydantic import ValidationError

from comfymcp.core.exceptions import StorageError
from comfymcp.core.models import Job

logger = logging.getLogger("comfymcp.storage")

JOB_KEY_PREFIX = "job:"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def put(self, key: str, value: str) -> None: ...

    def list(self, prefix: str = "", *, limit: Optional[int] = None, reverse: bool = False) -> list: ...


def job_key(prompt_id: str) -> str:
    return f"{JOB_KEY_PREFIX}{prompt_id}"


class JobStore:
    """Persist Job records under ``job:{prompt_id}``."""

    def __init__(self, kv: KeyValueStore):
        self._kv = kv

    def create(self, job: Job) -> Job:
        self._kv.put(job_key(job.prompt_id), job.model_dump_json(by_alias=True))
        logger.info("Job stored prompt_id=%s status=%s", job.prompt_id, job.status.value)
        return job

    def get(self, prompt_id: str) -> Optional[Job]:
        raw = self._kv.get(job_key(prompt_id))
        if raw is None:
            return None
        return self._decode(job_key(prompt_id), raw)

    def update(self, job: Job) -> Job:
        """Overwrite the stored record; last writer wins."""
        self._kv.put(job_key(job.prompt_id), job.model_dump_json(by_alias=True))
        logger.info("Job updated prompt_id=%s status=%s", job.prompt_id, job.status.value)
        return job

    def history(self, limit: int = 10) -> List[Job]:
        """Most recent keys first; key order, not creation order."""
        rows = self._kv.list(prefix=JOB_KEY_PREFIX, limit=limit, reverse=True)
        return [self._decode(key, raw) for key, raw in rows]

    def _decode(self, key: str, raw: str) -> Job:
        try:
            return Job.model_validate_json(raw)
        except ValidationError as exc:
            logger.error("Corrupt job record %s: %s", key, exc)
            raise StorageError("Stored job record is corrupt", context={"key": key}) from exc

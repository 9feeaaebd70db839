"""Tests for Job and JobResult models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from comfymcp.core.models import Job, JobResult, JobStatus


def _result(**overrides):
    image = {"filename": "a.png", "subfolder": "", "type": "output"}
    image.update(overrides)
    return JobResult.from_image(image, view_url="http://x/view?filename=a.png&type=output")


class TestJobResult:
    def test_full_path_without_subfolder(self):
        assert _result().full_path == "a.png"

    def test_full_path_with_subfolder(self):
        assert _result(subfolder="batch").full_path == "batch/a.png"

    def test_defaults(self):
        result = JobResult.from_image({"filename": "b.png"}, view_url="u")
        assert result.subfolder == ""
        assert result.type == "output"

    def test_payload_uses_wire_keys(self):
        payload = _result().to_payload()
        assert payload == {
            "status": "complete",
            "filename": "a.png",
            "subfolder": "",
            "type": "output",
            "fullPath": "a.png",
            "viewUrl": "http://x/view?filename=a.png&type=output",
        }


class TestJob:
    def test_new_job_is_submitted(self):
        job = Job(prompt_id="p1", prompt_text="a cat")
        assert job.status == JobStatus.SUBMITTED
        assert job.result is None
        assert job.created_at

    def test_result_requires_complete(self):
        with pytest.raises(ValidationError):
            Job(prompt_id="p1", status=JobStatus.SUBMITTED, result=_result())

    def test_complete_requires_result(self):
        with pytest.raises(ValidationError):
            Job(prompt_id="p1", status=JobStatus.COMPLETE)

    def test_completed_copy(self):
        job = Job(prompt_id="p1")
        done = job.completed(_result())
        assert done.is_complete
        assert done.created_at == job.created_at
        assert job.status == JobStatus.SUBMITTED

    def test_json_round_trip_keeps_result(self):
        done = Job(prompt_id="p1").completed(_result(subfolder="s"))
        restored = Job.model_validate_json(done.model_dump_json(by_alias=True))
        assert restored == done

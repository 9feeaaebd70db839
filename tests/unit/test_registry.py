"""Tests for the workflow catalog and workflow URIs."""

from __future__ import annotations

import pytest

from comfymcp.core.exceptions import ConfigurationError, InvalidReferenceError
from comfymcp.workflows.registry import (
    WorkflowRegistry,
    format_workflow_uri,
    parse_workflow_uri,
)


class TestWorkflowUri:
    @pytest.mark.parametrize("workflow_id", ["w1", "portrait-v2", "a/b", "with space"])
    def test_round_trip(self, workflow_id):
        assert parse_workflow_uri(format_workflow_uri(workflow_id)) == workflow_id

    @pytest.mark.parametrize(
        "uri",
        ["not-a-workflow-uri", "workflow://", "workflow:/w1", "WORKFLOW://w1", "http://w1", ""],
    )
    def test_invalid(self, uri):
        assert parse_workflow_uri(uri) is None


class TestRegistry:
    def test_resolve(self, registry, titled_graph):
        assert registry.resolve("titled") == titled_graph

    def test_resolve_unknown(self, registry):
        with pytest.raises(InvalidReferenceError) as excinfo:
            registry.resolve("missing")
        assert excinfo.value.message == "Workflow not found: missing"

    def test_resolve_uri(self, registry, widgets_graph):
        assert registry.resolve_uri("workflow://widgets") == widgets_graph

    def test_resolve_malformed_uri(self, registry):
        with pytest.raises(InvalidReferenceError):
            registry.resolve_uri("widgets")

    def test_entries_and_uris(self, registry):
        assert registry.ids() == ["titled", "single", "widgets", "notext"]
        assert [entry.uri for entry in registry.entries()][0] == "workflow://titled"
        assert "single" in registry
        assert len(registry) == 4

    def test_entries_are_read_only(self, registry):
        graph = registry.resolve("titled")
        with pytest.raises(TypeError):
            graph["6"]["inputs"]["text"] = "changed"


class TestCatalogLoading:
    def test_from_directory_sorted_by_id(self, catalog_dir, titled_graph):
        registry = WorkflowRegistry.from_directory(catalog_dir)
        assert registry.ids() == ["a", "b"]
        assert registry.resolve("a") == titled_graph

    def test_bundled_catalog(self):
        registry = WorkflowRegistry.default()
        assert registry.ids() == ["w1", "w2", "w3"]
        assert registry.resolve("w1")["45"]["class_type"] == "CLIPTextEncode"

    def test_extra_dir_adds_and_overrides(self, tmp_path):
        (tmp_path / "w2.json").write_text('{"1": {"class_type": "SaveImage"}}', encoding="utf-8")
        (tmp_path / "mine.json").write_text("{}", encoding="utf-8")

        registry = WorkflowRegistry.default(tmp_path)

        assert set(registry.ids()) == {"w1", "w2", "w3", "mine"}
        assert list(registry.resolve("w2")) == ["1"]

    def test_invalid_json(self, tmp_path):
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            WorkflowRegistry.from_directory(tmp_path)

    def test_non_object_graph(self, tmp_path):
        (tmp_path / "list.json").write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            WorkflowRegistry.from_directory(tmp_path)

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ConfigurationError):
            WorkflowRegistry.from_directory(tmp_path / "nope")

"""Job lifecycle orchestration."""

from comfymcp.jobs.orchestrator import JobOrchestrator, StatusReport

__all__ = ["JobOrchestrator", "StatusReport"]

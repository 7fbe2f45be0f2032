"""Terminal rendering of workflow progress and reports."""

from deployforge.monitor.renderer import WorkflowRenderer

__all__ = ["WorkflowRenderer"]

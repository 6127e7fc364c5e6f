"""Workflow status indicators for GitHub Actions repositories."""

__version__ = "1.0.0"

"""Rocket design data: vehicle model, project files, reports and a geometry analysis cache."""

__version__ = "0.1.0"

__all__ = ["geometry_cache", "model", "project_io", "reports"]
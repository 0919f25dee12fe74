"""Configuration module: settings and the inspection logging gate."""

from inspector.config.settings import InspectionConfig, InspectorSettings

__all__ = [
    "InspectionConfig",
    "InspectorSettings",
]

"""Project detection, command templates and the script runner."""

from morning_pod.project.detector import ProjectDetector
from morning_pod.project.loader import ConfigLoader
from morning_pod.project.templates import DEFAULT_TEMPLATES, get_template_for_project
from morning_pod.project.types import (
    ProjectDetection,
    ProjectFeatures,
    ProjectTemplate,
    ScriptCategory,
    ScriptCommand,
    ScriptConfig,
)

__all__ = [
    "ProjectDetector",
    "ConfigLoader",
    "DEFAULT_TEMPLATES",
    "get_template_for_project",
    "ProjectDetection",
    "ProjectFeatures",
    "ProjectTemplate",
    "ScriptCategory",
    "ScriptCommand",
    "ScriptConfig",
]

"""Script runner configuration loading."""

import json
import logging
from dataclasses import replace
from pathlib import Path

from morning_pod.project.detector import ProjectDetector, build_directory, lockfile_name
from morning_pod.project.templates import get_template_for_project
from morning_pod.project.types import ProjectDetection, ScriptConfig

logger = logging.getLogger(__name__)

# User config files, first readable one wins
CONFIG_FILES = [
    "script-runner.config.json",
    ".scriptrunner.json",
    ".scriptrunnerrc.json",
]


class ConfigLoader:
    """
    Loads script runner configuration for a project directory.

    A user config file takes precedence; otherwise the project is detected
    and the matching template is used. Placeholders in commands are
    substituted either way.
    """

    def __init__(self, cwd: Path | None = None, detector: ProjectDetector | None = None) -> None:
        self.cwd = cwd or Path.cwd()
        self.detector = detector or ProjectDetector(self.cwd)

    def load_config(self) -> ScriptConfig:
        """Load configuration from a user file or the detected template."""
        user_config = self.load_user_config()
        if user_config is not None:
            return self.process_config(user_config)

        detection = self.detector.detect()
        template = get_template_for_project(detection)
        logger.debug(f"Using {template.name} template")

        return self.process_config(ScriptConfig(
            categories=template.categories,
            project_name=self.detector.project_name(),
            project_type=detection.project_type,
            package_manager=detection.package_manager,
            global_env=dict(template.global_env),
        ))

    def load_user_config(self) -> ScriptConfig | None:
        """Load the first readable user config file, if any."""
        for filename in CONFIG_FILES:
            path = self.cwd / filename
            if not path.exists():
                continue
            try:
                with open(path, encoding="utf-8") as f:
                    data = json.load(f)
                config = ScriptConfig.from_dict(data)
                logger.info(f"Loaded script config from {path}")
                return config
            except (ValueError, OSError, KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Failed to load config from {filename}: {e}")

        return None

    def process_config(self, config: ScriptConfig) -> ScriptConfig:
        """Return a copy of the config with command placeholders substituted."""
        detection = self.detector.detect()
        categories = [
            replace(
                category,
                commands=[
                    replace(command, command=self.replace_placeholders(command.command, detection))
                    for command in category.commands
                ],
            )
            for category in config.categories
        ]
        return replace(config, categories=categories)

    def replace_placeholders(self, command: str, detection: ProjectDetection) -> str:
        """Substitute {pm}, {lockfile}, {srcDir}, {buildDir}, {configExt} and {testExt}."""
        placeholders = {
            "{pm}": detection.package_manager,
            "{lockfile}": lockfile_name(detection.package_manager),
            "{srcDir}": self.detector.source_directory(),
            "{buildDir}": build_directory(detection.project_type),
            "{configExt}": ".ts" if detection.has_typescript else ".js",
            "{testExt}": ".test.ts" if detection.has_typescript else ".test.js",
        }

        for placeholder, value in placeholders.items():
            command = command.replace(placeholder, value)
        return command

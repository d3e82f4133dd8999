"""Project detection from package.json and files on disk."""

import json
import logging
from pathlib import Path
from typing import Any

from morning_pod.project.types import (
    PackageManager,
    ProjectDetection,
    ProjectFeatures,
    ProjectType,
)

logger = logging.getLogger(__name__)

# Lockfile -> package manager, checked in order
LOCKFILES: list[tuple[str, str]] = [
    ("bun.lockb", PackageManager.BUN),
    ("pnpm-lock.yaml", PackageManager.PNPM),
    ("yarn.lock", PackageManager.YARN),
]

LOCKFILE_NAMES: dict[str, str] = {
    PackageManager.NPM: "package-lock.json",
    PackageManager.YARN: "yarn.lock",
    PackageManager.PNPM: "pnpm-lock.yaml",
    PackageManager.BUN: "bun.lockb",
}

BUILD_DIRECTORIES: dict[str, str] = {
    ProjectType.NEXTJS: ".next",
    ProjectType.REACT: "build",
    ProjectType.NODE: "dist",
}

NODE_SERVER_PACKAGES = ("express", "fastify", "koa")
DATABASE_PACKAGES = ("prisma", "drizzle", "mongoose", "typeorm")
TESTING_PACKAGES = ("jest", "vitest", "playwright", "cypress")
ESLINT_CONFIGS = (".eslintrc.js", ".eslintrc.json", "eslint.config.js")


def lockfile_name(package_manager: str) -> str:
    return LOCKFILE_NAMES.get(package_manager, LOCKFILE_NAMES[PackageManager.NPM])


def build_directory(project_type: str) -> str:
    return BUILD_DIRECTORIES.get(project_type, "dist")


def _mapping(value: Any) -> dict[str, Any]:
    """Dependency table from package.json; anything but an object counts as empty."""
    return value if isinstance(value, dict) else {}


class ProjectDetector:
    """Detects project type, package manager and tooling for a directory."""

    def __init__(self, cwd: Path | None = None) -> None:
        self.cwd = cwd or Path.cwd()
        self._detection: ProjectDetection | None = None
        self._package_json: dict[str, Any] | None = None

    def detect(self) -> ProjectDetection:
        """Detect the project once and cache the result."""
        if self._detection is not None:
            return self._detection

        package_json = self._read_package_json()
        deps = _mapping(package_json.get("dependencies"))
        dev_deps = _mapping(package_json.get("devDependencies"))

        project_type, framework = self._detect_type(deps, dev_deps)
        self._detection = ProjectDetection(
            project_type=project_type,
            package_manager=self.detect_package_manager(),
            has_typescript=(
                self._exists("tsconfig.json")
                or bool(dev_deps.get("typescript"))
                or bool(deps.get("typescript"))
            ),
            features=self._detect_features(deps, dev_deps),
            framework=framework,
        )

        logger.info(
            f"Detected {project_type} project "
            f"({self._detection.package_manager}, TypeScript: {self._detection.has_typescript})"
        )
        return self._detection

    def detect_package_manager(self) -> str:
        """Detect the package manager from lockfiles."""
        for filename, manager in LOCKFILES:
            if self._exists(filename):
                return manager
        return PackageManager.NPM

    def project_name(self) -> str:
        """Project name from package.json, falling back to the directory name."""
        name = self._read_package_json().get("name")
        if isinstance(name, str) and name:
            return name
        return self.cwd.resolve().name or "project"

    def source_directory(self) -> str:
        for candidate in ("src", "lib", "app"):
            if (self.cwd / candidate).is_dir():
                return candidate
        return "."

    def _detect_type(
        self,
        deps: dict[str, Any],
        dev_deps: dict[str, Any],
    ) -> tuple[str, str | None]:
        if deps.get("next") or dev_deps.get("next"):
            return ProjectType.NEXTJS, "Next.js"

        if deps.get("react") or dev_deps.get("react"):
            return ProjectType.REACT, "React"

        if (
            any(deps.get(pkg) for pkg in NODE_SERVER_PACKAGES)
            or self._exists("server.js")
            or self._exists("index.js")
        ):
            return ProjectType.NODE, "Node.js"

        return ProjectType.GENERIC, None

    def _detect_features(
        self,
        deps: dict[str, Any],
        dev_deps: dict[str, Any],
    ) -> ProjectFeatures:
        return ProjectFeatures(
            has_database=any(deps.get(pkg) for pkg in DATABASE_PACKAGES),
            has_linting=(
                bool(dev_deps.get("eslint"))
                or any(self._exists(name) for name in ESLINT_CONFIGS)
            ),
            has_testing=any(dev_deps.get(pkg) for pkg in TESTING_PACKAGES),
            has_storybook=bool(dev_deps.get("storybook") or dev_deps.get("@storybook/react")),
            has_tailwind=(
                bool(deps.get("tailwindcss"))
                or bool(dev_deps.get("tailwindcss"))
                or self._exists("tailwind.config.js")
            ),
        )

    def _read_package_json(self) -> dict[str, Any]:
        """Read package.json, treating a missing or malformed file as empty."""
        if self._package_json is not None:
            return self._package_json

        path = self.cwd / "package.json"
        data: dict[str, Any] = {}
        if path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    data = loaded
                else:
                    logger.warning(f"Ignoring {path}: expected a JSON object")
            except (ValueError, OSError) as e:
                logger.warning(f"Failed to parse {path}: {e}")

        self._package_json = data
        return data

    def _exists(self, name: str) -> bool:
        return (self.cwd / name).exists()

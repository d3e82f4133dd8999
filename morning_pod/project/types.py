"""Records for script categories, project templates and project detection."""

from dataclasses import dataclass, field
from typing import Any


class ProjectType:
    """Detected project kinds."""

    NEXTJS = "nextjs"
    REACT = "react"
    NODE = "node"
    GENERIC = "generic"

    ALL = (NEXTJS, REACT, NODE, GENERIC)


class PackageManager:
    """Supported JavaScript package managers."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"
    BUN = "bun"

    ALL = (NPM, YARN, PNPM, BUN)


def _string_env(value: Any) -> dict[str, str]:
    # Subprocess environments only accept strings
    if not value:
        return {}
    return {str(key): str(item) for key, item in dict(value).items()}


@dataclass
class ScriptCommand:
    """A runnable command inside a category."""

    name: str
    command: str
    description: str
    category: str | None = None
    flags: list[str] = field(default_factory=list)
    examples: list[str] = field(default_factory=list)
    requires_confirmation: bool = False
    env: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScriptCommand":
        return cls(
            name=data["name"],
            command=data["command"],
            description=data.get("description", ""),
            category=data.get("category"),
            flags=list(data.get("flags", [])),
            examples=list(data.get("examples", [])),
            requires_confirmation=data.get("requiresConfirmation", False),
            env=_string_env(data.get("env")),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "command": self.command,
            "description": self.description,
        }
        if self.category:
            data["category"] = self.category
        if self.flags:
            data["flags"] = self.flags
        if self.examples:
            data["examples"] = self.examples
        if self.requires_confirmation:
            data["requiresConfirmation"] = True
        if self.env:
            data["env"] = self.env
        return data


@dataclass
class ScriptCategory:
    """A named group of commands (dev, test, quality, db, ...)."""

    name: str
    description: str
    icon: str
    commands: list[ScriptCommand] = field(default_factory=list)
    color: str | None = None
    allow_parallel: bool = False

    def find_command(self, name: str) -> ScriptCommand | None:
        """Case-insensitive command lookup."""
        for command in self.commands:
            if command.name.lower() == name.lower():
                return command
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScriptCategory":
        return cls(
            name=data["name"],
            description=data.get("description", ""),
            icon=data.get("icon", ""),
            commands=[ScriptCommand.from_dict(c) for c in data.get("commands", [])],
            color=data.get("color"),
            allow_parallel=data.get("allowParallel", False),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "commands": [c.to_dict() for c in self.commands],
        }
        if self.color:
            data["color"] = self.color
        if self.allow_parallel:
            data["allowParallel"] = True
        return data


@dataclass
class ScriptConfig:
    """Resolved script runner configuration."""

    categories: list[ScriptCategory] = field(default_factory=list)
    project_name: str | None = None
    project_type: str | None = None
    package_manager: str | None = None
    global_env: dict[str, str] = field(default_factory=dict)

    def find_category(self, name: str) -> ScriptCategory | None:
        """Case-insensitive category lookup."""
        for category in self.categories:
            if category.name.lower() == name.lower():
                return category
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScriptConfig":
        return cls(
            categories=[ScriptCategory.from_dict(c) for c in data.get("categories", [])],
            project_name=data.get("projectName"),
            project_type=data.get("projectType"),
            package_manager=data.get("packageManager"),
            global_env=_string_env(data.get("globalEnv")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "projectName": self.project_name,
            "projectType": self.project_type,
            "packageManager": self.package_manager,
            "categories": [c.to_dict() for c in self.categories],
            "globalEnv": self.global_env,
        }


@dataclass
class ProjectFeatures:
    has_database: bool = False
    has_linting: bool = False
    has_testing: bool = False
    has_storybook: bool = False
    has_tailwind: bool = False


@dataclass
class ProjectDetection:
    """What was learned about a project from its manifest and files."""

    project_type: str
    package_manager: str
    has_typescript: bool = False
    features: ProjectFeatures = field(default_factory=ProjectFeatures)
    framework: str | None = None


@dataclass
class ProjectTemplate:
    """Command categories generated for a project type."""

    name: str
    template_type: str
    description: str
    package_manager: str
    categories: list[ScriptCategory] = field(default_factory=list)
    global_env: dict[str, str] = field(default_factory=dict)

    def category_names(self) -> list[str]:
        return [c.name for c in self.categories]

"""Script runner for project command categories."""

import logging
import os
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path

import psutil

from morning_pod.project.loader import ConfigLoader
from morning_pod.project.types import ScriptCategory, ScriptCommand, ScriptConfig

logger = logging.getLogger(__name__)

# Seconds to wait for a terminated command tree before killing it
TERMINATE_TIMEOUT = 3.0

ALL_ACTION = "--all"

# Category shortcut flags, e.g. `script-runner test --e2e`
CATEGORY_FLAG_MAP: dict[str, dict[str, str]] = {
    "db": {
        "--generate": "generate",
        "--migrate": "migrate",
        "--seed": "seed",
        "--studio": "studio",
    },
    "deps": {
        "--audit": "audit",
        "--audit-fix": "audit:fix",
        "--check": "check",
        "--doctor": "doctor",
        "--major": "update:major",
        "--minor": "update:minor",
        "--outdated": "outdated",
        "--patch": "update:patch",
        "--safe": "update:safe",
        "--security": "security:check",
    },
    "dev": {
        "--build": "build",
        "--clean": "clean",
        "--preview": "preview",
        "--start": "start",
    },
    "quality": {
        "--all": "all",
        "--check": "format:check",
        "--fix": "lint:fix",
        "--format": "format",
        "--lint": "lint",
        "--quiet": "lint:quiet",
        "--strict": "lint:strict",
        "--type": "type-check",
    },
    "test": {
        "--all": ALL_ACTION,
        "--coverage": "unit:coverage",
        "--debug": "e2e:debug",
        "--e2e": "e2e",
        "--headed": "e2e:headed",
        "--performance": "performance",
        "--ui": "unit:ui",
        "--unit": "unit",
        "--watch": "unit:watch",
    },
}


class RunMode:
    INTERACTIVE = "interactive"
    DIRECT = "direct"
    CATEGORY = "category"
    LIST = "list"
    HELP = "help"


class ScriptRunnerError(Exception):
    """Error while resolving or running a script command."""


class UnknownCommandError(ScriptRunnerError):
    """Requested category or command does not exist."""


class CommandFailedError(ScriptRunnerError):
    """A command exited with a non-zero status."""

    def __init__(self, command: str, returncode: int) -> None:
        super().__init__(f"Command failed with exit code {returncode}: {command}")
        self.command = command
        self.returncode = returncode


@dataclass
class ParsedArgs:
    mode: str
    category: str | None = None
    action: str | None = None
    flags: list[str] = field(default_factory=list)


def parse_args(argv: list[str]) -> ParsedArgs:
    """Work out what the user asked for from raw arguments."""
    if "--help" in argv or "-h" in argv:
        return ParsedArgs(mode=RunMode.HELP)

    if "--list" in argv or "-l" in argv:
        return ParsedArgs(mode=RunMode.LIST)

    if not argv or "-i" in argv or "--interactive" in argv:
        return ParsedArgs(mode=RunMode.INTERACTIVE)

    category, rest = argv[0], argv[1:]

    # Shortcut flags replace the action: `test --e2e` or `test unit --watch`
    shortcuts = CATEGORY_FLAG_MAP.get(category.lower())
    if shortcuts and rest:
        candidates = rest if rest[0].startswith("-") else rest[1:]
        for flag in candidates:
            if flag in shortcuts:
                return ParsedArgs(
                    mode=RunMode.DIRECT,
                    category=category,
                    action=shortcuts[flag],
                    flags=[f for f in candidates if f != flag],
                )

    if not rest:
        return ParsedArgs(mode=RunMode.CATEGORY, category=category)

    return ParsedArgs(mode=RunMode.DIRECT, category=category, action=rest[0], flags=rest[1:])


def terminate_process_tree(pid: int, timeout: float = TERMINATE_TIMEOUT) -> None:
    """Terminate a process and all of its descendants."""
    try:
        parent = psutil.Process(pid)
        procs = parent.children(recursive=True) + [parent]
    except psutil.NoSuchProcess:
        return

    for proc in procs:
        try:
            proc.terminate()
        except psutil.NoSuchProcess:
            pass

    _, alive = psutil.wait_procs(procs, timeout=timeout)
    for proc in alive:
        logger.debug(f"Killing unresponsive process {proc.pid}")
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            pass


class ScriptRunner:
    """
    Runs project commands grouped into categories.

    Supports:
    - Direct execution (`script-runner test unit`)
    - Category shortcuts (`script-runner test --e2e`)
    - Running every command in a category (`--all`)
    - Numbered interactive menus
    """

    def __init__(self, cwd: Path | None = None, config: ScriptConfig | None = None) -> None:
        self.cwd = cwd or Path.cwd()
        self.config = config or ScriptConfig()

    def initialize(self) -> None:
        """Load configuration if none was given."""
        if not self.config.categories:
            self.config = ConfigLoader(self.cwd).load_config()

    def run(self, argv: list[str]) -> int:
        """Run the runner for the given arguments and return an exit code."""
        self.initialize()
        args = parse_args(argv)

        try:
            if args.mode == RunMode.LIST:
                print(self.list_commands())
            elif args.mode == RunMode.INTERACTIVE:
                self.interactive_menu()
            elif args.mode == RunMode.CATEGORY and args.category:
                self.category_menu(args.category)
            elif args.mode == RunMode.DIRECT and args.category and args.action:
                self.execute_command(args.category, args.action, args.flags)
            else:
                print(self.help_text())
        except UnknownCommandError as e:
            logger.error(str(e))
            return 1
        except CommandFailedError as e:
            print(f"\n❌ {e}")
            return 1

        return 0

    def get_category(self, name: str) -> ScriptCategory:
        category = self.config.find_category(name)
        if category is None:
            available = ", ".join(c.name for c in self.config.categories) or "none"
            raise UnknownCommandError(f"Unknown category: {name} (available: {available})")
        return category

    def execute_command(
        self,
        category_name: str,
        action: str,
        extra_args: list[str] | None = None,
    ) -> None:
        """
        Execute a command from a category.

        Args:
            category_name: Category name (case-insensitive)
            action: Command name, or "--all" for the whole category
            extra_args: Arguments appended to the command line

        Raises:
            UnknownCommandError: If the category or command doesn't exist
            CommandFailedError: If the command exits non-zero
        """
        extra_args = extra_args or []
        category = self.get_category(category_name)

        if action == ALL_ACTION or ALL_ACTION in extra_args:
            self.execute_all(category)
            return

        command = category.find_command(action)
        if command is None:
            available = ", ".join(c.name for c in category.commands)
            raise UnknownCommandError(
                f"Unknown command: {action} in {category.name} (available: {available})"
            )

        command_line = " ".join([command.command, *extra_args])
        print(f"\n▶️  {category.icon} {command.description}\n")
        print(f"🔧 Command: {command_line}\n")
        self._run_shell(command_line, command)
        print(f"\n✅ {command.name} completed successfully!")

    def execute_all(self, category: ScriptCategory) -> None:
        """Run the category's `all` command, or every command in order."""
        all_command = category.find_command("all")
        if all_command is not None:
            print(f"\n▶️  {category.icon} {all_command.description}\n")
            print(f"🔧 Command: {all_command.command}\n")
            self._run_shell(all_command.command, all_command)
            print(f"\n✅ All {category.name} commands completed successfully!")
            return

        print(f"\n🔄 Running all {category.name} commands...\n")
        for command in category.commands:
            print(f"\n▶️  {command.name}: {command.description}")
            print(f"🔧 Command: {command.command}\n")
            try:
                self._run_shell(command.command, command)
            except CommandFailedError:
                print(f"❌ {command.name} failed")
                print("\n🛑 Stopping execution due to failure")
                raise
            print(f"✅ {command.name} completed successfully")

        print(f"\n🎉 All {category.name} commands completed successfully!")

    def _run_shell(self, command_line: str, command: ScriptCommand) -> None:
        env = {**os.environ, **self.config.global_env, **command.env}
        logger.debug(f"Running in {self.cwd}: {command_line}")

        proc = subprocess.Popen(command_line, shell=True, cwd=self.cwd, env=env)
        try:
            returncode = proc.wait()
        except KeyboardInterrupt:
            logger.info(f"Interrupted, stopping {command.name}")
            terminate_process_tree(proc.pid)
            raise

        if returncode != 0:
            raise CommandFailedError(command_line, returncode)

    def interactive_menu(self) -> None:
        """Pick a category from a numbered menu, then a command."""
        if not self.config.categories:
            logger.warning("No script categories found. Consider adding a configuration file.")
            return

        print(f"📋 {self.config.project_name or 'Project'} Script Runner\n")
        choice = self._choose(
            [f"{c.icon} {c.description}" for c in self.config.categories],
            "Choose a category",
        )
        if choice is None:
            print("👋 See you later!")
            return

        self.category_menu(self.config.categories[choice].name)

    def category_menu(self, category_name: str) -> None:
        """Pick a command from a category and run it with optional extra arguments."""
        category = self.get_category(category_name)

        print(f"{category.icon} {category.description}\n")
        labels = [f"{c.name} - {c.description}" for c in category.commands]
        labels.append("Run all commands in this category")

        choice = self._choose(labels, "Choose a command to run")
        if choice is None:
            print("👋 See you later!")
            return

        if choice == len(category.commands):
            self.execute_all(category)
            return

        command = category.commands[choice]
        try:
            extra = input("Additional arguments (optional, press Enter to skip): ").strip()
        except EOFError:
            extra = ""

        self.execute_command(category.name, command.name, extra.split() if extra else [])

    def _choose(self, labels: list[str], prompt: str) -> int | None:
        """Show a numbered list and return the chosen index, or None to quit."""
        for index, label in enumerate(labels, start=1):
            print(f"  {index}. {label}")

        while True:
            try:
                answer = input(f"\n{prompt} [1-{len(labels)}, q to quit]: ").strip()
            except (EOFError, KeyboardInterrupt):
                return None

            if answer.lower() in ("q", "quit", ""):
                return None
            if answer.isdigit() and 1 <= int(answer) <= len(labels):
                return int(answer) - 1
            print(f"Please enter a number between 1 and {len(labels)}")

    def list_commands(self) -> str:
        """Render every category and command."""
        if not self.config.categories:
            return "No categories configured."

        lines = [
            f"\n📋 All Available Commands for {self.config.project_name or 'Project'}",
            "━" * 60,
        ]
        for category in self.config.categories:
            lines.append(f"\n{category.icon} {category.name} - {category.description}")
            for command in category.commands:
                lines.append(
                    f"   script-runner {category.name} {command.name:<15} - {command.description}"
                )

        lines.append("\n💡 Usage: script-runner <category> <command>")
        lines.append("💡 Interactive: script-runner -i")
        return "\n".join(lines)

    def help_text(self) -> str:
        categories = "\n".join(
            f"  {c.name:<10} {c.icon} {c.description}" for c in self.config.categories
        )
        return f"""
📋 Interactive Script Runner

🎯 Usage:
  script-runner                     # Interactive mode
  script-runner -i                  # Interactive mode
  script-runner <category>          # Show category commands
  script-runner <category> <cmd>    # Run specific command
  script-runner <category> --all    # Run all commands in category
  script-runner -l                  # List all commands
  script-runner -h                  # Show this help

🔧 Category Shortcuts:
  script-runner test --e2e          # Run E2E tests
  script-runner test --unit         # Run unit tests
  script-runner dev --build         # Build for production
  script-runner quality --lint      # Run linting

📦 Categories:
{categories}

📝 Configuration:
  Create script-runner.config.json or .scriptrunner.json to customize categories and commands
"""


def main(argv: list[str] | None = None) -> int:
    """Entry point for the `script-runner` command."""
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
    runner = ScriptRunner()
    try:
        return runner.run(sys.argv[1:] if argv is None else argv)
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())

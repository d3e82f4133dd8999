"""Tests for script runner configuration loading."""

import json

from morning_pod.project.loader import ConfigLoader
from morning_pod.project.types import PackageManager, ProjectDetection


def write_json(path, data):
    path.write_text(json.dumps(data))


def all_commands(config):
    return [cmd.command for category in config.categories for cmd in category.commands]


class TestTemplateConfig:
    """Tests for configuration generated from templates."""

    def test_nextjs_project(self, tmp_path):
        write_json(tmp_path / "package.json", {
            "name": "test-project",
            "dependencies": {"next": "^14.0.0"},
        })
        (tmp_path / "bun.lockb").write_text("")

        config = ConfigLoader(tmp_path).load_config()

        assert config.project_name == "test-project"
        assert config.project_type == "nextjs"
        assert config.package_manager == "bun"
        assert config.find_category("dev").find_command("clean").command == (
            "rm -rf node_modules bun.lockb && bun install"
        )

    def test_no_placeholders_left(self, tmp_path):
        write_json(tmp_path / "package.json", {"dependencies": {"react": "18"}})
        config = ConfigLoader(tmp_path).load_config()
        assert not any("{" in command for command in all_commands(config))

    def test_missing_package_json(self, tmp_path):
        config = ConfigLoader(tmp_path).load_config()
        assert config.project_type == "generic"
        assert config.package_manager == "npm"
        assert config.project_name == tmp_path.name
        assert len(config.categories) > 0

    def test_database_project_gets_db_category(self, tmp_path):
        write_json(tmp_path / "package.json", {"dependencies": {"next": "14", "drizzle": "1"}})
        config = ConfigLoader(tmp_path).load_config()
        assert config.find_category("db") is not None


class TestUserConfig:
    """Tests for user-provided config files."""

    def test_user_config_takes_precedence(self, tmp_path):
        write_json(tmp_path / "package.json", {"dependencies": {"next": "14"}})
        (tmp_path / "pnpm-lock.yaml").write_text("")
        write_json(tmp_path / "script-runner.config.json", {
            "projectName": "custom",
            "globalEnv": {"NODE_ENV": "test"},
            "categories": [{
                "name": "build",
                "description": "Build things",
                "icon": "🔨",
                "commands": [
                    {"name": "all", "command": "{pm} run build --out {buildDir}", "description": "Build"},
                ],
            }],
        })

        config = ConfigLoader(tmp_path).load_config()

        assert config.project_name == "custom"
        assert config.global_env == {"NODE_ENV": "test"}
        assert [c.name for c in config.categories] == ["build"]
        assert all_commands(config) == ["pnpm run build --out .next"]

    def test_alternate_file_name(self, tmp_path):
        write_json(tmp_path / ".scriptrunner.json", {
            "categories": [{"name": "x", "commands": [{"name": "y", "command": "echo y"}]}],
        })
        config = ConfigLoader(tmp_path).load_config()
        assert config.find_category("x").find_command("y").command == "echo y"

    def test_malformed_user_config_is_skipped(self, tmp_path):
        (tmp_path / "script-runner.config.json").write_text("{broken")
        config = ConfigLoader(tmp_path).load_config()
        assert config.project_type == "generic"
        assert config.find_category("dev") is not None

    def test_non_utf8_user_config_is_skipped(self, tmp_path):
        (tmp_path / "script-runner.config.json").write_bytes(b"\xff\xfe{}")
        config = ConfigLoader(tmp_path).load_config()
        assert config.project_type == "generic"
        assert config.package_manager == "npm"

    def test_env_values_become_strings(self, tmp_path):
        write_json(tmp_path / "script-runner.config.json", {
            "globalEnv": {"PORT": 3000},
            "categories": [{"name": "dev", "commands": [
                {"name": "a", "command": "true", "env": {"DEBUG": True}},
            ]}],
        })
        config = ConfigLoader(tmp_path).load_config()
        assert config.global_env == {"PORT": "3000"}
        assert config.find_category("dev").find_command("a").env == {"DEBUG": "True"}

    def test_invalid_user_config_falls_through_to_next_file(self, tmp_path):
        write_json(tmp_path / "script-runner.config.json", {"categories": [{"description": "no name"}]})
        write_json(tmp_path / ".scriptrunnerrc.json", {
            "categories": [{"name": "ok", "commands": []}],
        })
        config = ConfigLoader(tmp_path).load_config()
        assert [c.name for c in config.categories] == ["ok"]


class TestPlaceholders:
    """Tests for placeholder substitution."""

    def test_typescript_extensions(self, tmp_path):
        (tmp_path / "src").mkdir()
        loader = ConfigLoader(tmp_path)
        detection = ProjectDetection(
            project_type="react",
            package_manager=PackageManager.YARN,
            has_typescript=True,
        )
        result = loader.replace_placeholders(
            "{pm} x {lockfile} {srcDir} {buildDir} a{configExt} b{testExt}",
            detection,
        )
        assert result == "yarn x yarn.lock src build a.ts b.test.ts"

    def test_javascript_extensions(self, tmp_path):
        loader = ConfigLoader(tmp_path)
        detection = ProjectDetection(project_type="node", package_manager=PackageManager.NPM)
        assert loader.replace_placeholders("{configExt} {testExt} {srcDir}", detection) == ".js .test.js ."

    def test_repeated_placeholder(self, tmp_path):
        loader = ConfigLoader(tmp_path)
        detection = ProjectDetection(project_type="generic", package_manager=PackageManager.BUN)
        assert loader.replace_placeholders("{pm} a && {pm} b", detection) == "bun a && bun b"

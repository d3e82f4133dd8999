"""Tests for the script runner."""

import pytest

from morning_pod.project.runner import (
    CommandFailedError,
    RunMode,
    ScriptRunner,
    UnknownCommandError,
    parse_args,
)
from morning_pod.project.types import ScriptCategory, ScriptCommand, ScriptConfig


def make_runner(tmp_path, categories, global_env=None):
    config = ScriptConfig(categories=categories, project_name="demo", global_env=global_env or {})
    return ScriptRunner(cwd=tmp_path, config=config)


def category(name, *commands):
    return ScriptCategory(
        name=name,
        description=f"{name} commands",
        icon="*",
        commands=[ScriptCommand(name=n, command=c, description=n) for n, c in commands],
    )


def feed_input(monkeypatch, answers):
    answers = iter(answers)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))


class TestParseArgs:
    """Tests for argument parsing."""

    def test_no_args_is_interactive(self):
        assert parse_args([]).mode == RunMode.INTERACTIVE

    def test_interactive_flag(self):
        assert parse_args(["test", "-i"]).mode == RunMode.INTERACTIVE

    def test_help(self):
        assert parse_args(["test", "--help"]).mode == RunMode.HELP
        assert parse_args(["-h"]).mode == RunMode.HELP

    def test_list(self):
        assert parse_args(["-l"]).mode == RunMode.LIST

    def test_category(self):
        args = parse_args(["test"])
        assert args.mode == RunMode.CATEGORY
        assert args.category == "test"

    def test_direct(self):
        args = parse_args(["quality", "lint", "src/"])
        assert args.mode == RunMode.DIRECT
        assert args.category == "quality"
        assert args.action == "lint"
        assert args.flags == ["src/"]

    def test_shortcut_flag(self):
        args = parse_args(["test", "--e2e"])
        assert args.mode == RunMode.DIRECT
        assert args.action == "e2e"
        assert args.flags == []

    def test_shortcut_flag_after_action(self):
        args = parse_args(["test", "unit", "--watch"])
        assert args.action == "unit:watch"
        assert args.flags == []

    def test_shortcut_keeps_other_flags(self):
        args = parse_args(["dev", "--build", "--debug"])
        assert args.action == "build"
        assert args.flags == ["--debug"]

    def test_category_is_case_insensitive_for_shortcuts(self):
        assert parse_args(["TEST", "--e2e"]).action == "e2e"

    def test_all_without_shortcut_table(self):
        args = parse_args(["db", "--all"])
        assert args.mode == RunMode.DIRECT
        assert args.action == "--all"


class TestExecuteCommand:
    """Tests for command execution."""

    def test_runs_in_project_directory(self, tmp_path):
        runner = make_runner(tmp_path, [category("dev", ("touch", "touch created.txt"))])
        runner.execute_command("dev", "touch")
        assert (tmp_path / "created.txt").exists()

    def test_extra_args_are_appended(self, tmp_path):
        runner = make_runner(tmp_path, [category("dev", ("write", "echo"))])
        runner.execute_command("dev", "write", ["hello", ">", "out.txt"])
        assert (tmp_path / "out.txt").read_text().strip() == "hello"

    def test_lookup_is_case_insensitive(self, tmp_path):
        runner = make_runner(tmp_path, [category("Dev", ("Ok", "true"))])
        runner.execute_command("dev", "ok")

    def test_environment(self, tmp_path):
        cmd = ScriptCommand(
            name="env",
            command='test "$GLOBAL" = g && test "$LOCAL" = l',
            description="env",
            env={"LOCAL": "l"},
        )
        runner = make_runner(
            tmp_path,
            [ScriptCategory(name="dev", description="", icon="", commands=[cmd])],
            global_env={"GLOBAL": "g"},
        )
        runner.execute_command("dev", "env")

    def test_failure_raises(self, tmp_path):
        runner = make_runner(tmp_path, [category("dev", ("fail", "exit 3"))])
        with pytest.raises(CommandFailedError) as exc_info:
            runner.execute_command("dev", "fail")
        assert exc_info.value.returncode == 3

    def test_unknown_category(self, tmp_path):
        runner = make_runner(tmp_path, [category("dev", ("ok", "true"))])
        with pytest.raises(UnknownCommandError, match="available: dev"):
            runner.execute_command("deploy", "ok")

    def test_unknown_command(self, tmp_path):
        runner = make_runner(tmp_path, [category("dev", ("ok", "true"))])
        with pytest.raises(UnknownCommandError, match="available: ok"):
            runner.execute_command("dev", "nope")


class TestExecuteAll:
    """Tests for running every command in a category."""

    def test_runs_in_order(self, tmp_path):
        runner = make_runner(tmp_path, [category(
            "test",
            ("a", "echo a >> log.txt"),
            ("b", "echo b >> log.txt"),
        )])
        runner.execute_command("test", "--all")
        assert (tmp_path / "log.txt").read_text().split() == ["a", "b"]

    def test_stops_at_first_failure(self, tmp_path):
        runner = make_runner(tmp_path, [category(
            "test",
            ("a", "echo a >> log.txt"),
            ("b", "false"),
            ("c", "echo c >> log.txt"),
        )])
        with pytest.raises(CommandFailedError):
            runner.execute_command("test", "--all")
        assert (tmp_path / "log.txt").read_text().split() == ["a"]

    def test_prefers_all_command(self, tmp_path):
        runner = make_runner(tmp_path, [category(
            "test",
            ("a", "echo a >> log.txt"),
            ("all", "echo all >> log.txt"),
        )])
        runner.execute_command("test", "a", ["--all"])
        assert (tmp_path / "log.txt").read_text().split() == ["all"]


class TestRun:
    """Tests for the run entry point."""

    def test_direct_success(self, tmp_path):
        runner = make_runner(tmp_path, [category("dev", ("ok", "true"))])
        assert runner.run(["dev", "ok"]) == 0

    def test_direct_failure(self, tmp_path, capsys):
        runner = make_runner(tmp_path, [category("dev", ("fail", "false"))])
        assert runner.run(["dev", "fail"]) == 1
        assert "Command failed" in capsys.readouterr().out

    def test_unknown_category(self, tmp_path):
        runner = make_runner(tmp_path, [category("dev", ("ok", "true"))])
        assert runner.run(["nope", "ok"]) == 1

    def test_list(self, tmp_path, capsys):
        runner = make_runner(tmp_path, [category("dev", ("start", "true"))])
        assert runner.run(["--list"]) == 0
        out = capsys.readouterr().out
        assert "All Available Commands for demo" in out
        assert "script-runner dev start" in out

    def test_help(self, tmp_path, capsys):
        runner = make_runner(tmp_path, [category("dev", ("start", "true"))])
        assert runner.run(["-h"]) == 0
        assert "Interactive Script Runner" in capsys.readouterr().out

    def test_numeric_env_from_config_file(self, tmp_path):
        (tmp_path / "script-runner.config.json").write_text(
            '{"globalEnv": {"PORT": 3000}, "categories": [{"name": "dev", "commands": '
            '[{"name": "a", "command": "echo $PORT > port.txt"}]}]}'
        )
        runner = ScriptRunner(cwd=tmp_path)
        assert runner.run(["dev", "a"]) == 0
        assert (tmp_path / "port.txt").read_text().strip() == "3000"

    def test_loads_config_from_project(self, tmp_path, capsys):
        runner = ScriptRunner(cwd=tmp_path)
        assert runner.run(["-l"]) == 0
        assert runner.config.project_type == "generic"
        assert "script-runner dev clean" in capsys.readouterr().out

    def test_empty_list(self, tmp_path):
        runner = make_runner(tmp_path, [])
        assert runner.list_commands() == "No categories configured."


class TestInteractive:
    """Tests for the numbered menus."""

    def test_choose_category_and_command(self, tmp_path, monkeypatch):
        runner = make_runner(tmp_path, [
            category("dev", ("touch", "touch picked.txt")),
            category("test", ("other", "touch wrong.txt")),
        ])
        feed_input(monkeypatch, ["1", "1", ""])
        assert runner.run([]) == 0
        assert (tmp_path / "picked.txt").exists()
        assert not (tmp_path / "wrong.txt").exists()

    def test_invalid_choice_reprompts(self, tmp_path, monkeypatch):
        runner = make_runner(tmp_path, [category("dev", ("touch", "touch"))])
        feed_input(monkeypatch, ["9", "abc", "1", "1", "args.txt"])
        assert runner.run(["-i"]) == 0
        assert (tmp_path / "args.txt").exists()

    def test_quit(self, tmp_path, monkeypatch, capsys):
        runner = make_runner(tmp_path, [category("dev", ("touch", "touch x.txt"))])
        feed_input(monkeypatch, ["q"])
        assert runner.run([]) == 0
        assert "See you later" in capsys.readouterr().out
        assert not (tmp_path / "x.txt").exists()

    def test_category_menu_run_all(self, tmp_path, monkeypatch):
        runner = make_runner(tmp_path, [category(
            "dev",
            ("a", "echo a >> log.txt"),
            ("b", "echo b >> log.txt"),
        )])
        feed_input(monkeypatch, ["3"])
        assert runner.run(["dev"]) == 0
        assert (tmp_path / "log.txt").read_text().split() == ["a", "b"]

    def test_end_of_input(self, tmp_path, monkeypatch):
        runner = make_runner(tmp_path, [category("dev", ("touch", "touch x.txt"))])

        def raise_eof(prompt=""):
            raise EOFError

        monkeypatch.setattr("builtins.input", raise_eof)
        assert runner.run([]) == 0
        assert not (tmp_path / "x.txt").exists()

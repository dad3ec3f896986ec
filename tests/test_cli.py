"""
Tests for the topic-graph command line interface
"""

import json
import logging
import re

import pytest

from cli import build_parser, main
from topic_graph.config import Config


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Point the CLI at a throwaway SQLite database"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        f"store:\n  backend: sqlite\n  db_path: {tmp_path / 'topics.db'}\n"
        "logging:\n  level: WARNING\n  log_file: null\n"
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TOPIC_GRAPH_CONFIG", str(config_file))
    Config.reset_instance()
    yield tmp_path
    Config.reset_instance()
    app_logger = logging.getLogger("topic_graph")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)


def added_id(output: str) -> str:
    match = re.search(r"Added: .+ \((.+)\)", output)
    assert match, output
    return match.group(1)


class TestParser:
    def test_read_commands_share_options(self):
        args = build_parser().parse_args(["tree", "abc", "--all-versions", "--json"])

        assert args.command == "tree"
        assert args.id == "abc"
        assert args.all_versions is True
        assert args.json is True

    def test_shortest_path_arguments(self):
        args = build_parser().parse_args(["shortest-path", "a", "b"])

        assert (args.start, args.end) == ("a", "b")
        assert args.all_versions is False

    def test_no_command(self, capsys):
        assert main([]) == 1


class TestCommands:
    def test_add_and_show_tree(self, cli_env, capsys):
        assert main(["add", "Science", "All of it"]) == 0
        root_id = added_id(capsys.readouterr().out)
        assert main(["add", "Physics", "Matter", "--parent", root_id]) == 0
        capsys.readouterr()

        assert main(["tree", root_id]) == 0
        output = capsys.readouterr().out

        assert "Science" in output
        assert "Physics" in output

    def test_shortest_path_json(self, cli_env, capsys):
        main(["add", "Science", "All of it"])
        root_id = added_id(capsys.readouterr().out)
        main(["add", "Physics", "Matter", "-p", root_id])
        physics_id = added_id(capsys.readouterr().out)
        main(["add", "Biology", "Life", "-p", root_id])
        biology_id = added_id(capsys.readouterr().out)

        assert main(["shortest-path", physics_id, biology_id, "--json"]) == 0
        result = json.loads(capsys.readouterr().out)

        assert result["distance"] == 2
        assert [t["id"] for t in result["path"]] == [physics_id, root_id, biology_id]

    def test_version_and_history(self, cli_env, capsys):
        main(["add", "Science", "All of it"])
        root_id = added_id(capsys.readouterr().out)

        assert main(["version", root_id, "--name", "Natural Science"]) == 0
        capsys.readouterr()
        assert main(["history", root_id, "--json"]) == 0
        history = json.loads(capsys.readouterr().out)

        assert history["current_version"] == 2
        assert [v["name"] for v in history["versions"]] == ["Science", "Natural Science"]

    def test_delete(self, cli_env, capsys):
        main(["add", "Science", "All of it"])
        root_id = added_id(capsys.readouterr().out)

        assert main(["delete", root_id]) == 0
        assert "Removed 1 version(s)" in capsys.readouterr().out

    def test_missing_topic_reports_error(self, cli_env, capsys):
        assert main(["tree", "ghost"]) == 2

        assert "Error: Topic 'ghost' not found" in capsys.readouterr().err

    def test_forest_empty(self, cli_env, capsys):
        assert main(["forest"]) == 0

        assert "No root topics found." in capsys.readouterr().out


class TestConfigurationErrors:
    @pytest.fixture
    def write_config(self, tmp_path, monkeypatch):
        def write(text):
            config_file = tmp_path / "config.yaml"
            config_file.write_text(text + "logging:\n  log_file: null\n")
            monkeypatch.chdir(tmp_path)
            monkeypatch.setenv("TOPIC_GRAPH_CONFIG", str(config_file))
            Config.reset_instance()
        yield write
        Config.reset_instance()
        app_logger = logging.getLogger("topic_graph")
        for handler in list(app_logger.handlers):
            app_logger.removeHandler(handler)

    def test_unknown_backend(self, write_config, capsys):
        write_config("store:\n  backend: mongodb\n")

        assert main(["forest"]) == 2
        assert "Unknown store backend: mongodb" in capsys.readouterr().err

    def test_invalid_compact_ratio(self, write_config, capsys):
        write_config("graph:\n  queue_compact_ratio: 3\n")

        assert main(["forest"]) == 2
        assert "queue_compact_ratio" in capsys.readouterr().err

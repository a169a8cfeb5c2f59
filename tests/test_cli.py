#!/usr/bin/env python3
"""
Tests for the command line interface
"""

import json

import pytest

from projignore.cli import ProjignoreCLI
from projignore.project import TemplateStore


@pytest.fixture
def cli():
    return ProjignoreCLI(template_store=TemplateStore.from_mapping({"node": "node_modules/\n"}))


@pytest.fixture
def node_project(tmp_path):
    (tmp_path / "package.json").write_text("{}")
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "index.js").write_text("// entry\nexport default 1;\n")
    (tmp_path / ".gitignore").write_text("*.log\n")
    return tmp_path


def test_check(cli, node_project, capsys):
    code = cli.run(["check", str(node_project), "node_modules", "app.log", "src/index.js"])

    assert code == 0
    assert capsys.readouterr().out.splitlines() == [
        "ignored\tnode_modules",
        "ignored\tapp.log",
        "kept\tsrc/index.js",
    ]


def test_check_rule_sources(cli, node_project, tmp_path_factory, capsys):
    extra = tmp_path_factory.mktemp("extra") / "extra.ignore"
    extra.write_text("src/\n")

    code = cli.run([
        "check", str(node_project), "node_modules", "app.log", "src",
        "--no-templates", "--no-gitignore", "--ignore-file", str(extra), "--json",
    ])

    assert code == 0
    result = json.loads(capsys.readouterr().out)
    assert result["node_modules"]["ignored"] is False
    assert result["app.log"]["ignored"] is False
    assert result["src"] == {"ignored": True, "is_dir": True, "exists": True}


def test_check_missing_directory(cli, tmp_path, capsys):
    code = cli.run(["check", str(tmp_path / "missing"), "a"])

    assert code == 1
    assert "Cannot be found" in capsys.readouterr().err


def test_detect(cli, node_project, capsys):
    assert cli.run(["detect", str(node_project)]) == 0
    assert capsys.readouterr().out.splitlines() == ["node"]


def test_stats_json(cli, node_project, capsys):
    (node_project / "node_modules" / "dep.js").write_text("module.exports = 1;\n")

    assert cli.run(["stats", str(node_project), "--json"]) == 0
    result = json.loads(capsys.readouterr().out)
    assert result == {
        "JSON": {"code": 1, "comment": 0, "blank": 0, "lines": 1},
        "JavaScript": {"code": 1, "comment": 1, "blank": 0, "lines": 2},
    }


def test_validate(cli, tmp_path, capsys):
    good = tmp_path / "good.ignore"
    good.write_text("*.log\nbuild/\n")
    bad = tmp_path / "bad.ignore"
    bad.write_text("*.log\n{a,b\n")

    assert cli.run(["validate", str(good)]) == 0
    assert "2 patterns OK" in capsys.readouterr().out

    assert cli.run(["validate", str(bad)]) == 1
    assert f"{bad}:2: error: unclosed alternates ({{a,b)" in capsys.readouterr().out


def test_no_command_prints_help(cli, capsys):
    assert cli.run([]) == 0
    assert "usage: projignore" in capsys.readouterr().out


def test_check_missing_ignore_file(cli, node_project, tmp_path_factory, capsys):
    missing = tmp_path_factory.mktemp("extra") / "missing.ignore"

    code = cli.run(["check", str(node_project), "src", "--ignore-file", str(missing)])

    assert code == 1
    captured = capsys.readouterr()
    assert "File not found" in captured.err
    assert captured.out == ""


def test_check_unreadable_gitignore(cli, node_project, capsys):
    (node_project / ".gitignore").write_bytes(b"*.log\n# caf\xe9\n")

    code = cli.run(["check", str(node_project), "app.log"])

    assert code == 1
    assert "Error reading file" in capsys.readouterr().err

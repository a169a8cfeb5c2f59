#!/usr/bin/env python3
"""
Tests for line counting and the ignore-aware directory walk
"""

from projignore.ignore import RuleSet, load_str
from projignore.project import CodeCount, count_file, count_lines, dir_stats, walk_files
from projignore.project.stats import LANGUAGES, language_for


def test_count_c_style_comments():
    text = "\n".join([
        "// comment",
        "fn main() {",
        "",
        "    /* block",
        "       still */",
        "    println!(\"hi\"); // trailing",
        "}",
    ])
    count = count_lines(text, LANGUAGES['rs'])
    assert count == CodeCount(code=3, comment=3, blank=1, lines=7)


def test_count_single_line_block_comment():
    count = count_lines("/* one */\nint x;\n", LANGUAGES['c'])
    assert count == CodeCount(code=1, comment=1, blank=0, lines=2)


def test_count_python():
    text = '"""\nModule docstring\n"""\n\nimport os  # code\n# comment\n'
    count = count_lines(text, LANGUAGES['py'])
    assert count == CodeCount(code=1, comment=4, blank=1, lines=6)


def test_merge():
    total = CodeCount()
    total.merge(CodeCount(code=1, comment=2, blank=3, lines=6))
    total.merge(CodeCount(code=1, lines=1))
    assert total == CodeCount(code=2, comment=2, blank=3, lines=7)


def test_language_for():
    assert language_for("src/Main.RS").name == "Rust"
    assert language_for("Makefile") is None
    assert language_for("notes.unknown") is None


def test_count_file(tmp_path):
    source = tmp_path / "app.js"
    source.write_text("// hi\nconsole.log(1);\n")
    assert count_file(source) == ("JavaScript", CodeCount(code=1, comment=1, blank=0, lines=2))
    assert count_file(tmp_path / "data.bin") is None


def test_walk_prunes_ignored_and_hidden(tmp_path):
    for rel in ("a.py", "b.log", "src/c.py", "build/out.py", ".venv/lib.py", "src/.env"):
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x = 1\n")

    rules = load_str(tmp_path, "*.log\nbuild/\n")
    found = [p.relative_to(tmp_path).as_posix() for p in walk_files(tmp_path, rules)]

    assert found == ["a.py", "src/c.py"]


def test_dir_stats(tmp_path):
    (tmp_path / "main.go").write_text("package main\n\n// entry\nfunc main() {}\n")
    (tmp_path / "vendor").mkdir()
    (tmp_path / "vendor" / "dep.go").write_text("package dep\n")

    stats = dir_stats(tmp_path, load_str(tmp_path, "vendor/"))
    assert stats == {"Go": CodeCount(code=2, comment=1, blank=1, lines=4)}

    everything = dir_stats(tmp_path, RuleSet.empty(tmp_path))
    assert everything["Go"].lines == 5


def test_dir_stats_empty(tmp_path):
    assert dir_stats(tmp_path, RuleSet.empty(tmp_path)) == {}


def test_block_comment_opened_after_code():
    text = "int x; /* start\n   still comment\n*/\nint y;\n"
    count = count_lines(text, LANGUAGES['c'])
    assert count == CodeCount(code=2, comment=2, blank=0, lines=4)


def test_block_comment_closed_on_same_line_as_code():
    count = count_lines("int x; /* note */\nint y;\n", LANGUAGES['c'])
    assert count == CodeCount(code=2, comment=0, blank=0, lines=2)

    count = count_lines('x = """doc"""\ny = 1\n', LANGUAGES['py'])
    assert count == CodeCount(code=2, comment=0, blank=0, lines=2)

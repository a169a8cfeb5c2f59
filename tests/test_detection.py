#!/usr/bin/env python3
"""
Tests for language detection from marker files
"""

from projignore.project import (
    Detector,
    Detectors,
    FakeDirEntry,
    FsDirEntry,
    Matcher,
    detect_language,
    detect_languages_from_dir,
)


def test_detect_single_file_names():
    assert detect_language("Cargo.toml") == ["rust"]
    assert detect_language("/some/where/package.json") == ["node"]
    assert detect_language("foo.cabal") == ["haskell"]
    assert detect_language("mix.exs") == ["elixir"]
    assert detect_language("README.md") == []


def test_marker_shared_by_two_languages():
    assert detect_language("build.sbt") == ["java", "scala"]


def test_directories_are_never_markers():
    detectors = Detectors.default()
    assert detectors.detects([FakeDirEntry("Cargo.toml", "toml", file=False)]) == []
    assert detectors.detects([FakeDirEntry("Cargo.toml", "toml")]) == ["rust"]


def test_each_language_reported_once():
    entries = [FakeDirEntry.from_name(name) for name in ("go.mod", "go.sum", "main.zig", "build.zig")]
    assert Detectors.default().detects(entries) == ["go", "zig"]


def test_fake_entry_from_name():
    entry = FakeDirEntry.from_name("archive.tar.gz")
    assert entry.file_name() == "archive.tar.gz"
    assert entry.extension() == "gz"
    assert entry.is_file()

    assert FakeDirEntry.from_name(".nvmrc").extension() is None


def test_custom_detectors():
    detectors = Detectors([
        Detector("terraform", [Matcher.by_file_extension("tf")]),
        Detector("docker", [Matcher.by_file_name("Dockerfile")]),
    ])
    entries = [FakeDirEntry.from_name("main.tf"), FakeDirEntry.from_name("Dockerfile")]
    assert detectors.detects(entries) == ["terraform", "docker"]
    assert detect_language("Cargo.toml", detectors) == []


def test_detect_from_directory(tmp_path):
    (tmp_path / "Cargo.toml").write_text("[package]\n")
    (tmp_path / "package.json").write_text("{}")
    # a directory named like a marker does not count
    (tmp_path / "go.mod").mkdir()
    # only the top level is scanned
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "Gemfile").write_text("")

    assert detect_languages_from_dir(tmp_path) == ["node", "rust"]


def test_detect_from_missing_directory(tmp_path):
    assert detect_languages_from_dir(tmp_path / "missing") == []


def test_fs_dir_entry(tmp_path):
    path = tmp_path / "setup.py"
    path.write_text("")
    entry = FsDirEntry(path)

    assert entry.file_name() == "setup.py"
    assert entry.extension() == "py"
    assert entry.is_file()
    assert not FsDirEntry(tmp_path).is_file()

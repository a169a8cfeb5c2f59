"""
Project language detection from well-known marker files.

Marker table based on https://github.com/starship/starship/tree/master/src/configs
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Tuple, Union

from projignore.utils import get_logger

logger = get_logger(__name__)


class DirEntry(Protocol):
    """Minimal view of a directory entry needed for detection"""

    def file_name(self) -> str:
        ...

    def extension(self) -> Optional[str]:
        ...

    def is_file(self) -> bool:
        ...


def _extension_of(name: str) -> Optional[str]:
    suffix = Path(name).suffix
    return suffix[1:] if suffix else None


class FsDirEntry:
    """DirEntry backed by the filesystem"""

    def __init__(self, path: Union[str, Path, os.DirEntry]):
        self.path = Path(path)

    def file_name(self) -> str:
        return self.path.name

    def extension(self) -> Optional[str]:
        return _extension_of(self.path.name)

    def is_file(self) -> bool:
        return self.path.is_file()

    def __repr__(self) -> str:
        return f"FsDirEntry({str(self.path)!r})"


@dataclass(frozen=True)
class FakeDirEntry:
    """In-memory DirEntry, for tests and for classifying a bare file name"""
    name: str
    ext: Optional[str] = None
    file: bool = True

    @classmethod
    def from_name(cls, name: str, is_file: bool = True) -> 'FakeDirEntry':
        return cls(name=name, ext=_extension_of(name), file=is_file)

    def file_name(self) -> str:
        return self.name

    def extension(self) -> Optional[str]:
        return self.ext

    def is_file(self) -> bool:
        return self.file


@dataclass(frozen=True)
class Matcher:
    """Matches a file entry by exact name or by extension"""
    kind: str
    value: str

    BY_FILE_NAME = 'file_name'
    BY_FILE_EXTENSION = 'extension'

    @classmethod
    def by_file_name(cls, name: str) -> 'Matcher':
        return cls(cls.BY_FILE_NAME, name)

    @classmethod
    def by_file_extension(cls, extension: str) -> 'Matcher':
        return cls(cls.BY_FILE_EXTENSION, extension)

    def matches(self, entry: DirEntry) -> bool:
        if not entry.is_file():
            return False
        if self.kind == self.BY_FILE_NAME:
            return entry.file_name() == self.value
        return entry.extension() == self.value


class Detector:
    """Maps a set of marker matchers to an ignore template key"""

    def __init__(self, template: str, matchers: Sequence[Matcher]):
        self.template = template
        self.matchers: Tuple[Matcher, ...] = tuple(matchers)

    def detects(self, entries: Sequence[DirEntry]) -> Optional[str]:
        for matcher in self.matchers:
            if any(matcher.matches(entry) for entry in entries):
                return self.template
        return None

    def __repr__(self) -> str:
        return f"Detector({self.template!r}, {len(self.matchers)} matchers)"


def _names(*names: str) -> List[Matcher]:
    return [Matcher.by_file_name(name) for name in names]


DEFAULT_DETECTORS: List[Tuple[str, List[Matcher]]] = [
    ("crystal", _names("shard.yml")),
    ("dart", _names("pubspec.yaml", "pubspec.yml", "pubspec.lock")),
    ("elixir", _names("mix.exs")),
    ("elm", _names("elm.json", "elm-package.json", ".elm-version")),
    ("erlang", _names("rebar.config", "erlang.mk")),
    ("haskell", [Matcher.by_file_extension("cabal")] + _names("stack.yaml", "Setup.hs")),
    ("go", _names("go.mod", "go.sum", "glide.yaml", "Gopkg.yml", "Gopkg.lock", ".go-version")),
    ("java", _names(
        "build.gradle", "pom.xml", "build.gradle.kts", "build.sbt", ".java.version",
        "deps.edn", "project.clj", "build.boot",
    )),
    ("julia", _names("Project.toml", "Manifest.toml")),
    ("nim", _names("nim.cfg")),
    ("node", _names("package.json", ".node-version", ".nvmrc")),
    ("ocaml", _names("dune", "dune-project", "jbuild", "jbuild-ignore", ".merlin")
        + [Matcher.by_file_extension("opam")]),
    ("perl", _names(
        "Makefile.PL", "Build.PL", "cpanfile", "cpanfile.snapshot", "META.json", "META.yml",
        ".perl-version",
    )),
    # php
    ("composer", _names("composer.json", ".php-version")),
    ("purescript", _names("spago.dhall", "packages.dhall")),
    ("python", _names(
        "requirements.txt", ".python-version", "pyproject.toml", "Pipfile", "tox.ini",
        "setup.py", "__init__.py",
    )),
    ("r", _names(".Rprofile")),
    ("ruby", [Matcher.by_file_extension("gemspec")] + _names("Gemfile", ".ruby-version")),
    ("rust", _names("Cargo.toml")),
    ("scala", _names(".scalaenv", ".sbtenv", "build.sbt")),
    ("swift", _names("Package.swift")),
    ("zig", [Matcher.by_file_extension("zig")]),
]


class Detectors:
    """Ordered collection of detectors"""

    def __init__(self, detectors: Sequence[Detector]):
        self.detectors: Tuple[Detector, ...] = tuple(detectors)

    @classmethod
    def default(cls) -> 'Detectors':
        return cls([Detector(template, matchers) for template, matchers in DEFAULT_DETECTORS])

    def detects(self, entries: Sequence[DirEntry]) -> List[str]:
        """
        Get the template keys whose markers appear in `entries`

        Returns:
            Template keys in detector order, each at most once
        """
        found = []
        for detector in self.detectors:
            template = detector.detects(entries)
            if template is not None:
                found.append(template)
        return found


def detect_language(file_path: Union[str, Path],
                    detectors: Optional[Detectors] = None) -> List[str]:
    """
    Classify a single file by its name, without touching the filesystem
    """
    detectors = detectors or Detectors.default()
    entry = FakeDirEntry.from_name(Path(file_path).name)
    return detectors.detects([entry])


def detect_languages_from_dir(directory: Union[str, Path],
                              detectors: Optional[Detectors] = None) -> List[str]:
    """
    Detect project languages from marker files at the top level of a directory

    Args:
        directory: Project directory
        detectors: Detector table (defaults to Detectors.default())

    Returns:
        Template keys of the detected languages
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning(f"Not a directory, skipping language detection: {directory}")
        return []

    detectors = detectors or Detectors.default()
    with os.scandir(directory) as it:
        entries = [FsDirEntry(entry.path) for entry in it]

    langs = detectors.detects(entries)
    logger.info(f"Detected languages in {directory}: {langs or 'none'}")
    return langs

"""
Project orchestration: detect languages, gather ignore text, build rules
"""

import logging
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Dict, List, Optional, Union

from projignore.ignore import CompileError, IgnoreFileLoader, RuleSet, load_str
from projignore.utils import get_logger, log_with_context
from .detection import Detectors, detect_languages_from_dir
from .stats import CodeCount, dir_stats
from .templates import TemplateError, TemplateStore

logger = get_logger(__name__)


class ProjectError(Exception):
    """Project directory is unusable"""


@dataclass(frozen=True)
class IsIgnored:
    """Outcome of checking a single path against the project rules"""
    exists: bool
    is_dir: bool
    is_ignored: bool


class Project:
    """
    A project directory and the ignore rules that apply to it.

    Typical use:

        project = Project("/my/project")
        project.parse()
        project.set_ignore_text("files/to/ignore.js", update_existing=True)
        project.is_ignored("files/to/ignore.js")

    Every change to the ignore text builds a new RuleSet; the previous one is
    replaced, never modified.
    """

    def __init__(self,
                 directory: Union[str, Path],
                 template_store: Optional[TemplateStore] = None,
                 detectors: Optional[Detectors] = None):
        """
        Args:
            directory: Project directory
            template_store: Source of per-language templates (created on first use if omitted)
            detectors: Language detector table (defaults to Detectors.default())

        Raises:
            ProjectError: If the directory does not exist
        """
        self.dir = Path(directory)
        if not self.dir.exists():
            raise ProjectError(f"Directory {directory} Cannot be found!")

        self.is_git = (self.dir / '.git').exists()
        self.project_langs: Optional[List[str]] = None
        self.ignore_texts: Optional[List[str]] = None
        self.ruleset: Optional[RuleSet] = None
        self.code_stats: Optional[Dict[str, CodeCount]] = None

        self._template_store = template_store
        self._detectors = detectors or Detectors.default()
        self._loader = IgnoreFileLoader()

    @property
    def template_store(self) -> TemplateStore:
        if self._template_store is None:
            self._template_store = TemplateStore()
        return self._template_store

    def parse(self):
        """
        Detect the project languages, load their templates and build the rules
        """
        self.project_langs = detect_languages_from_dir(self.dir, self._detectors)

        try:
            texts = self.template_store.templates_for(self.project_langs)
        except TemplateError as e:
            logger.error(f"Could not load ignore templates: {e}")
            texts = []

        self.ignore_texts = texts or None
        self._rebuild_rules()

    def set_ignore_text(self, text: str, update_existing: bool):
        """
        Add user supplied ignore text

        Args:
            text: Ignore lines
            update_existing: Append to the current text when True, replace it when False
        """
        texts = list(self.ignore_texts or []) if update_existing else []
        texts.append(text)
        self.ignore_texts = texts
        self._rebuild_rules()

    def use_project_gitignore(self, update_generic: bool):
        """
        Apply the project's own .gitignore

        A missing .gitignore contributes no rules. A file that cannot be read
        in full leaves the current rules untouched.

        Args:
            update_generic: Merge with the current text when True, replace it when False

        Raises:
            ProjectError: If the .gitignore exists but could not be read in full
        """
        info = self._loader.load_dir(self.dir)
        if not info.path.exists():
            text = ''
        elif not info.is_complete:
            raise ProjectError(f"Cannot load {info.path}: {info.fatal_errors[0].message}")
        else:
            text = info.text

        if update_generic:
            self.set_ignore_text(text, update_existing=True)
        else:
            self.ignore_texts = [text]
            self._rebuild_rules()

    def is_ignored(self, path: Union[str, Path]) -> IsIgnored:
        """
        Check a file or directory of the project

        Relative paths are taken relative to the project directory. When the
        path exists, its type comes from the filesystem; otherwise a path
        without an extension is assumed to be a directory.
        """
        full_path = Path(path)
        if not full_path.is_absolute():
            full_path = self.dir / full_path

        exists = full_path.exists()
        if exists:
            is_dir = full_path.is_dir()
        else:
            is_dir = not PurePath(path).suffix
            logger.debug(f"{full_path} does not exist, guessing is_dir={is_dir}")

        if self.ruleset is None:
            return IsIgnored(exists=exists, is_dir=is_dir, is_ignored=False)

        return IsIgnored(
            exists=exists,
            is_dir=is_dir,
            is_ignored=self.ruleset.is_ignored(full_path, is_dir),
        )

    def get_code_stats(self) -> Dict[str, CodeCount]:
        """
        Count source lines per language over all non-ignored files
        """
        ruleset = self.ruleset or RuleSet.empty(self.dir)
        self.code_stats = dir_stats(self.dir, ruleset)
        return self.code_stats

    def _rebuild_rules(self):
        content = '\n\n'.join(self.ignore_texts or [])
        try:
            self.ruleset = load_str(self.dir, content)
        except CompileError as e:
            logger.error(f"Invalid ignore rules for {self.dir}, ignoring nothing: {e}")
            self.ruleset = RuleSet.empty(self.dir)

        log_with_context(
            logger, logging.DEBUG, "Rebuilt ignore rules",
            project=str(self.dir), rules=len(self.ruleset),
            blocks=len(self.ignore_texts or []),
        )

    def __repr__(self) -> str:
        return (
            f"Project(dir={str(self.dir)!r}, langs={self.project_langs}, "
            f"is_git={self.is_git}, ruleset={self.ruleset!r})"
        )

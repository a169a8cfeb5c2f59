"""
Ordered ignore rules with git's last-match-wins evaluation
"""

from pathlib import PurePath
from typing import Iterable, Optional, Tuple, Union

from pathspec.util import normalize_file

from projignore.utils import get_logger, TRACE_LEVEL
from .compiler import GlobSet
from .parser import Rule, parse_lines

logger = get_logger(__name__)

PathLike = Union[str, PurePath]


def _strip_prefix(path: PurePath, prefix: PurePath) -> PurePath:
    """Strip `prefix` off `path`, or return `path` unchanged if it does not start with it"""
    try:
        return path.relative_to(prefix)
    except ValueError:
        return path


class RuleSet:
    """
    Set of ignore rules checked against paths below a root directory.

    Building is the expensive part (every glob is compiled); checking a path
    is a single regular expression match. Build one instance and query it
    for as many paths as possible. Instances are never modified after
    construction and can be shared between threads.
    """

    def __init__(self, root: PathLike, lines: Iterable[str]):
        """
        Args:
            root: Directory the rules are relative to
            lines: Raw ignore lines, in source order

        Raises:
            CompileError: If any pattern is not a valid glob
        """
        self._root = PurePath(root)
        self._rules: Tuple[Rule, ...] = tuple(parse_lines(lines))
        self._globs = GlobSet([(rule.pattern, rule.anchored) for rule in self._rules])
        logger.debug(f"Built ruleset with {len(self._rules)} rules for {self._root}")

    @classmethod
    def empty(cls, root: PathLike) -> 'RuleSet':
        """Ruleset that ignores nothing"""
        return cls(root, [])

    @property
    def root(self) -> PurePath:
        return self._root

    @property
    def rules(self) -> Tuple[Rule, ...]:
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"<RuleSet {len(self._rules)} gitignore rules>"

    def normalize(self, path: PathLike) -> str:
        """
        Make a path relative to the root in posix form.

        `./` is dropped, the root prefix is stripped when present, and paths
        already relative to the root are left as they are.
        """
        cleaned = _strip_prefix(PurePath(path), self._root)
        if cleaned == PurePath('.'):
            return ''
        return normalize_file(cleaned)

    def matching_rule(self, path: PathLike, is_dir: bool) -> Optional[Rule]:
        """
        Get the rule that decides the fate of a path.

        Later rules win. A directory-only rule is passed over for anything
        that is not a directory and the search continues with earlier rules.

        Returns:
            Deciding rule, or None when no rule applies
        """
        candidate = self.normalize(path)
        # the root itself is never ignored
        if not candidate:
            return None
        for idx in reversed(self._globs.matches(candidate)):
            rule = self._rules[idx]
            if rule.dir_only and not is_dir:
                continue
            return rule
        return None

    def is_ignored(self, path: PathLike, is_dir: bool) -> bool:
        """
        Check if a path is ignored

        Args:
            path: Absolute path below the root, or path relative to it
            is_dir: Whether the path is a directory

        Returns:
            True if the last applicable rule ignores the path
        """
        rule = self.matching_rule(path, is_dir)
        ignored = rule is not None and not rule.negation
        if logger.isEnabledFor(TRACE_LEVEL):
            logger.trace(f"Ignore check for {path} (dir={is_dir}): {ignored} (rule: {rule})")
        return ignored


def build(root: PathLike, lines: Iterable[str]) -> RuleSet:
    """Build a ruleset from a sequence of lines"""
    return RuleSet(root, lines)


def load_str(root: PathLike, content: str) -> RuleSet:
    """Build a ruleset from multi-line ignore text"""
    return RuleSet(root, content.splitlines())

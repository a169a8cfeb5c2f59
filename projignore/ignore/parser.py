"""
Line parser for gitignore-style pattern text
"""

from dataclasses import dataclass
from typing import Iterable, List, Union

# Characters that keep their escaping backslash so the glob compiler
# treats them as literals.
GLOB_META_CHARS = frozenset('*?[]{}\\')

RECURSIVE_PREFIX = '**/'
RECURSIVE_SUFFIX = '/**'


@dataclass(frozen=True)
class Rule:
    """A single normalized ignore rule"""
    pattern: str
    # Wildcards may not match a `/` when the rule is anchored.
    anchored: bool
    # Rule may only match directories.
    dir_only: bool
    # A match re-includes the path instead of ignoring it.
    negation: bool


@dataclass(frozen=True)
class Empty:
    """Blank line"""


@dataclass(frozen=True)
class Comment:
    """Line starting with `#`"""


@dataclass(frozen=True)
class WithRule:
    """Line that produced a rule"""
    rule: Rule


ParsedLine = Union[Empty, Comment, WithRule]


def unescape_pattern(pattern: str) -> str:
    """
    Drop backslash escapes that are meaningless to the glob compiler.

    `\\#`, `\\!` and `\\ ` become plain characters. Escapes of glob
    metacharacters are kept intact so `\\*` still matches a literal `*`.
    """
    if '\\' not in pattern:
        return pattern

    out = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == '\\':
            if i + 1 < len(pattern) and pattern[i + 1] in GLOB_META_CHARS:
                out.append(pattern[i:i + 2])
                i += 2
                continue
            i += 1
            continue
        out.append(c)
        i += 1
    return ''.join(out)


def parse_line(raw: str) -> ParsedLine:
    """
    Parse one line of ignore text into a rule or a no-op marker.

    Never fails: malformed globs are only detected when the rules are
    compiled.

    Args:
        raw: Raw line, with or without its line terminator

    Returns:
        Empty, Comment or WithRule
    """
    pattern = raw.strip()

    if not pattern:
        return Empty()

    if pattern.startswith('#'):
        return Comment()

    negation = pattern.startswith('!')
    if negation:
        pattern = pattern.lstrip('!').strip()

    dir_only = pattern.endswith('/')
    if dir_only:
        pattern = pattern.rstrip('/').strip()

    absolute = pattern.startswith('/')
    if absolute:
        pattern = pattern.lstrip('/')

    anchored = absolute or '/' in pattern

    pattern = unescape_pattern(pattern)

    if not absolute and not pattern.startswith(RECURSIVE_PREFIX):
        pattern = RECURSIVE_PREFIX + pattern

    # A trailing `/**` would also match the directory itself; `/**/*`
    # only matches what is inside it.
    if pattern.endswith(RECURSIVE_SUFFIX):
        pattern = pattern + '/*'

    return WithRule(Rule(
        pattern=pattern,
        anchored=anchored,
        dir_only=dir_only,
        negation=negation,
    ))


def parse_lines(lines: Iterable[str]) -> List[Rule]:
    """Parse lines and keep only the rules, in source order"""
    rules = []
    for line in lines:
        parsed = parse_line(line)
        if isinstance(parsed, WithRule):
            rules.append(parsed.rule)
    return rules

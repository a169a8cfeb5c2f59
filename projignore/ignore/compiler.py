"""
Glob compilation into a single combined matcher
"""

import re
from typing import List, Optional, Sequence, Tuple

from projignore.utils import get_logger

logger = get_logger(__name__)


class GlobError(ValueError):
    """A glob is not syntactically valid"""

    def __init__(self, glob: str, reason: str):
        self.glob = glob
        self.reason = reason
        super().__init__(f"invalid glob '{glob}': {reason}")


class CompileError(ValueError):
    """A rule in a batch failed to compile; the whole batch is rejected"""

    def __init__(self, index: int, pattern: str, reason: str):
        self.index = index
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"rule {index} ('{pattern}') failed to compile: {reason}")


def _class_escape(ch: str) -> str:
    # `&&`, `~~` and `||` are reserved for set operations inside a class
    if ch in '\\]^-[&~|':
        return '\\' + ch
    return ch


def _translate_class(glob: str, start: int, literal_separator: bool) -> Tuple[str, int]:
    """
    Translate a `[...]` bracket expression starting at `start`.

    Returns:
        Tuple of (regex fragment, index just past the closing bracket)
    """
    j = start + 1
    negated = False
    if j < len(glob) and glob[j] in '!^':
        negated = True
        j += 1

    members = []
    first = True
    while True:
        if j >= len(glob):
            raise GlobError(glob, "unclosed character class")
        ch = glob[j]
        # `]` right after the opening bracket is a literal member
        if ch == ']' and not first:
            break
        first = False
        if j + 2 < len(glob) and glob[j + 1] == '-' and glob[j + 2] != ']':
            lo, hi = ch, glob[j + 2]
            if lo > hi:
                raise GlobError(glob, f"invalid range '{lo}-{hi}'")
            members.append(f"{_class_escape(lo)}-{_class_escape(hi)}")
            j += 3
        else:
            members.append(_class_escape(ch))
            j += 1

    body = ''.join(members)
    if negated:
        if literal_separator:
            return f"[^{body}/]", j + 1
        return f"[^{body}]", j + 1
    return f"[{body}]", j + 1


def compile_glob(glob: str, literal_separator: bool = False) -> str:
    """
    Translate a glob into a regular expression body.

    The result is meant to be matched against the whole path. `**` is only
    recursive when it forms a complete path component; anywhere else it
    behaves like `*`.

    Args:
        glob: Glob pattern
        literal_separator: When True, `*`, `?` and negated classes never match `/`

    Returns:
        Regular expression source without anchors

    Raises:
        GlobError: If the glob is malformed
    """
    any_char = '[^/]' if literal_separator else '.'
    any_run = '[^/]*' if literal_separator else '.*'

    out = []
    in_alternates = False
    i = 0
    n = len(glob)

    while i < n:
        c = glob[i]

        if c == '\\':
            if i + 1 >= n:
                raise GlobError(glob, "dangling escape")
            out.append(re.escape(glob[i + 1]))
            i += 2

        elif c == '*':
            j = i
            while j < n and glob[j] == '*':
                j += 1
            prev = glob[i - 1] if i > 0 else None
            nxt = glob[j] if j < n else None
            if j - i >= 2 and prev in (None, '/') and nxt in (None, '/'):
                if prev is None and nxt is None:
                    out.append('.*')
                elif prev is None:
                    out.append('(?:/?|.*/)')
                    j += 1
                elif nxt is None:
                    # preceding `/` is already emitted
                    out.append('.*')
                else:
                    out.append('(?:.*/)?')
                    j += 1
            else:
                out.append(any_run)
            i = j

        elif c == '?':
            out.append(any_char)
            i += 1

        elif c == '[':
            fragment, i = _translate_class(glob, i, literal_separator)
            out.append(fragment)

        elif c == '{':
            if in_alternates:
                raise GlobError(glob, "nested alternates")
            in_alternates = True
            out.append('(?:')
            i += 1

        elif c == '}':
            if not in_alternates:
                raise GlobError(glob, "unopened alternates")
            in_alternates = False
            out.append(')')
            i += 1

        elif c == ',' and in_alternates:
            out.append('|')
            i += 1

        else:
            out.append(re.escape(c))
            i += 1

    if in_alternates:
        raise GlobError(glob, "unclosed alternates")

    return ''.join(out)


def validate_glob(glob: str, literal_separator: bool = False) -> Tuple[bool, Optional[str]]:
    """
    Validate a single glob

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        compile_glob(glob, literal_separator)
        return True, None
    except GlobError as e:
        return False, e.reason


class GlobSet:
    """
    All globs of a rule list compiled into one regular expression.

    Each glob becomes an optional zero-width lookahead followed by an empty
    capture group, so one `match` call reports every glob that matches the
    whole candidate.
    """

    def __init__(self, globs: Sequence[Tuple[str, bool]]):
        """
        Args:
            globs: Ordered (glob, literal_separator) pairs

        Raises:
            CompileError: If any glob is malformed
        """
        parts = []
        for idx, (glob, literal_separator) in enumerate(globs):
            try:
                body = compile_glob(glob, literal_separator)
            except GlobError as e:
                raise CompileError(idx, glob, e.reason) from e
            parts.append(f"(?:(?=(?:{body})\\Z)())?")

        self._size = len(parts)
        self._regex = re.compile(''.join(parts), re.DOTALL)
        logger.debug(f"Compiled {self._size} globs into one matcher")

    def __len__(self) -> int:
        return self._size

    def matches(self, path: str) -> List[int]:
        """
        Get the indices of all globs matching the path, ascending
        """
        if not self._size:
            return []
        match = self._regex.match(path)
        return [idx for idx, hit in enumerate(match.groups()) if hit is not None]

    def is_match(self, path: str) -> bool:
        return bool(self.matches(path))

"""
Source line statistics for the non-ignored files of a project
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple, Union

from projignore.ignore import RuleSet
from projignore.utils import get_logger

logger = get_logger(__name__)


@dataclass
class CodeCount:
    """Line counts for one file or one language"""
    code: int = 0
    comment: int = 0
    blank: int = 0
    lines: int = 0

    def merge(self, other: 'CodeCount'):
        self.code += other.code
        self.comment += other.comment
        self.blank += other.blank
        self.lines += other.lines


@dataclass(frozen=True)
class LanguageSyntax:
    """Comment markers of a language"""
    name: str
    line_comments: Tuple[str, ...] = ()
    block_comment: Optional[Tuple[str, str]] = None


_C_STYLE = (('//',), ('/*', '*/'))
_HASH = (('#',), None)


def _syntax(name: str, markers) -> LanguageSyntax:
    line, block = markers
    return LanguageSyntax(name, line, block)


LANGUAGES: Dict[str, LanguageSyntax] = {
    'c': _syntax('C', _C_STYLE),
    'h': _syntax('C/C++ Header', _C_STYLE),
    'cc': _syntax('C++', _C_STYLE),
    'cpp': _syntax('C++', _C_STYLE),
    'hpp': _syntax('C/C++ Header', _C_STYLE),
    'cs': _syntax('C#', _C_STYLE),
    'go': _syntax('Go', _C_STYLE),
    'java': _syntax('Java', _C_STYLE),
    'kt': _syntax('Kotlin', _C_STYLE),
    'scala': _syntax('Scala', _C_STYLE),
    'swift': _syntax('Swift', _C_STYLE),
    'rs': _syntax('Rust', _C_STYLE),
    'js': _syntax('JavaScript', _C_STYLE),
    'jsx': _syntax('JSX', _C_STYLE),
    'mjs': _syntax('JavaScript', _C_STYLE),
    'ts': _syntax('TypeScript', _C_STYLE),
    'tsx': _syntax('TypeScript', _C_STYLE),
    'dart': _syntax('Dart', _C_STYLE),
    'zig': _syntax('Zig', (('//',), None)),
    'php': _syntax('PHP', (('//', '#'), ('/*', '*/'))),
    'css': _syntax('CSS', ((), ('/*', '*/'))),
    'py': _syntax('Python', (('#',), ('"""', '"""'))),
    'rb': _syntax('Ruby', (('#',), ('=begin', '=end'))),
    'pl': _syntax('Perl', _HASH),
    'sh': _syntax('Bourne Shell', _HASH),
    'bash': _syntax('Bourne Shell', _HASH),
    'r': _syntax('R', _HASH),
    'ex': _syntax('Elixir', _HASH),
    'exs': _syntax('Elixir', _HASH),
    'cr': _syntax('Crystal', _HASH),
    'nim': _syntax('Nim', _HASH),
    'jl': _syntax('Julia', (('#',), ('#=', '=#'))),
    'toml': _syntax('Toml', _HASH),
    'yml': _syntax('YAML', _HASH),
    'yaml': _syntax('YAML', _HASH),
    'json': _syntax('JSON', ((), None)),
    'erl': _syntax('Erlang', (('%',), None)),
    'hs': _syntax('Haskell', (('--',), ('{-', '-}'))),
    'elm': _syntax('Elm', (('--',), ('{-', '-}'))),
    'purs': _syntax('PureScript', (('--',), ('{-', '-}'))),
    'ml': _syntax('OCaml', ((), ('(*', '*)'))),
    'sql': _syntax('SQL', (('--',), ('/*', '*/'))),
    'lua': _syntax('Lua', (('--',), ('--[[', ']]'))),
    'html': _syntax('HTML', ((), ('<!--', '-->'))),
    'xml': _syntax('XML', ((), ('<!--', '-->'))),
    'md': _syntax('Markdown', ((), None)),
}


def language_for(path: Union[str, Path]) -> Optional[LanguageSyntax]:
    suffix = Path(path).suffix.lower()
    if not suffix:
        return None
    return LANGUAGES.get(suffix[1:])


def _ends_in_block(line: str, start: str, end: str, in_block: bool) -> bool:
    """Whether a block comment is still open at the end of `line`"""
    pos = 0
    while True:
        marker = end if in_block else start
        idx = line.find(marker, pos)
        if idx == -1:
            return in_block
        in_block = not in_block
        pos = idx + len(marker)


def count_lines(text: str, syntax: LanguageSyntax) -> CodeCount:
    """
    Classify every line of `text` as code, comment or blank.

    A line that starts inside or opens a block comment counts as comment.
    Code followed by a comment counts as code, and a block opened after
    code makes the following lines comments. String literals are not parsed,
    so a marker inside one is taken as a comment marker.
    """
    count = CodeCount()
    in_block = False
    block_start, block_end = syntax.block_comment or (None, None)

    for line in text.splitlines():
        count.lines += 1
        stripped = line.strip()

        if in_block:
            count.comment += 1
            in_block = _ends_in_block(stripped, block_start, block_end, True)
            continue

        if not stripped:
            count.blank += 1
            continue

        if block_start and stripped.startswith(block_start):
            count.comment += 1
            in_block = _ends_in_block(stripped, block_start, block_end, False)
            continue

        if any(stripped.startswith(marker) for marker in syntax.line_comments):
            count.comment += 1
            continue

        count.code += 1
        if block_start:
            in_block = _ends_in_block(stripped, block_start, block_end, False)

    return count


def count_file(path: Union[str, Path]) -> Optional[Tuple[str, CodeCount]]:
    """
    Count the lines of a source file

    Returns:
        Tuple of (language name, counts), or None for unrecognised files
    """
    syntax = language_for(path)
    if syntax is None:
        return None
    try:
        text = Path(path).read_text(encoding='utf-8', errors='replace')
    except OSError as e:
        logger.warning(f"Cannot read {path}: {e}")
        return None
    return syntax.name, count_lines(text, syntax)


def _is_hidden(name: str) -> bool:
    return name.startswith('.')


def walk_files(root: Union[str, Path], ruleset: RuleSet) -> Iterator[Path]:
    """
    Yield the files below `root` that are neither hidden nor ignored.

    Hidden or ignored directories are pruned, so nothing inside them is
    visited.
    """
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)

        dirnames[:] = sorted(
            name for name in dirnames
            if not _is_hidden(name) and not ruleset.is_ignored(current / name, True)
        )

        for name in sorted(filenames):
            if _is_hidden(name):
                continue
            file_path = current / name
            if ruleset.is_ignored(file_path, False):
                continue
            yield file_path


def dir_stats(root: Union[str, Path], ruleset: RuleSet) -> Dict[str, CodeCount]:
    """
    Merge line counts per language over all non-ignored files

    Returns:
        Language name to counts; empty when no source file was found
    """
    stats: Dict[str, CodeCount] = {}
    for file_path in walk_files(root, ruleset):
        result = count_file(file_path)
        if result is None:
            continue
        language, count = result
        stats.setdefault(language, CodeCount()).merge(count)

    logger.info(f"Counted {sum(c.lines for c in stats.values())} lines in {len(stats)} languages")
    return stats

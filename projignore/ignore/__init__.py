"""
Gitignore rule engine

Parses gitignore-style text into ordered rules, compiles them into a single
matcher and answers whether a path below a root directory is ignored.
"""

from .constants import IGNORE_FILENAME
from .parser import Rule, ParsedLine, Empty, Comment, WithRule, parse_line, parse_lines
from .compiler import GlobError, CompileError, GlobSet, compile_glob, validate_glob
from .ruleset import RuleSet, build, load_str
from .file_loader import IgnoreFileLoader, IgnoreFileInfo, ValidationError, ValidationWarning

__all__ = [
    'IGNORE_FILENAME',
    'Rule',
    'ParsedLine',
    'Empty',
    'Comment',
    'WithRule',
    'parse_line',
    'parse_lines',
    'GlobError',
    'CompileError',
    'GlobSet',
    'compile_glob',
    'validate_glob',
    'RuleSet',
    'build',
    'load_str',
    'IgnoreFileLoader',
    'IgnoreFileInfo',
    'ValidationError',
    'ValidationWarning',
]

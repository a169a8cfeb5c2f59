"""
projignore - gitignore rule evaluation for project directories

Parses gitignore-style text into an immutable RuleSet and answers whether
paths below a project root are ignored. Around the engine sit language
detection from marker files, per-language ignore templates and line
statistics for the files that are not ignored.
"""

__version__ = "0.3.0"

from .ignore import CompileError, GlobError, Rule, RuleSet, build, load_str, parse_line

__all__ = [
    '__version__',
    'CompileError',
    'GlobError',
    'Rule',
    'RuleSet',
    'build',
    'load_str',
    'parse_line',
]

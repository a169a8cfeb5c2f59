"""
Project layer around the ignore engine: language detection, ignore
templates, orchestration and line statistics
"""

from .detection import (
    DirEntry,
    FsDirEntry,
    FakeDirEntry,
    Matcher,
    Detector,
    Detectors,
    detect_language,
    detect_languages_from_dir,
)
from .templates import Template, TemplateConfig, TemplateError, TemplateStore
from .stats import CodeCount, count_file, count_lines, dir_stats, walk_files
from .project import IsIgnored, Project, ProjectError

__all__ = [
    'DirEntry',
    'FsDirEntry',
    'FakeDirEntry',
    'Matcher',
    'Detector',
    'Detectors',
    'detect_language',
    'detect_languages_from_dir',
    'Template',
    'TemplateConfig',
    'TemplateError',
    'TemplateStore',
    'CodeCount',
    'count_file',
    'count_lines',
    'dir_stats',
    'walk_files',
    'IsIgnored',
    'Project',
    'ProjectError',
]

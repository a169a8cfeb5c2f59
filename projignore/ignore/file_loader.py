"""
File loader for reading and validating ignore files
"""

from pathlib import Path
from typing import List, Dict
from dataclasses import dataclass, field

from projignore.utils import get_logger
from .compiler import validate_glob
from .constants import IGNORE_FILENAME, MAX_IGNORE_FILE_SIZE, MAX_PATTERNS_PER_FILE
from .parser import Comment, Empty, Rule, parse_line

logger = get_logger(__name__)


@dataclass
class ValidationError:
    """Represents a validation error in an ignore file"""
    line: int
    pattern: str
    message: str
    # the file could not be read in full
    fatal: bool = False


@dataclass
class ValidationWarning:
    """Represents a validation warning in an ignore file"""
    line: int
    pattern: str
    message: str


@dataclass
class IgnoreFileInfo:
    """Information about a loaded ignore file"""
    path: Path
    lines: List[str] = field(default_factory=list)
    patterns: List[str] = field(default_factory=list)
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        """Check if file has no errors"""
        return len(self.errors) == 0

    @property
    def is_complete(self) -> bool:
        """Check that every line of the file was read"""
        return not any(error.fatal for error in self.errors)

    @property
    def fatal_errors(self) -> List[ValidationError]:
        return [error for error in self.errors if error.fatal]

    @property
    def has_warnings(self) -> bool:
        """Check if file has warnings"""
        return len(self.warnings) > 0

    @property
    def text(self) -> str:
        """File content as loaded, one line per rule source line"""
        return '\n'.join(self.lines)


class IgnoreFileLoader:
    """
    Handles loading and validating ignore files
    """

    def __init__(self, ignore_filename: str = IGNORE_FILENAME):
        """
        Initialize loader

        Args:
            ignore_filename: Name of ignore files to look for
        """
        self.ignore_filename = ignore_filename

    def load_dir(self, directory: Path) -> IgnoreFileInfo:
        """Load the ignore file that sits directly in `directory`"""
        return self.load_file(Path(directory) / self.ignore_filename)

    def load_file(self, file_path: Path) -> IgnoreFileInfo:
        """
        Load and validate an ignore file

        Problems are recorded on the returned info and logged, never raised.

        Args:
            file_path: Path to the ignore file

        Returns:
            IgnoreFileInfo with lines and validation results
        """
        file_path = Path(file_path)
        info = IgnoreFileInfo(
            path=file_path,
            stats={
                'total_lines': 0,
                'empty_lines': 0,
                'comment_lines': 0,
                'pattern_lines': 0,
            }
        )

        if not file_path.exists():
            info.errors.append(ValidationError(
                line=0,
                pattern="",
                message=f"File not found: {file_path}",
                fatal=True,
            ))
            return info

        try:
            file_size = file_path.stat().st_size
        except OSError as e:
            info.errors.append(ValidationError(
                line=0,
                pattern="",
                message=f"Cannot stat file: {e}",
                fatal=True,
            ))
            self._log_problems(info)
            return info

        if file_size > MAX_IGNORE_FILE_SIZE:
            info.errors.append(ValidationError(
                line=0,
                pattern="",
                message=f"File too large: {file_size} bytes (max: {MAX_IGNORE_FILE_SIZE})",
                fatal=True,
            ))
            self._log_problems(info)
            return info

        try:
            content = file_path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            info.errors.append(ValidationError(
                line=0,
                pattern="",
                message=f"Error reading file: {e}",
                fatal=True,
            ))
            self._log_problems(info)
            return info

        lines = content.splitlines()
        info.stats['total_lines'] = len(lines)

        for line_num, line in enumerate(lines, 1):
            parsed = parse_line(line)

            if isinstance(parsed, Empty):
                info.stats['empty_lines'] += 1
                info.lines.append(line)
                continue

            if isinstance(parsed, Comment):
                info.stats['comment_lines'] += 1
                info.lines.append(line)
                continue

            if info.stats['pattern_lines'] >= MAX_PATTERNS_PER_FILE:
                info.errors.append(ValidationError(
                    line=line_num,
                    pattern="",
                    message=f"Too many patterns (max: {MAX_PATTERNS_PER_FILE}), rest of file skipped",
                    fatal=True,
                ))
                break

            stripped = line.strip()
            info.stats['pattern_lines'] += 1
            info.patterns.append(stripped)
            info.lines.append(line)

            is_valid, reason = validate_glob(parsed.rule.pattern, parsed.rule.anchored)
            if not is_valid:
                info.errors.append(ValidationError(
                    line=line_num,
                    pattern=stripped,
                    message=reason or "Invalid pattern"
                ))

            for warning_msg in self._check_pattern_warnings(stripped, parsed.rule):
                info.warnings.append(ValidationWarning(
                    line=line_num,
                    pattern=stripped,
                    message=warning_msg
                ))

        self._log_problems(info)
        return info

    def _check_pattern_warnings(self, pattern: str, rule: Rule) -> List[str]:
        """
        Check pattern for potential issues that aren't errors

        Args:
            pattern: Pattern as written
            rule: Parsed rule for the pattern

        Returns:
            List of warning messages
        """
        warnings = []

        body = pattern.lstrip('!').strip()
        if body in ['*', '**', '**/*', '/*', '/**']:
            warnings.append(
                "Very broad pattern - will ignore most of the tree"
            )

        # `**` only recurses as a whole path component
        for component in rule.pattern.split('/'):
            if '**' in component and component != '**':
                warnings.append(
                    f"'{component}' is not a full path component; '**' acts like '*' here"
                )
                break

        return warnings

    def _log_problems(self, info: IgnoreFileInfo):
        for error in info.errors:
            logger.error(f"{info.path}:{error.line}: {error.message}")
        for warning in info.warnings:
            logger.warning(f"{info.path}:{warning.line}: {warning.message}")

"""
Command line interface for projignore

Commands:
- check: report whether paths of a project are ignored
- detect: list the languages detected in a project
- stats: count source lines of the non-ignored files
- validate: check an ignore file for invalid patterns
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from projignore import __version__
from projignore.ignore import IgnoreFileLoader
from projignore.project import Project, ProjectError, TemplateStore, detect_languages_from_dir
from projignore.utils import configure_logging


class ProjignoreCLI:
    """Argument parsing and command dispatch"""

    def __init__(self, template_store: Optional[TemplateStore] = None):
        self.template_store = template_store

    def get_usage_examples(self) -> str:
        """Get usage examples for help text"""
        return """
Examples:
  projignore check . build/ src/main.rs     # Which of these paths are ignored?
  projignore check . app.log --no-templates # Only use the project's .gitignore
  projignore detect .                       # Languages found from marker files
  projignore stats . --json                 # Lines of code per language
  projignore validate .gitignore            # Report invalid patterns

Environment Variables:
  PROJIGNORE_LOG_LEVEL      Log level (TRACE/DEBUG/INFO/WARNING/ERROR)
  PROJIGNORE_LOG_JSON       Emit JSON log lines
  PROJIGNORE_TEMPLATE_URL   Template listing URL
  PROJIGNORE_CACHE_DIR      Directory of the template cache file
  PROJIGNORE_HTTP_TIMEOUT   Download timeout in seconds
"""

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog='projignore',
            description='Gitignore rule evaluation for project directories',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self.get_usage_examples()
        )
        parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
        parser.add_argument('--log-level', default=None,
                            help='Log level (overrides PROJIGNORE_LOG_LEVEL)')

        subparsers = parser.add_subparsers(dest='command')

        check_parser = subparsers.add_parser('check', help='Check paths against the project rules')
        check_parser.add_argument('directory', help='Project directory')
        check_parser.add_argument('paths', nargs='+', help='Paths to check (relative to the project)')
        self._add_rule_source_args(check_parser)
        check_parser.add_argument('--json', action='store_true', help='Output JSON')

        detect_parser = subparsers.add_parser('detect', help='Detect project languages')
        detect_parser.add_argument('directory', help='Project directory')

        stats_parser = subparsers.add_parser('stats', help='Count lines of non-ignored files')
        stats_parser.add_argument('directory', help='Project directory')
        self._add_rule_source_args(stats_parser)
        stats_parser.add_argument('--json', action='store_true', help='Output JSON')

        validate_parser = subparsers.add_parser('validate', help='Validate an ignore file')
        validate_parser.add_argument('file', help='Ignore file to validate')

        return parser

    def _add_rule_source_args(self, parser: argparse.ArgumentParser):
        parser.add_argument('--no-templates', action='store_true',
                            help='Do not use per-language templates')
        parser.add_argument('--no-gitignore', action='store_true',
                            help="Do not use the project's own .gitignore")
        parser.add_argument('--ignore-file', action='append', default=[], metavar='FILE',
                            help='Additional ignore file (can be used multiple times)')

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Main entry point"""
        parser = self.build_parser()
        args = parser.parse_args(argv)

        configure_logging(log_level=args.log_level)

        if not args.command:
            parser.print_help()
            return 0

        handler = getattr(self, f'cmd_{args.command}')
        try:
            return handler(args)
        except ProjectError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    def load_project(self, args: argparse.Namespace) -> Project:
        """Build a project with the rule sources selected on the command line"""
        project = Project(args.directory, template_store=self.template_store)

        if args.no_templates:
            project.set_ignore_text('', update_existing=False)
        else:
            project.parse()

        if not args.no_gitignore:
            project.use_project_gitignore(update_generic=True)

        loader = IgnoreFileLoader()
        for ignore_file in args.ignore_file:
            info = loader.load_file(Path(ignore_file))
            if not info.is_complete:
                raise ProjectError(f"Cannot load {info.path}: {info.fatal_errors[0].message}")
            project.set_ignore_text(info.text, update_existing=True)

        return project

    def cmd_check(self, args: argparse.Namespace) -> int:
        project = self.load_project(args)
        results = {path: project.is_ignored(path) for path in args.paths}

        if args.json:
            print(json.dumps({
                path: {'ignored': r.is_ignored, 'is_dir': r.is_dir, 'exists': r.exists}
                for path, r in results.items()
            }, indent=2))
        else:
            for path, result in results.items():
                status = 'ignored' if result.is_ignored else 'kept'
                print(f"{status}\t{path}")
        return 0

    def cmd_detect(self, args: argparse.Namespace) -> int:
        project = Project(args.directory, template_store=self.template_store)
        for lang in detect_languages_from_dir(project.dir):
            print(lang)
        return 0

    def cmd_stats(self, args: argparse.Namespace) -> int:
        project = self.load_project(args)
        stats = project.get_code_stats()

        if args.json:
            print(json.dumps({
                lang: {'code': c.code, 'comment': c.comment, 'blank': c.blank, 'lines': c.lines}
                for lang, c in sorted(stats.items())
            }, indent=2))
        else:
            print(f"{'Language':<16}{'Lines':>10}{'Code':>10}{'Comment':>10}{'Blank':>10}")
            for lang, c in sorted(stats.items()):
                print(f"{lang:<16}{c.lines:>10}{c.code:>10}{c.comment:>10}{c.blank:>10}")
        return 0

    def cmd_validate(self, args: argparse.Namespace) -> int:
        info = IgnoreFileLoader().load_file(Path(args.file))
        for error in info.errors:
            print(f"{info.path}:{error.line}: error: {error.message} ({error.pattern})")
        for warning in info.warnings:
            print(f"{info.path}:{warning.line}: warning: {warning.message} ({warning.pattern})")
        if info.is_valid:
            print(f"{info.path}: {info.stats['pattern_lines']} patterns OK")
            return 0
        return 1


def main():
    """Console script entry point"""
    cli = ProjignoreCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()

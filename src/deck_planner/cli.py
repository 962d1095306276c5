"""
Command Line Interface for Deck Planner

Provides entry points for:
- resolve: Turn a template plus form data into a JSON slide plan
- diagnose: Run template diagnostics
- validate: Check a template file against the JSON schema
"""

import sys
import json
import logging
import argparse
from pathlib import Path

from .config import load_config
from .diagnose import diagnose_template
from .models import load_form_data, load_template, save_slides, slides_to_dicts, validate_template_json
from .resolver import get_resolved_slides


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _report_error(exc: Exception, verbose: bool) -> int:
    print(f"\nError: {exc}", file=sys.stderr)
    if verbose:
        import traceback
        traceback.print_exc()
    return 1


def resolve_command(args: argparse.Namespace) -> int:
    """Execute resolve command."""
    try:
        config = load_config(args.config)
        template = load_template(args.template)
        form_data = load_form_data(args.data)

        slides = get_resolved_slides(template, form_data, config)

        if args.output:
            save_slides(slides, args.output)
            print(f"Resolved {len(slides)} slides for '{template.title}'")
            print(f"Saved slide plan to: {args.output}")
        else:
            print(json.dumps({"slides": slides_to_dicts(slides)}, indent=2, ensure_ascii=False))

        return 0

    except Exception as e:
        return _report_error(e, args.verbose)


def diagnose_command(args: argparse.Namespace) -> int:
    """Execute diagnose command."""
    try:
        config = load_config(args.config)
        report = diagnose_template(load_template(args.template), config=config)

        if args.json:
            print(json.dumps(report.to_dict(), indent=2))
        else:
            report.print_report()

        if args.strict and report.has_blocking_issues:
            return 1

        return 0

    except Exception as e:
        return _report_error(e, args.verbose)


def validate_command(args: argparse.Namespace) -> int:
    """Execute validate command."""
    errors = validate_template_json(args.template)
    if errors:
        print(f"{Path(args.template).name}: {len(errors)} problem(s)")
        for error in errors:
            print(f"  - {error}")
        return 1

    print(f"{Path(args.template).name}: valid")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='deck-planner',
        description='Deck Planner - Resolve report templates and form data into slide plans',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s resolve template.json data.json --output plan.json
  %(prog)s resolve template.json data.json --config planner.yaml
  %(prog)s diagnose template.json --json
  %(prog)s validate template.json
        """
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Show detailed output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Resolve command
    resolve_parser = subparsers.add_parser('resolve', help='Resolve a slide plan')
    resolve_parser.add_argument('template', help='Report template (JSON)')
    resolve_parser.add_argument('data', help='Form data (JSON)')
    resolve_parser.add_argument('--config', '-c', help='Resolver configuration file (YAML/JSON)')
    resolve_parser.add_argument('--output', '-o', help='Write the slide plan here instead of stdout')
    resolve_parser.add_argument('-v', '--verbose', action='store_true', help='Show detailed output')

    # Diagnose command
    diagnose_parser = subparsers.add_parser('diagnose', help='Run template diagnostics')
    diagnose_parser.add_argument('template', help='Report template (JSON)')
    diagnose_parser.add_argument('--config', '-c', help='Resolver configuration file (YAML/JSON)')
    diagnose_parser.add_argument('--strict', action='store_true', help='Exit with error if blocking issues found')
    diagnose_parser.add_argument('--json', action='store_true', help='Output results as JSON')
    diagnose_parser.add_argument('-v', '--verbose', action='store_true', help='Show detailed output')

    # Validate command
    validate_parser = subparsers.add_parser('validate', help='Validate a template against the JSON schema')
    validate_parser.add_argument('template', help='Report template (JSON)')
    validate_parser.add_argument('-v', '--verbose', action='store_true', help='Show detailed output')

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    _configure_logging(args.verbose)

    if args.command == 'resolve':
        return resolve_command(args)
    elif args.command == 'diagnose':
        return diagnose_command(args)
    elif args.command == 'validate':
        return validate_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())

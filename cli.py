#!/usr/bin/env python3
"""
Recog CLI

Command-line interface for matching text against fingerprint databases
and verifying fingerprint examples.

Usage:
    recog match --db <file> [--input <file>] [--base64] [--format json|text]
    recog verify --db <file> [--format text|json] [--verbose]
"""

import argparse
import json
import sys
from typing import List, Optional

from fingerprints import (
    Matcher,
    MatchResult,
    RecogError,
    VerificationReport,
    load_fingerprints_from_file,
    verify_database
)


def format_result_text(result: MatchResult) -> str:
    """Format a match result as an indented block"""
    lines = [f"Description: {result.description}"]
    for key, value in result.parameters.items():
        lines.append(f"  {key}: {value}")
    return "\n".join(lines)


def format_report_text(report: VerificationReport, verbose: bool) -> str:
    """Format a verification report for the terminal"""
    lines = [
        "Verification Results:",
        f"  Total examples: {report.total_examples}",
        f"  Matched examples: {report.matched_examples}",
        f"  Failed examples: {report.failed_examples}",
    ]
    if report.total_examples:
        lines.append(f"  Success rate: {report.success_rate:.2%}")

    if verbose and report.failures:
        lines.append("")
        lines.append("Failures:")
        for failure in report.failures:
            lines.append(f"  ✗ {failure.description} -> {failure.input} ({failure.reason})")

    if verbose and report.parameter_mismatches:
        lines.append("")
        lines.append("Parameter mismatches:")
        for mismatch in report.parameter_mismatches:
            lines.append(
                f"  ✗ {mismatch.description}: {mismatch.name} "
                f"expected {mismatch.expected!r}, got {mismatch.actual!r}"
            )
    return "\n".join(lines)


def read_input(path: Optional[str]) -> str:
    """Read input text from a file, or stdin when no file is given"""
    if path:
        with open(path, encoding="utf-8") as f:
            return f.read().strip()
    return sys.stdin.read().strip()


def cmd_match(args) -> int:
    """Match input against fingerprints"""
    matcher = Matcher(load_fingerprints_from_file(args.db))
    text = read_input(args.input)

    if args.base64:
        results = matcher.match_base64(text)
    else:
        results = matcher.match_text(text)

    if args.format == 'json':
        for result in results:
            print(result.to_json())
    else:
        for result in results:
            print(format_result_text(result))
            print()

    return 0


def cmd_verify(args) -> int:
    """Verify fingerprint examples"""
    report = verify_database(load_fingerprints_from_file(args.db))

    if args.format == 'json':
        print(json.dumps(report.to_dict(verbose=args.verbose), indent=2, ensure_ascii=False))
    else:
        print(format_report_text(report, args.verbose))

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='recog',
        description='Fingerprint-based recognition tool'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    # match command
    match_parser = subparsers.add_parser('match', help='Match input against fingerprints')
    match_parser.add_argument('-d', '--db', required=True, help='Fingerprint database file')
    match_parser.add_argument('-i', '--input', help='Input file (stdin if not provided)')
    match_parser.add_argument('-b', '--base64', action='store_true',
                              help='Base64 decode input before matching')
    match_parser.add_argument('-f', '--format', choices=['json', 'text'], default='json')

    # verify command
    verify_parser = subparsers.add_parser('verify', help='Verify fingerprint examples')
    verify_parser.add_argument('-d', '--db', required=True, help='Fingerprint database file')
    verify_parser.add_argument('-f', '--format', choices=['text', 'json'], default='text')
    verify_parser.add_argument('-v', '--verbose', action='store_true',
                               help='Show detailed results')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    commands = {
        'match': cmd_match,
        'verify': cmd_verify,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except (RecogError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())

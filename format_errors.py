#!/usr/bin/env python3
"""
CLI tool for reshaping linter output into kakoune's lint format.

Usage:
    php -l test.php 2>&1 | python format_errors.py --errfmt '%k: %m in %f on line %l'
"""

import click
import itertools
import os
import sys
from typing import IO, Optional

from tqdm import tqdm

# Add the package to Python path
sys.path.insert(0, os.path.dirname(__file__))

from errfmt import PASSTHROUGH_ERRFMT, CompileError, KakouneSerializer, LineMatcher, MatchReport
from errfmt import compile_template
from errfmt.io_utils import JSONLWriter, iter_lines


@click.command()
@click.option('--errfmt', '-e',
              default=PASSTHROUGH_ERRFMT,
              show_default=True,
              envvar='ERRFMT_FORMAT',
              help='Errorformat string using %f, %l, %c, %k, %m and %%')
@click.option('--file', '-f', 'default_file',
              help='File name for diagnostics that do not capture one')
@click.option('--force-file',
              is_flag=True,
              help='Use --file even when the linter reports a file name')
@click.option('--input', '--in', 'input_file',
              type=click.File('r', encoding='utf-8', errors='replace'),
              default='-',
              help='Linter output to read (default: stdin)')
@click.option('--output', '--out', 'output_file',
              type=click.File('w', encoding='utf-8'),
              default='-',
              help='Where to write diagnostics (default: stdout)')
@click.option('--format', 'output_format',
              type=click.Choice(['kakoune', 'jsonl']),
              default='kakoune',
              help='Output format (default: kakoune)')
@click.option('--progress',
              is_flag=True,
              help='Show a progress bar on stderr')
@click.option('--sample-lines',
              type=int,
              help='Process only first N lines (for testing)')
@click.option('--verbose', '-v',
              is_flag=True,
              help='Print a matching summary on stderr')
def format_errors(errfmt: str,
                  default_file: Optional[str],
                  force_file: bool,
                  input_file: IO[str],
                  output_file: IO[str],
                  output_format: str,
                  progress: bool,
                  sample_lines: Optional[int],
                  verbose: bool):
    """
    Match linter output against an errorformat string.

    Every input line that fits the errorformat becomes one diagnostic; all
    other lines (headers, summaries, code excerpts) are skipped.

    Examples:

    \b
    # PHP syntax check
    php -l test.php 2>&1 | python format_errors.py -e '%k: %m in %f on line %l'

    \b
    # eslint in compact format, for a buffer saved to a temporary file
    eslint -f compact "$tmp" | python format_errors.py \\
        -e "%f: line %l, col %c, %k - %m" --file "$buffile" --force-file

    \b
    # Structured output with a summary
    python format_errors.py -e '%f:%l:%c: %k: %m' --in build.log \\
        --format jsonl --out diagnostics.jsonl --verbose
    """

    if force_file and not default_file:
        raise click.UsageError("--force-file requires --file")

    try:
        template = compile_template(errfmt)
    except CompileError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    # JSON encodes ints through str(), which refuses very long digit runs.
    if hasattr(sys, 'set_int_max_str_digits'):
        sys.set_int_max_str_digits(0)

    if verbose:
        click.echo(f"Errorformat: {template.source} ({len(template)} segments)", err=True)

    matcher = LineMatcher(template)
    serializer = KakouneSerializer(default_file=default_file, force_file=force_file)
    report = MatchReport()

    lines = iter_lines(input_file)
    if sample_lines:
        lines = itertools.islice(lines, sample_lines)

    try:
        if output_format == 'jsonl':
            with JSONLWriter(output_file) as writer:
                for line in tqdm(lines, desc="Matching lines", unit="line",
                                 disable=not progress, file=sys.stderr):
                    diagnostic = _match(matcher, report, line)
                    if diagnostic is not None:
                        if force_file or (default_file and not diagnostic.file):
                            diagnostic.file = default_file
                        writer.write_diagnostic(diagnostic)
        else:
            for line in tqdm(lines, desc="Matching lines", unit="line",
                             disable=not progress, file=sys.stderr):
                diagnostic = _match(matcher, report, line)
                if diagnostic is not None:
                    output_file.write(serializer.render(diagnostic) + "\n")

    except KeyboardInterrupt:
        click.echo("\n❌ Matching cancelled by user", err=True)
        sys.exit(1)

    if verbose:
        _print_summary(report)


def _match(matcher: LineMatcher, report: MatchReport, line: str):
    """Match one line and record the outcome."""
    diagnostic = matcher.match(line)
    if diagnostic is None:
        report.add_no_match(line)
    else:
        report.add_match(diagnostic)
    return diagnostic


def _print_summary(report: MatchReport):
    """Print matching statistics on stderr."""
    summary = report.get_summary()
    click.echo(f"\n📊 Results:", err=True)
    click.echo(f"   • Total lines processed: {summary['total_lines']}", err=True)
    click.echo(f"   • Matched lines: {summary['matched_lines']}", err=True)
    click.echo(f"   • Match rate: {summary['match_rate']:.1f}%", err=True)
    for kind, count in sorted(summary['kind_distribution'].items()):
        click.echo(f"   • {kind}: {count}", err=True)

    if summary['top_files']:
        click.echo(f"\n📁 Top files:", err=True)
        for file_name, count in summary['top_files']:
            click.echo(f"   • {file_name}: {count}", err=True)

    if summary['unmatched_lines'] > 0:
        click.echo(f"\n🔍 Sample unmatched lines:", err=True)
        for i, sample in enumerate(summary['unmatched_samples'][:5], 1):
            click.echo(f"   {i}. {sample}", err=True)
        if len(summary['unmatched_samples']) > 5:
            click.echo(f"   ... and {len(summary['unmatched_samples']) - 5} more", err=True)


if __name__ == '__main__':
    format_errors()

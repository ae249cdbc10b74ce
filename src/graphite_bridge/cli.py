"""
graphite-bridge command line.

Commands:
    graphite-bridge translate <name> -l key=value ...  - Show the paths a metric is written to
    graphite-bridge parse <path> --prefix <prefix>       - Recover labels from a stored path
    graphite-bridge check-config <file>                  - Validate a rules file
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from typing import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from graphite_bridge.config.loader import load_config, parse_format
from graphite_bridge.config.settings import get_settings
from graphite_bridge.core.errors import ExitCode, ValidationError, main_with_error_handling
from graphite_bridge.logging import configure_logging
from graphite_bridge.paths.models import METRIC_NAME_LABEL
from graphite_bridge.paths.parser import metric_labels_from_path

console = Console()


def parse_label_args(name: str, labels: Sequence[str] | None) -> dict[str, str]:
    """Build a metric from a name and ``key=value`` arguments."""
    metric = {METRIC_NAME_LABEL: name}
    for item in labels or ():
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ValidationError("Labels must be given as key=value", details={"label": item})
        if key in metric:
            raise ValidationError("Duplicate label", details={"label": key})
        metric[key] = value
    return metric


@main_with_error_handling()
def translate_command(args: argparse.Namespace) -> int:
    """Print every path the metric would be written to."""
    config = load_config(args.config)
    prefix = args.prefix if args.prefix is not None else config.prefix
    fmt = parse_format(args.format) if args.format else config.format

    config = replace(config, prefix=prefix, format=fmt)

    metric = parse_label_args(args.name, args.label)
    paths = config.translator().paths(metric)

    if args.json:
        print(json.dumps(paths))
    elif not paths:
        console.print("[yellow]No paths (suppressed by rule)[/yellow]")
    else:
        for path in paths:
            print(path)
    return ExitCode.SUCCESS


@main_with_error_handling()
def parse_command(args: argparse.Namespace) -> int:
    """Print the labels recovered from a default-format path."""
    prefix = args.prefix if args.prefix is not None else get_settings().default_prefix
    labels = metric_labels_from_path(args.path, prefix)

    if args.json:
        print(json.dumps(dict(labels)))
        return ExitCode.SUCCESS

    table = Table(title=Text(args.path))
    table.add_column("Label", style="cyan")
    table.add_column("Value")
    for name, value in labels:
        table.add_row(Text(name), Text(value))
    console.print(table)
    return ExitCode.SUCCESS


@main_with_error_handling()
def check_config_command(args: argparse.Namespace) -> int:
    """Validate a rules file and summarize its rules."""
    config = load_config(args.file)

    console.print(f"[green]✓[/green] {args.file}: {len(config.rules)} rule(s), format {config.format}")
    if not config.rules:
        return ExitCode.SUCCESS

    table = Table()
    table.add_column("#", justify="right")
    table.add_column("match")
    table.add_column("match_re")
    table.add_column("template")
    table.add_column("continue")
    for index, rule in enumerate(config.rules):
        table.add_row(
            str(index),
            Text(", ".join(f"{k}={v}" for k, v in rule.match.items())),
            Text(", ".join(f"{k}=~{p.pattern}" for k, p in rule.match_re.items())),
            Text(rule.template or "-"),
            "yes" if rule.continues else "no",
        )
    console.print(table)
    return ExitCode.SUCCESS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graphite-bridge",
        description="Translate between labeled metrics and graphite paths",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: GRAPHITE_BRIDGE_LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command")

    translate_parser = subparsers.add_parser("translate", help="Show the paths a metric is written to")
    translate_parser.add_argument("name", help="Metric name")
    translate_parser.add_argument(
        "-l", "--label", action="append", metavar="KEY=VALUE", help="Label (repeatable)"
    )
    translate_parser.add_argument("--config", help="Rules file (YAML)")
    translate_parser.add_argument("--prefix", default=None, help="Override the path prefix")
    translate_parser.add_argument("--format", default=None, help="carbon, carbon-tags or carbon-openmetrics")
    translate_parser.add_argument("--json", action="store_true", help="Output paths as JSON")
    translate_parser.set_defaults(func=translate_command)

    parse_parser = subparsers.add_parser("parse", help="Recover labels from a stored path")
    parse_parser.add_argument("path", help="Path in carbon format")
    parse_parser.add_argument("--prefix", default=None, help="Prefix the path was written with")
    parse_parser.add_argument("--json", action="store_true", help="Output labels as JSON")
    parse_parser.set_defaults(func=parse_command)

    check_parser = subparsers.add_parser("check-config", help="Validate a rules file")
    check_parser.add_argument("file", help="Rules file (YAML)")
    check_parser.set_defaults(func=check_config_command)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level or get_settings().log_level)

    if not getattr(args, "func", None):
        parser.print_help()
        return ExitCode.SUCCESS
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

"""Console reporting of link check results."""

from __future__ import annotations

import json

import click

from linkcheck.check.runner import CheckReport
from linkcheck.core.progress import status

SUMMARY_PREFIX = "Link checking complete: "


def summary_line(report: CheckReport) -> str:
    return f"{SUMMARY_PREFIX}{report.stats}"


def emit_report(report: CheckReport, *, as_json: bool = False) -> None:
    """Write the report to stdout.

    Plain mode prints one line per unresolved reference followed by the
    summary line; JSON mode prints a single document.
    """
    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    for error in report.errors:
        click.echo(error.message)
    click.echo(summary_line(report))

    if report.closure is not None and report.closure.not_found:
        status(
            f"{report.closure.not_found} referenced class(es) not found on the classpath",
            style="warning",
        )

"""linkcheck CLI - verify that compiled classes only reference existing symbols."""

from __future__ import annotations

from pathlib import Path

import click

from linkcheck.check.runner import CheckRequest, run_check
from linkcheck.config.loader import detect_java_home, load_config
from linkcheck.config.models import CheckConfig, LinkCheckConfig
from linkcheck.core.errors import ConfigError, LinkCheckError
from linkcheck.core.logging import configure_logging, get_log_file_path, get_logger
from linkcheck.inputs.classpath import Classpath
from linkcheck.inputs.discovery import discover_artifacts
from linkcheck.report import emit_report

_PATH = click.Path(path_type=Path)


def _merge_check_config(
    config: LinkCheckConfig,
    whitelist_from: tuple[str, ...],
    whitelist_to: tuple[str, ...],
    classpath: tuple[Path, ...],
    java_home: Path | None,
) -> CheckConfig:
    """Command-line lists extend the configured ones; java_home overrides.

    With no JDK configured anywhere, the one found by ``detect_java_home`` backs
    the classpath so runtime classes such as java/lang/Object resolve.
    """
    base = config.check
    home = java_home or base.java_home or detect_java_home()
    try:
        return CheckConfig(
            whitelist_from=[*base.whitelist_from, *whitelist_from],
            whitelist_to=[*base.whitelist_to, *whitelist_to],
            classpath=[*base.classpath, *(str(p) for p in classpath)],
            java_home=str(home) if home else None,
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e


def _build_request(
    config: LinkCheckConfig,
    check_config: CheckConfig,
    checks: tuple[Path, ...],
    libs: tuple[Path, ...],
    packages: tuple[str, ...],
    artifacts_dir: Path | None,
) -> CheckRequest:
    request = CheckRequest(
        checks=list(checks),
        libs=list(libs),
        whitelist_from=list(check_config.whitelist_from),
        whitelist_to=list(check_config.whitelist_to),
    )
    if packages:
        root = artifacts_dir or (
            Path(config.discovery.artifacts_dir) if config.discovery.artifacts_dir else None
        )
        if root is None:
            raise ConfigError.missing_required("discovery.artifacts_dir")
        for package in packages:
            found = discover_artifacts(root, package)
            request.checks.extend(found.checks)
            request.libs.extend(found.libs)
    return request


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version="0.1.0", prog_name="linkcheck")
@click.option(
    "--check", "checks", multiple=True, type=_PATH, metavar="PATH",
    help="Check this jar/class",
)
@click.option(
    "--lib", "libs", multiple=True, type=_PATH, metavar="PATH",
    help="Parse this jar/class as a required library but do not check it",
)
@click.option(
    "--whitelistFrom", "--whitelist-from", "whitelist_from", multiple=True, metavar="PREFIX",
    help="Whitelist calls from this prefix",
)
@click.option(
    "--whitelistTo", "--whitelist-to", "whitelist_to", multiple=True, metavar="PREFIX",
    help="Whitelist calls to this prefix",
)
@click.option(
    "--qbtDefaults", "--defaults", "packages", multiple=True, metavar="PACKAGE",
    help="Configure check and lib from the artifacts directory of this package",
)
@click.option(
    "--artifacts-dir", type=_PATH, default=None,
    help="Artifacts root used by --qbtDefaults (overrides discovery.artifacts_dir)",
)
@click.option(
    "-cp", "--classpath", "classpath", multiple=True, type=_PATH, metavar="ENTRY",
    help="Directory, jar or jmod searched for classes no input declares",
)
@click.option(
    "--java-home", type=_PATH, default=None,
    help="JDK whose runtime classes are appended to the classpath",
)
@click.option(
    "--config", "config_path", type=_PATH, default=None,
    help="Config file (default: ./linkcheck.yaml if present)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    checks: tuple[Path, ...],
    libs: tuple[Path, ...],
    whitelist_from: tuple[str, ...],
    whitelist_to: tuple[str, ...],
    packages: tuple[str, ...],
    artifacts_dir: Path | None,
    classpath: tuple[Path, ...],
    java_home: Path | None,
    config_path: Path | None,
    as_json: bool,
    verbose: bool,
) -> None:
    """Verify that classes only reference classes, fields and methods that exist.

    Every class given with --check is verified against itself, the --lib
    classes and the ambient classpath. Exits 1 if any reference is missing.
    """
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.UsageError(str(e)) from e

    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)
    log = get_logger("cli")

    if not (checks or libs or packages):
        raise click.UsageError("Nothing to do: give at least one --check, --lib or --qbtDefaults")

    check_config = _merge_check_config(config, whitelist_from, whitelist_to, classpath, java_home)

    try:
        request = _build_request(config, check_config, checks, libs, packages, artifacts_dir)
        with Classpath.from_config(check_config) as lookup:
            log.info("run.start", checks=len(request.checks), libs=len(request.libs))
            report = run_check(request, lookup)
    except LinkCheckError as e:
        log.error("run.failed", error=e.error_name, **e.details)
        message = str(e)
        if log_file := get_log_file_path():
            message += f"\nSee {log_file} for details."
        raise click.ClickException(message) from e

    emit_report(report, as_json=as_json)
    ctx.exit(report.exit_code)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()

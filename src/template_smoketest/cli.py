"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from dataclasses import replace

import click

from template_smoketest.configuration import (
    DEFAULT_CONFIG_FILENAME,
    Configuration,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from template_smoketest.monitoring import parse_listen_address, run_monitor
from template_smoketest.run_execution import RunRequest, execute_template_smoketest

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LEVELS_BY_VERBOSITY = (logging.WARNING, logging.INFO, logging.DEBUG)


class CliError(Exception):
    """Custom CLI error."""


def _configure_logging(verbosity: int, log_level: str | None) -> None:
    if log_level:
        level = logging.getLevelName(log_level.upper())
    else:
        level = _LEVELS_BY_VERBOSITY[min(verbosity, len(_LEVELS_BY_VERBOSITY) - 1)]
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)


def _cluster_options(function):
    options = (
        click.option(
            "--config",
            "config_path",
            required=False,
            type=click.Path(path_type=str),
            help="Path to the YAML configuration file",
        ),
        click.option("--kubeconfig", required=False, help="Path to a kubeconfig file"),
        click.option("--context", required=False, help="Kubeconfig context to use"),
        click.option(
            "--namespace",
            required=False,
            help="Namespace to run in (default: namespace of the kubeconfig context)",
        ),
        click.option(
            "--in-cluster/--no-in-cluster",
            default=None,
            help="Authenticate with the pod service account",
        ),
        click.option(
            "--keep-objects/--no-keep-objects",
            default=None,
            help="Keep objects created by the smoketest",
        ),
        click.option(
            "--timeout",
            "timeout_seconds",
            type=click.IntRange(min=1),
            required=False,
            help="Timeout for launching a template instance (seconds)  [default: 60]",
        ),
    )
    for option in reversed(options):
        function = option(function)
    return function


def _resolve_configuration(  # pylint: disable=too-many-arguments
    config_path: str | None,
    *,
    kubeconfig: str | None = None,
    context: str | None = None,
    namespace: str | None = None,
    in_cluster: bool | None = None,
    keep_objects: bool | None = None,
    timeout_seconds: int | None = None,
    listen_address: str | None = None,
    interval_seconds: int | None = None,
) -> Configuration:
    try:
        configuration = load_configuration(config_path)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc

    cluster_overrides = {
        key: value
        for key, value in (
            ("kubeconfig_path", kubeconfig),
            ("context", context),
            ("namespace", namespace),
            ("in_cluster", in_cluster),
        )
        if value is not None
    }
    monitor_overrides = {
        key: value
        for key, value in (
            ("keep_objects", keep_objects),
            ("timeout_seconds", timeout_seconds),
            ("listen_address", listen_address),
            ("interval_seconds", interval_seconds),
        )
        if value is not None
    }
    return replace(
        configuration,
        cluster=replace(configuration.cluster, **cluster_overrides),
        monitor=replace(configuration.monitor, **monitor_overrides),
    )


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="template-smoketest-monitor")
@click.option(
    "-v", "--verbose", "verbosity", count=True, help="Increase log verbosity (-vv for debug)"
)
@click.option(
    "--log-level",
    required=False,
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    help="Explicit log level; overrides --verbose",
)
def cli(verbosity: int, log_level: str | None) -> None:
    """Smoketest for OpenShift templates and template instances."""
    _configure_logging(verbosity, log_level)


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a YAML configuration file with defaults and guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="run")
@_cluster_options
def run_smoketest(  # pylint: disable=too-many-arguments
    config_path: str | None,
    kubeconfig: str | None,
    context: str | None,
    namespace: str | None,
    in_cluster: bool | None,
    keep_objects: bool | None,
    timeout_seconds: int | None,
) -> None:
    """Run the template smoketest once and report the result."""
    configuration = _resolve_configuration(
        config_path,
        kubeconfig=kubeconfig,
        context=context,
        namespace=namespace,
        in_cluster=in_cluster,
        keep_objects=keep_objects,
        timeout_seconds=timeout_seconds,
    )
    outcome = execute_template_smoketest(
        RunRequest(
            cluster=configuration.cluster,
            keep_objects=configuration.monitor.keep_objects,
            timeout_seconds=configuration.monitor.timeout_seconds,
        )
    )
    summary = (
        f"run {outcome.run_id}, launch {outcome.launch_duration_seconds:.2f}s, "
        f"total {outcome.total_duration_seconds:.2f}s"
    )
    if not outcome.succeeded:
        raise CliError(f"failure: {outcome.reason} ({summary})")
    click.echo(f"success ({summary})")


@cli.command(name="monitor")
@_cluster_options
@click.option(
    "--listen-address",
    required=False,
    help="The address to listen on for HTTP requests  [default: :8080]",
)
@click.option(
    "--interval",
    "interval_seconds",
    type=click.IntRange(min=1),
    required=False,
    help="Interval to run the smoketest job (seconds)  [default: 300]",
)
def monitor(  # pylint: disable=too-many-arguments
    config_path: str | None,
    kubeconfig: str | None,
    context: str | None,
    namespace: str | None,
    in_cluster: bool | None,
    keep_objects: bool | None,
    timeout_seconds: int | None,
    listen_address: str | None,
    interval_seconds: int | None,
) -> None:
    """Run the smoketest periodically and serve /healthz and /metrics."""
    configuration = _resolve_configuration(
        config_path,
        kubeconfig=kubeconfig,
        context=context,
        namespace=namespace,
        in_cluster=in_cluster,
        keep_objects=keep_objects,
        timeout_seconds=timeout_seconds,
        listen_address=listen_address,
        interval_seconds=interval_seconds,
    )
    try:
        parse_listen_address(configuration.monitor.listen_address)
    except ValueError as exc:
        raise CliError(str(exc)) from exc
    try:
        run_monitor(configuration)
    except OSError as exc:
        raise CliError(f"Failed to serve on {configuration.monitor.listen_address}: {exc}") from exc


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

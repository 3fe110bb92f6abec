"""taprunner CLI - render a TAP stream with a test-runner reporter."""

import json
from pathlib import Path
from typing import BinaryIO

import click

from taprunner.config.loader import load_config
from taprunner.core.errors import TapRunnerError
from taprunner.core.logging import configure_logging, get_logger
from taprunner.reporters import REPORTERS, get_reporter
from taprunner.runner.runner import Runner

log = get_logger("cli")


@click.command()
@click.version_option(version="0.1.0", prog_name="taprunner")
@click.argument("source", default="-", type=click.File("rb"))
@click.option(
    "-r",
    "--reporter",
    type=click.Choice(sorted(REPORTERS)),
    default=None,
    help="Reporter to use (default: from config, else spec)",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    source: BinaryIO,
    reporter: str | None,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Read TAP from SOURCE (default: stdin) and report it.

    Exits with status 1 when any test failed or the stream was not ok.
    """
    reporter_name = reporter
    try:
        overrides = {"logging": {"level": "DEBUG"}} if verbose else {}
        config = load_config(config_path, **overrides)
        configure_logging(config=config.logging)

        reporter_name = reporter or config.reporter.name
        reporter_cls = get_reporter(reporter_name)
        runner = Runner(config=config.runner)
        report = reporter_cls(runner, config=config.reporter)

        runner.feed(source)
    except TapRunnerError as e:
        log.debug("command_failed", **e.to_dict())
        if reporter_name == "json":
            click.echo(json.dumps({"error": e.to_dict()}, indent=2))
        raise click.ClickException(str(e)) from e

    summary = runner.summary
    log.debug(
        "stream_complete",
        tests=report.stats.tests,
        failures=report.stats.failures,
        ok=summary.ok if summary else None,
    )
    if report.failed or (summary is not None and not summary.ok):
        ctx.exit(1)


if __name__ == "__main__":
    cli()

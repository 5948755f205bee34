# ABOUTME: CLI package for biblioenrich, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.logging import RichHandler

from biblioenrich.cli.commands import classify_cmd, enrich_cmd


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


@click.group()
@click.version_option(package_name="biblioenrich")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
def cli(verbose: bool) -> None:
    """biblioenrich - enrich book lists with bibliographic and library holdings data."""
    _configure_logging(verbose)


cli.add_command(enrich_cmd.enrich)
cli.add_command(classify_cmd.classify)

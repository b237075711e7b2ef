"""CLI entry point for auto-swagger."""

import logging
from pathlib import Path

import click

from auto_swagger.errors import ConfigError
from auto_swagger.plugin import COMMAND, OFFLINE_START_HOOK, AutoSwaggerPlugin
from auto_swagger.service import ServiceConfig, dump_functions, load_service

CONFIG_OPTION = click.option(
    "-c",
    "--config",
    "config_path",
    default="serverless.yml",
    show_default=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Service descriptor to read.",
)


def _load(config_path: Path) -> ServiceConfig:
    try:
        return load_service(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """auto-swagger — generate Swagger docs from serverless functions and TypeScript types."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@CONFIG_OPTION
@click.option("-o", "--output", default="swagger.js", show_default=True, type=click.Path(dir_okay=False, path_type=Path), help="Generated document module.")
@click.option("--print-functions", is_flag=True, help="Print the function map once the documentation endpoints are added.")
def generate(config_path: Path, output: Path, print_functions: bool):
    """Generate the Swagger document and add the documentation endpoints."""
    service = _load(config_path)
    click.echo(f"Generating Swagger for {service.service}...")

    plugin = AutoSwaggerPlugin(service, {"output": output})
    try:
        plugin.run_command(COMMAND)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    except OSError as e:
        raise click.ClickException(f"Could not write {output}: {e}") from e

    document = plugin.document
    click.echo(f"Found {len(document.paths)} paths and {len(document.definitions)} definitions.")
    click.echo(f"Swagger saved to {output}")

    if print_functions:
        click.echo(dump_functions(service))


@main.command("offline-init")
@CONFIG_OPTION
@click.option("-o", "--output", default=None, type=click.Path(dir_okay=False, path_type=Path), help="Write the function map here instead of stdout.")
def offline_init(config_path: Path, output: Path | None):
    """Add the documentation endpoints as done when an offline server starts."""
    service = _load(config_path)
    plugin = AutoSwaggerPlugin(service)
    plugin.run_hook(OFFLINE_START_HOOK)

    functions = dump_functions(service)
    if output is None:
        click.echo(functions)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(functions, encoding="utf-8")
    click.echo(f"Function map saved to {output}")

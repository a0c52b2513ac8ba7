import logging

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import get_settings
from .loader import ConfigLoader, ConfigNotFound, InvalidQueryDefinition
from .model.graph import Model
from .model.models import MissingTypeError, Subject
from .sparql.generator import SPARQLGenerator

console = Console()

CONFIG_ERRORS = (ConfigNotFound, InvalidQueryDefinition, FileNotFoundError, MissingTypeError)


def setup_logging(level: str) -> None:
    """Send library logs to stderr through rich"""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True
    )


def fail(message: str) -> None:
    console.print(f"✗ {message}", style="red")
    raise SystemExit(1)


@click.group()
@click.option('--log-level', default=None, help='Override the configured log level')
def cli(log_level: str | None):
    """rdf-config CLI - SPARQL generation from RDF schema configs"""
    setup_logging(log_level or get_settings().log_level)


@cli.command()
@click.option('--config-dir', default=None, help='Configuration directory')
@click.option('--query-name', default=None, help='Query definition in sparql.yaml')
@click.option('--template', is_flag=True, help='Use {{name}} placeholders for parameters')
@click.option('--limit', type=int, default=None, help='LIMIT of the query')
@click.option('--offset', type=int, default=None, help='OFFSET of the query')
def sparql(
    config_dir: str | None,
    query_name: str | None,
    template: bool,
    limit: int | None,
    offset: int | None
):
    """Print the SPARQL query compiled from a query definition"""
    settings = get_settings()
    try:
        config = ConfigLoader(config_dir or settings.config_dir)
        generator = SPARQLGenerator(
            config,
            query_name=query_name or settings.sparql.query_name,
            template=template or settings.sparql.template,
            offset=settings.sparql.offset if offset is None else offset,
            limit=settings.sparql.limit if limit is None else limit
        )
        click.echo(generator.generate())

    except CONFIG_ERRORS as e:
        fail(f"SPARQL generation failed: {e}")


@cli.command()
@click.option('--config-dir', default=None, help='Configuration directory')
def queries(config_dir: str | None):
    """List query definitions"""
    settings = get_settings()
    try:
        config = ConfigLoader(config_dir or settings.config_dir)
        names = config.query_names()

        if not names:
            console.print("No query definitions found", style="yellow")
            return

        table = Table(title="SPARQL Queries")
        table.add_column("Name", style="cyan")
        table.add_column("Variables", style="green")
        table.add_column("Parameters")
        table.add_column("Description", style="dim")

        for name in names:
            query = config.query(name)
            table.add_row(
                name,
                " ".join(query.variables),
                ", ".join(f"{k}={v}" for k, v in query.parameters.items()),
                query.description
            )

        console.print(table)

    except CONFIG_ERRORS as e:
        fail(f"Failed: {e}")


def _object_label(terminal) -> str:
    if isinstance(terminal, Subject):
        return str(terminal.name)
    if terminal.value is None:
        return "N/A"
    return str(terminal.value)


def _object_kind(terminal) -> str:
    if isinstance(terminal, Subject):
        return "subject"
    return terminal.kind


@cli.command()
@click.option('--config-dir', default=None, help='Configuration directory')
def triples(config_dir: str | None):
    """Show the triples of the model"""
    settings = get_settings()
    try:
        model = Model.from_config(ConfigLoader(config_dir or settings.config_dir))

        table = Table(title="Model Triples")
        table.add_column("Subject", style="magenta")
        table.add_column("Property Path", style="yellow")
        table.add_column("Variable", style="cyan")
        table.add_column("Kind", style="dim")
        table.add_column("Object")

        for triple in model.triples:
            table.add_row(
                triple.subject.name,
                triple.property_path,
                triple.object_name or "",
                _object_kind(triple.object),
                _object_label(triple.object)
            )

        console.print(table)
        console.print(
            f"\n{len(model.subjects)} subjects, {len(model.triples)} triples",
            style="dim"
        )

    except CONFIG_ERRORS as e:
        fail(f"Failed: {e}")


if __name__ == '__main__':
    cli()

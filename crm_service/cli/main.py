"""Main CLI entry point for crm-service management commands."""

import click

from crm_service import __version__
from crm_service.cli.commands import database, server
from crm_service.core.settings import get_logging_settings
from crm_service.infra.logging import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="crm-service")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """CRM Service CLI - run the server and manage the database.

    \b
    Quick Start:
      crm-service db init     # Verify connection, create tables
      crm-service serve       # Run the HTTP server
    """
    ctx.ensure_object(dict)
    setup_logging(log_settings=get_logging_settings())


cli.add_command(database.db)
cli.add_command(server.serve)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()

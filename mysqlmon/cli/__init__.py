from __future__ import annotations

import sys
from typing import Optional

import click
import sentry_sdk
import structlog

from mysqlmon import settings
from mysqlmon.console.repl import Repl
from mysqlmon.console.session import ConsoleSession, SessionState
from mysqlmon.environment import setup_logging, setup_sentry
from mysqlmon.mysql.errors import ConnectError, MySQLError
from mysqlmon.mysql.native import MySQLConnection

LOG_LEVELS = ["critical", "error", "warning", "info", "debug", "notset"]

logger = structlog.get_logger(module=__name__)


def run_once(session: ConsoleSession, statement: str) -> int:
    try:
        session.echo(session.execute(statement))
    except MySQLError as e:
        logger.info("statement_failed", error=e.to_dict())
        click.echo(session.format_error(e), err=True)
        return 1
    return 0


@click.command(context_settings={"help_option_names": ["--help"]})
@click.option("-h", "--host", default=settings.DEFAULT_HOST, help="Host to connect to.")
@click.option(
    "-P",
    "--port",
    type=int,
    default=settings.DEFAULT_PORT,
    help="Port number to connect to.",
)
@click.option("-u", "--user", help="Username for login.")
@click.option("-p", "--password", help="Password for login.")
@click.option("-D", "--database", help="Database to use.")
@click.option("-e", "--execute", "statement", help="Execute a statement and quit.")
@click.option("--no-colors", is_flag=True, help="Disable colors in output.")
@click.option(
    "--log-level", help="Logging level to use.", type=click.Choice(LOG_LEVELS)
)
@click.version_option(package_name="mysqlmon")
def main(
    *,
    host: str,
    port: int,
    user: Optional[str],
    password: Optional[str],
    database: Optional[str],
    statement: Optional[str],
    no_colors: bool,
    log_level: Optional[str] = None,
) -> None:
    """
    Cross-platform MySQL client.

    Without --execute an interactive console is started: statements end with
    ';', 'status' describes the connection and '\\c' clears the screen.
    """
    setup_logging(log_level)
    setup_sentry()

    connection = MySQLConnection(
        host=host, port=port, user=user, password=password, database=database
    )
    try:
        connection.connect()
    except ConnectError as e:
        sentry_sdk.capture_exception(e)
        raise click.ClickException(str(e))

    session = ConsoleSession(
        connection,
        SessionState(
            host=host,
            port=port,
            current_database=database,
            color_enabled=not no_colors,
        ),
    )

    try:
        if statement is not None:
            sys.exit(run_once(session, statement))
        Repl(session).run()
    finally:
        connection.close()

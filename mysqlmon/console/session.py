from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import click
import structlog

from mysqlmon.console.classifier import (
    ClearScreen,
    ForwardToServer,
    SelectDatabase,
    ShowStatus,
    classify,
)
from mysqlmon.mysql.errors import MySQLError, QueryError
from mysqlmon.mysql.native import MySQLConnection
from mysqlmon.table import (
    Table,
    build_properties_table,
    build_table,
    format_affected,
    format_summary,
    format_table,
)
from mysqlmon.values import render

logger = structlog.get_logger(module=__name__)

CLEAR_SCREEN = "\x1b[2J\x1b[1;1H"

VERSION_QUERY = "SELECT VERSION()"
CHARSET_QUERY = "SELECT @@character_set_client"

MESSAGE_STYLE = {"fg": "green"}
ERROR_STYLE = {"fg": "bright_red"}
BANNER_STYLE = {"fg": "bright_blue"}

BANNER = """
Welcome to the MySQL monitor.  Commands end with ;

Server version: {version}
Connection Id: {connection_id}

mysqlmon, a cross-platform MySQL client.

Type 'status' for connection details. Type '\\c' to clear the screen.
"""


@dataclass
class SessionState:
    host: str
    port: int
    current_database: Optional[str] = None
    color_enabled: bool = True


@dataclass(frozen=True)
class Outcome:
    """
    What a statement produced. Any field may be unset: a ``use`` only has a
    message, ``clear`` only a control sequence.
    """

    table: Optional[Table] = None
    summary: Optional[str] = None
    message: Optional[str] = None
    control: Optional[str] = None


class ConsoleSession:
    def __init__(self, connection: MySQLConnection, state: SessionState) -> None:
        self.connection = connection
        self.state = state

    @property
    def color_enabled(self) -> bool:
        return self.state.color_enabled

    def execute(self, statement: str) -> Optional[Outcome]:
        """
        Run one complete statement. Errors from the server are raised as
        QueryError and leave the session state untouched.
        """
        directive = classify(statement)

        if isinstance(directive, ShowStatus):
            return self.show_status()
        if isinstance(directive, ClearScreen):
            return Outcome(control=CLEAR_SCREEN)
        if isinstance(directive, SelectDatabase):
            return self.select_database(directive.name)
        assert isinstance(directive, ForwardToServer)
        return self.forward(directive.statement)

    def select_database(self, name: str) -> Outcome:
        self.connection.select_db(name)
        self.state.current_database = name
        logger.debug("database_changed", database=name)
        return Outcome(message=f"Database changed to '{name}'")

    def forward(self, statement: str) -> Optional[Outcome]:
        start = time.perf_counter()
        result = self.connection.execute(statement)

        if not result.columns:
            elapsed = time.perf_counter() - start
            if result.affected_rows > 0:
                return Outcome(message=format_affected(result.affected_rows, elapsed))
            return None

        table = build_table(result.columns, result.rows, self.color_enabled)
        elapsed = time.perf_counter() - start
        return Outcome(table=table, summary=format_summary(table.row_count, elapsed))

    def _lookup(self, query: str) -> Optional[Any]:
        try:
            return self.connection.query_scalar(query)
        except QueryError as e:
            logger.warning("status_lookup_failed", query=query, error=e.to_dict())
            return None

    def show_status(self) -> Outcome:
        version = self._lookup(VERSION_QUERY)
        charset = self._lookup(CHARSET_QUERY)

        properties: List[Tuple[str, Any]] = []
        if version is not None:
            properties.append(("Server version:", version))
        properties.append(("Server:", f"{self.state.host}:{self.state.port}"))
        properties.append(("Current database:", self.state.current_database or "None"))
        if charset is not None:
            properties.append(("Character set:", charset))

        return Outcome(table=build_properties_table(properties, self.color_enabled))

    def welcome_banner(self) -> Optional[str]:
        try:
            version = self.connection.query_scalar(VERSION_QUERY)
            connection_id = self.connection.connection_id()
        except QueryError as e:
            logger.warning("welcome_banner_failed", error=e.to_dict())
            return None

        banner = BANNER.format(
            version=render(version).text, connection_id=connection_id
        )
        return self.style(banner, BANNER_STYLE)

    def style(self, text: str, style: Any) -> str:
        return click.style(text, **style) if self.color_enabled else text

    def format_outcome(self, outcome: Outcome) -> str:
        parts: List[str] = []
        if outcome.message is not None:
            parts.append(self.style(outcome.message, MESSAGE_STYLE))
        if outcome.table is not None:
            parts.append(format_table(outcome.table))
        if outcome.summary:
            parts.append("\n" + self.style(outcome.summary, MESSAGE_STYLE))
        return "\n".join(parts)

    def format_error(self, error: Exception) -> str:
        if isinstance(error, MySQLError) and error.code >= 0:
            return self.style(str(error), ERROR_STYLE)
        return self.style(f"Error: {error}", ERROR_STYLE)

    def echo(self, outcome: Optional[Outcome]) -> None:
        if outcome is None:
            return
        if outcome.control is not None:
            click.echo(outcome.control, nl=False)
        text = self.format_outcome(outcome)
        if text:
            click.echo(text)

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
import sentry_sdk
import structlog
from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.history import FileHistory, History, InMemoryHistory

from mysqlmon import settings
from mysqlmon.console.accumulator import InputAccumulator
from mysqlmon.console.session import ConsoleSession
from mysqlmon.mysql.errors import MySQLError

logger = structlog.get_logger(module=__name__)


def history_path() -> Path:
    return Path.home() / settings.HISTORY_FILE_NAME


def load_history(path: Path) -> History:
    """
    FileHistory appends every submitted line to ``path`` as it is entered.
    An unusable history file only costs the history, never the session.
    """
    try:
        path.touch(exist_ok=True)
    except OSError as e:
        logger.warning("history_unavailable", path=str(path), error=str(e))
        click.echo("No previous history.")
        return InMemoryHistory()
    return FileHistory(str(path))


class Repl:
    def __init__(
        self,
        session: ConsoleSession,
        prompt_session: Optional[PromptSession[str]] = None,
    ) -> None:
        self.session = session
        self.accumulator = InputAccumulator()
        self.prompt_session = prompt_session or PromptSession(
            history=load_history(history_path())
        )

    def prompt(self) -> str:
        prompt = self.accumulator.prompt(
            self.session.state.current_database, self.session.color_enabled
        )
        return self.prompt_session.prompt(ANSI(prompt))

    def dispatch(self, statement: str) -> None:
        try:
            self.session.echo(self.session.execute(statement))
        except MySQLError as e:
            logger.info("statement_failed", error=e.to_dict())
            if e.should_report:
                sentry_sdk.capture_exception(e)
            click.echo(self.session.format_error(e), err=True)

    def run(self) -> None:
        banner = self.session.welcome_banner()
        if banner is not None:
            click.echo(banner)

        while True:
            try:
                line = self.prompt()
            except KeyboardInterrupt:
                click.echo("^C")
                self.accumulator.interrupt()
                continue
            except EOFError:
                # A statement still waiting for its terminator is dropped.
                click.echo("Bye")
                break

            statement = self.accumulator.feed(line)
            if statement is not None:
                self.dispatch(statement)

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

TERMINATOR = ";"

STATUS_COMMANDS = frozenset({"status"})
CLEAR_COMMANDS = frozenset({"clear", "\\c"})
USE_PREFIX = "use "


@dataclass(frozen=True)
class ShowStatus:
    pass


@dataclass(frozen=True)
class ClearScreen:
    pass


@dataclass(frozen=True)
class SelectDatabase:
    name: str


@dataclass(frozen=True)
class ForwardToServer:
    statement: str


Directive = Union[ShowStatus, ClearScreen, SelectDatabase, ForwardToServer]


def _normalize(statement: str) -> str:
    return statement.strip().lower()


def _local_command(statement: str) -> str:
    return _normalize(statement).rstrip(TERMINATOR).rstrip()


def classify(statement: str) -> Directive:
    """
    Decide how a complete statement is handled. Checks run in order and the
    first match wins:

    * ``status`` reports on the connection,
    * ``clear`` or ``\\c`` clears the terminal,
    * ``use <name>`` switches the current database,
    * everything else is sent to the server untouched.
    """
    local = _local_command(statement)
    if local in STATUS_COMMANDS:
        return ShowStatus()
    if local in CLEAR_COMMANDS:
        return ClearScreen()

    command = _normalize(statement)
    if command.startswith(USE_PREFIX):
        name = statement.strip()[len(USE_PREFIX) :]
        return SelectDatabase(name.strip().rstrip(TERMINATOR).strip())
    return ForwardToServer(statement)


def is_local_directive(line: str) -> bool:
    """
    Whether a line is complete without a terminator: ``status``, ``clear``
    and ``\\c`` never reach the server, an optional ``;`` is accepted.
    """
    command = _local_command(line)
    return command in STATUS_COMMANDS or command in CLEAR_COMMANDS

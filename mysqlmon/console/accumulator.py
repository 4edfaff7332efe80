from __future__ import annotations

from enum import Enum
from typing import List, Optional

import click

from mysqlmon.console.classifier import TERMINATOR, is_local_directive

PRIMARY_PROMPT = "mysql{database} > "
CONTINUATION_PROMPT = "    -> "
CANCEL = "\\c"
PROMPT_STYLE = {"fg": "bright_green"}


class AccumulatorState(Enum):
    EMPTY = "empty"
    ACCUMULATING = "accumulating"


class InputAccumulator:
    """
    Assembles input lines into complete statements.

    A statement is complete once a line ends with ``;``. Only the line that
    was just added is looked at, so a ``;`` inside an earlier line (for
    example in a string literal) does not end the statement.
    """

    def __init__(self) -> None:
        self.__lines: List[str] = []

    @property
    def state(self) -> AccumulatorState:
        return AccumulatorState.ACCUMULATING if self.__lines else AccumulatorState.EMPTY

    @property
    def buffer(self) -> str:
        return "".join(self.__lines)

    def feed(self, line: str) -> Optional[str]:
        """
        Add one line of input. Returns the statement to dispatch when the
        line completes one, otherwise None.

        ``status`` and ``clear`` only run locally as the first line of a
        statement. Inside a statement they are ordinary text, ``\\c`` alone
        on a line drops the pending statement instead.
        """
        if self.state is AccumulatorState.EMPTY:
            if is_local_directive(line):
                return line.strip()
        elif line.strip() == CANCEL:
            self.clear()
            return None

        self.__lines.append(line)
        self.__lines.append(" ")

        if line.strip().endswith(TERMINATOR):
            statement = self.buffer
            self.clear()
            return statement
        return None

    def interrupt(self) -> None:
        self.clear()

    def clear(self) -> None:
        self.__lines = []

    def prompt(self, current_database: Optional[str], color_enabled: bool) -> str:
        if self.state is AccumulatorState.ACCUMULATING:
            prompt = CONTINUATION_PROMPT
        else:
            database = f"({current_database})" if current_database else ""
            prompt = PRIMARY_PROMPT.format(database=database)

        return click.style(prompt, **PROMPT_STYLE) if color_enabled else prompt

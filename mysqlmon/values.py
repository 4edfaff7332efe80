"""
Conversion of result set cells into display strings.

Every place that shows a cell goes through ``render``, which never raises:
missing cells and NULLs become ``NULL``, cells that failed to decode become
``ERROR`` and raw text is decoded with replacement characters.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from functools import singledispatch
from typing import Any, NamedTuple

import click

from mysqlmon.mysql.errors import CellDecodeError

logger = logging.getLogger("mysqlmon.values")

NULL = "NULL"
ERROR = "ERROR"

NULL_STYLE = {"fg": "bright_red"}
VALUE_STYLE = {"fg": "bright_white"}


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


#: Placeholder for a cell slot the row does not have.
MISSING: Any = _Missing()


class Duration(NamedTuple):
    """
    A signed TIME value. Unlike ``timedelta`` the sign is kept apart from
    the magnitude, which is how the server reports it.
    """

    negative: bool
    days: int
    hours: int
    minutes: int
    seconds: int
    micros: int = 0

    @classmethod
    def from_timedelta(cls, value: timedelta) -> Duration:
        negative = value < timedelta(0)
        magnitude = -value if negative else value
        hours, remainder = divmod(magnitude.seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        return cls(
            negative=negative,
            days=magnitude.days,
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            micros=magnitude.microseconds,
        )


class RenderedValue(NamedTuple):
    text: str
    is_null: bool

    def display(self, color_enabled: bool) -> str:
        """
        The text as shown to the user. Styling only wraps the text in escape
        sequences, ``text`` is what widths are computed from.
        """
        if not color_enabled:
            return self.text
        return click.style(self.text, **(NULL_STYLE if self.is_null else VALUE_STYLE))


@singledispatch
def format_value(value: Any) -> str:
    # int, float and Decimal all have a plain base 10 str()
    return str(value)


@format_value.register(str)
def _format_text(value: str) -> str:
    return value


@format_value.register(bytes)
@format_value.register(bytearray)
@format_value.register(memoryview)
def _format_bytes(value: Any) -> str:
    return bytes(value).decode("utf-8", errors="replace")


@format_value.register(date)
def _format_date(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d} 00:00:00"


@format_value.register(datetime)
def _format_datetime(value: datetime) -> str:
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d} "
        f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )


@format_value.register(Duration)
def _format_duration(value: Duration) -> str:
    sign = "-" if value.negative else ""
    return f"{sign}{value.days}.{value.hours:02d}:{value.minutes:02d}:{value.seconds:02d}"


@format_value.register(timedelta)
def _format_timedelta(value: timedelta) -> str:
    return _format_duration(Duration.from_timedelta(value))


def render(cell: Any) -> RenderedValue:
    if cell is None or cell is MISSING:
        return RenderedValue(NULL, True)
    if isinstance(cell, CellDecodeError):
        return RenderedValue(ERROR, False)

    try:
        return RenderedValue(format_value(cell), False)
    except (ValueError, TypeError, ArithmeticError) as e:
        logger.debug("Could not render %r: %s", cell, e)
        return RenderedValue(ERROR, False)

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any

import click
import pytest

from mysqlmon.mysql.errors import CellDecodeError
from mysqlmon.values import (
    ERROR,
    MISSING,
    NULL,
    Duration,
    RenderedValue,
    format_value,
    render,
)


@pytest.mark.parametrize(
    "cell,expected",
    [
        pytest.param(None, RenderedValue(NULL, True), id="null"),
        pytest.param(MISSING, RenderedValue(NULL, True), id="missing"),
        pytest.param(
            CellDecodeError("bad value"), RenderedValue(ERROR, False), id="decode_error"
        ),
        pytest.param(b"hello", RenderedValue("hello", False), id="bytes"),
        pytest.param("héllo", RenderedValue("héllo", False), id="text"),
        pytest.param(b"", RenderedValue("", False), id="empty_bytes"),
        pytest.param(b"NULL", RenderedValue("NULL", False), id="null_looking_text"),
        pytest.param(-42, RenderedValue("-42", False), id="signed"),
        pytest.param(
            18446744073709551615,
            RenderedValue("18446744073709551615", False),
            id="unsigned_bigint",
        ),
        pytest.param(1.5, RenderedValue("1.5", False), id="double"),
        pytest.param(Decimal("10.50"), RenderedValue("10.50", False), id="decimal"),
        pytest.param(
            datetime(2024, 1, 2, 3, 4, 5, 678),
            RenderedValue("2024-01-02 03:04:05", False),
            id="datetime",
        ),
        pytest.param(
            date(2024, 1, 2), RenderedValue("2024-01-02 00:00:00", False), id="date"
        ),
        pytest.param(
            Duration(negative=True, days=2, hours=3, minutes=4, seconds=5),
            RenderedValue("-2.03:04:05", False),
            id="negative_duration",
        ),
        pytest.param(
            Duration(negative=False, days=0, hours=13, minutes=0, seconds=9, micros=5),
            RenderedValue("0.13:00:09", False),
            id="duration",
        ),
        pytest.param(
            timedelta(hours=-1, minutes=-2, seconds=-3),
            RenderedValue("-0.01:02:03", False),
            id="negative_timedelta",
        ),
        pytest.param(
            timedelta(days=34, hours=22, seconds=59),
            RenderedValue("34.22:00:59", False),
            id="timedelta",
        ),
    ],
)
def test_render(cell: Any, expected: RenderedValue) -> None:
    assert render(cell) == expected


def test_render_invalid_utf8() -> None:
    rendered = render(b"caf\xe9 \xff\xfe")
    assert rendered.text == "caf� ��"
    assert not rendered.is_null


def test_render_small_year_is_padded() -> None:
    assert render(datetime(5, 6, 7, 8, 9, 10)).text == "0005-06-07 08:09:10"


def test_render_error_while_formatting() -> None:
    class Broken:
        def __str__(self) -> str:
            raise ValueError("cannot format")

    assert render(Broken()) == RenderedValue(ERROR, False)


def test_is_null_only_for_null() -> None:
    for cell in [0, b"", "", 0.0, Decimal(0), timedelta(0), CellDecodeError()]:
        assert not render(cell).is_null
    for cell in [None, MISSING]:
        assert render(cell).is_null


def test_duration_from_timedelta() -> None:
    assert Duration.from_timedelta(timedelta(days=-2, hours=-3, minutes=-4)) == Duration(
        negative=True, days=2, hours=3, minutes=4, seconds=0, micros=0
    )
    assert Duration.from_timedelta(timedelta(microseconds=12)) == Duration(
        negative=False, days=0, hours=0, minutes=0, seconds=0, micros=12
    )


def test_format_value_dispatch() -> None:
    assert format_value(bytearray(b"abc")) == "abc"
    assert format_value(memoryview(b"abc")) == "abc"


def test_display() -> None:
    value = RenderedValue("42", False)
    null = RenderedValue(NULL, True)

    assert value.display(False) == "42"
    assert null.display(False) == "NULL"

    styled_value = value.display(True)
    styled_null = null.display(True)
    assert styled_value != styled_null
    assert click.unstyle(styled_value) == "42"
    assert click.unstyle(styled_null) == "NULL"
    # styling leaves the text used for widths untouched
    assert value.text == "42"

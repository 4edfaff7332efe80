from typing import List, Optional

import click
import pytest

from mysqlmon.console.accumulator import AccumulatorState, InputAccumulator


def feed_all(accumulator: InputAccumulator, lines: List[str]) -> List[Optional[str]]:
    return [accumulator.feed(line) for line in lines]


def test_single_line_statement() -> None:
    accumulator = InputAccumulator()

    assert accumulator.feed("select 1;") == "select 1; "
    assert accumulator.state is AccumulatorState.EMPTY
    assert accumulator.buffer == ""


def test_multi_line_statement() -> None:
    accumulator = InputAccumulator()

    assert feed_all(accumulator, ["select *", "from t", "where id = 1 ;  "]) == [
        None,
        None,
        "select * from t where id = 1 ;   ",
    ]
    assert accumulator.state is AccumulatorState.EMPTY


def test_dispatches_once_per_terminated_line() -> None:
    accumulator = InputAccumulator()
    lines = ["select 1;", "select", "2;", "select 'a;b'", "from dual", ";"]

    dispatched = [s for s in feed_all(accumulator, lines) if s is not None]

    assert dispatched == [
        "select 1; ",
        "select 2; ",
        "select 'a;b' from dual ; ",
    ]


def test_only_the_new_line_is_checked() -> None:
    accumulator = InputAccumulator()

    assert accumulator.feed("select 'x;'") is None
    assert accumulator.state is AccumulatorState.ACCUMULATING
    assert accumulator.feed("  , 2") is None
    assert accumulator.state is AccumulatorState.ACCUMULATING


def test_blank_line_starts_accumulating() -> None:
    accumulator = InputAccumulator()

    assert accumulator.feed("") is None
    assert accumulator.state is AccumulatorState.ACCUMULATING
    assert accumulator.feed(";") == " ; "


def test_interrupt_discards_buffer() -> None:
    accumulator = InputAccumulator()
    accumulator.feed("select *")
    accumulator.feed("from t")

    accumulator.interrupt()

    assert accumulator.state is AccumulatorState.EMPTY
    assert accumulator.buffer == ""
    assert accumulator.feed("select 2;") == "select 2; "


def test_local_directives_without_terminator() -> None:
    accumulator = InputAccumulator()

    assert accumulator.feed("status") == "status"
    assert accumulator.feed(" \\c ") == "\\c"
    assert accumulator.state is AccumulatorState.EMPTY


def test_cancel_discards_pending_statement() -> None:
    accumulator = InputAccumulator()
    accumulator.feed("select * from")

    assert accumulator.feed("\\c") is None
    assert accumulator.state is AccumulatorState.EMPTY
    assert accumulator.buffer == ""
    assert accumulator.feed("select 1;") == "select 1; "


@pytest.mark.parametrize(
    "lines,expected",
    [
        pytest.param(
            ["SELECT id,", "status", "FROM orders;"],
            [None, None, "SELECT id, status FROM orders; "],
            id="status_column",
        ),
        pytest.param(
            ["UPDATE t SET a = 1", "clear", ";"],
            [None, None, "UPDATE t SET a = 1 clear ; "],
            id="clear_word",
        ),
        pytest.param(
            ["select", "status;"],
            [None, "select status; "],
            id="terminated_status_word",
        ),
    ],
)
def test_directive_words_inside_statement(
    lines: List[str], expected: List[Optional[str]]
) -> None:
    assert feed_all(InputAccumulator(), lines) == expected


def test_end_of_input_drops_partial_statement() -> None:
    # Known quirk: a statement without its terminator is lost when input
    # ends. The caller just stops feeding lines and nothing is dispatched.
    accumulator = InputAccumulator()

    assert accumulator.feed("insert into t values (1)") is None
    assert accumulator.state is AccumulatorState.ACCUMULATING
    assert accumulator.buffer == "insert into t values (1) "


def test_prompt() -> None:
    accumulator = InputAccumulator()

    assert accumulator.prompt(None, False) == "mysql > "
    assert accumulator.prompt("sales", False) == "mysql(sales) > "

    accumulator.feed("select")
    assert accumulator.prompt("sales", False) == "    -> "

    accumulator.feed(";")
    assert accumulator.prompt("sales", False) == "mysql(sales) > "


def test_prompt_colors() -> None:
    accumulator = InputAccumulator()

    prompt = accumulator.prompt("sales", True)
    assert prompt != "mysql(sales) > "
    assert click.unstyle(prompt) == "mysql(sales) > "

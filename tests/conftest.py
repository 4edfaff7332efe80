import os
import traceback
from typing import Any, Generator, List, Sequence
from unittest import mock

import pytest

os.environ.setdefault("MYSQLMON_SETTINGS", "test")

from mysqlmon import settings  # noqa: E402
from mysqlmon.console.session import ConsoleSession, SessionState  # noqa: E402
from mysqlmon.mysql.native import MySQLConnection  # noqa: E402


def pytest_configure() -> None:
    assert (
        settings.TESTING
    ), "settings.TESTING is False, try `MYSQLMON_SETTINGS=test pytest`"


def pytest_collection_modifyitems(items: Sequence[Any]) -> None:
    for item in items:
        item.fixturenames.append("block_mysql_db")


class BlockedObject:
    def __init__(self, message: str) -> None:
        self.__failures: List[List[str]] = []
        self.__message = message

    def teardown(self) -> None:
        if self.__failures:
            lines = "\n".join(self.__failures[0])
            pytest.fail(f"{self.__message}, stacktrace: \n{lines}")

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        # record stacktrace and print it during teardown so there's no chance
        # of the exception being caught down somehow
        self.__failures.append(traceback.format_stack())
        pytest.fail(self.__message)


@pytest.fixture
def block_mysql_db(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    blocked = BlockedObject(
        "attempted to open a MySQL connection in a test, mock pymysql.connect instead"
    )

    monkeypatch.setattr("pymysql.connect", blocked)

    yield

    blocked.teardown()


@pytest.fixture
def connection() -> mock.Mock:
    return mock.Mock(spec=MySQLConnection)


@pytest.fixture
def session(connection: mock.Mock) -> ConsoleSession:
    return ConsoleSession(
        connection,
        SessionState(host="db.local", port=3306, color_enabled=False),
    )


@pytest.fixture
def history_home(
    tmp_path: Any, monkeypatch: pytest.MonkeyPatch
) -> Generator[Any, None, None]:
    monkeypatch.setenv("HOME", str(tmp_path))
    yield tmp_path

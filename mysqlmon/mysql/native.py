from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union

import pymysql
from pymysql import converters, err
from pymysql.constants import FIELD_TYPE

from mysqlmon import settings
from mysqlmon.mysql.errors import CellDecodeError, ConnectError, QueryError

logger = logging.getLogger("mysqlmon.mysql")

# Client side error codes meaning the server connection is gone and has to
# be re-established before the next statement.
CR_SERVER_GONE_ERROR = 2006
CR_SERVER_LOST = 2013
CONNECTION_LOST_CODES = frozenset({CR_SERVER_GONE_ERROR, CR_SERVER_LOST})

Cell = Any
Row = Tuple[Cell, ...]


@dataclass(frozen=True)
class Column:
    name: str


@dataclass(frozen=True)
class QueryResult:
    """
    Outcome of one statement. ``columns`` is empty for statements that do
    not produce a result set, in which case only ``affected_rows`` matters.
    """

    columns: Sequence[Column] = field(default_factory=list)
    rows: Sequence[Row] = field(default_factory=list)
    affected_rows: int = 0


def decode_decimal(value: Union[bytes, str]) -> Decimal:
    if isinstance(value, bytes):
        value = value.decode("ascii")
    return Decimal(value)


def lenient(converter: Callable[[Any], Any]) -> Callable[[Any], Any]:
    """
    Wrap a column converter so a value that cannot be decoded turns into a
    CellDecodeError placeholder instead of aborting the whole result set.
    """

    def convert(value: Any) -> Any:
        try:
            return converter(value)
        except (ValueError, TypeError, ArithmeticError) as e:
            return CellDecodeError(str(e), should_report=False)

    return convert


def build_conversions() -> Dict[Any, Any]:
    # Text arrives as raw bytes (use_unicode=False) and is decoded leniently
    # when rendered. Decimal() does not accept bytes, hence the override.
    conversions: Dict[Any, Any] = dict(converters.conversions)
    conversions[FIELD_TYPE.DECIMAL] = decode_decimal
    conversions[FIELD_TYPE.NEWDECIMAL] = decode_decimal
    for key, converter in list(conversions.items()):
        if isinstance(key, int) and converter is not converters.through:
            conversions[key] = lenient(converter)
    return conversions


CONVERSIONS = build_conversions()


def _error_arguments(e: err.MySQLError) -> Tuple[int, str]:
    if len(e.args) >= 2 and isinstance(e.args[0], int):
        return e.args[0], str(e.args[1])
    return -1, str(e.args[0]) if e.args else e.__class__.__name__


class MySQLConnection(object):
    """
    Synchronous connection to a single MySQL server.

    The underlying driver connection is created lazily and dropped when the
    server goes away, so the next statement reconnects to the database that
    was selected last.
    """

    def __init__(
        self,
        host: str,
        port: int,
        user: Optional[str] = None,
        password: Optional[str] = None,
        database: Optional[str] = None,
        connect_timeout: int = settings.CONNECT_TIMEOUT,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.connect_timeout = connect_timeout

        self.__conn: Optional[pymysql.connections.Connection] = None

    def connect(self) -> None:
        if self.__conn is None:
            self.__conn = self._create_conn()

    def _create_conn(self) -> pymysql.connections.Connection:
        try:
            conn = pymysql.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password or "",
                database=self.database,
                charset=settings.CHARSET,
                connect_timeout=self.connect_timeout,
                use_unicode=False,
                conv=CONVERSIONS,
            )
        except err.MySQLError as e:
            code, message = _error_arguments(e)
            raise ConnectError(message, code=code) from e

        logger.debug(
            "Connected to %s:%d (connection id %d)", self.host, self.port, conn.thread_id()
        )
        return conn

    def _get_conn(self) -> pymysql.connections.Connection:
        self.connect()
        assert self.__conn is not None
        return self.__conn

    def _reset_if_lost(self, code: int) -> None:
        if code in CONNECTION_LOST_CODES and self.__conn is not None:
            logger.warning("Lost connection to %s:%d (%d)", self.host, self.port, code)
            self.__conn = None

    def execute(self, statement: str) -> QueryResult:
        """
        Run one statement and materialize its full result set.
        """
        conn = self._get_conn()
        try:
            with conn.cursor() as cursor:
                cursor.execute(statement)
                if cursor.description is None:
                    return QueryResult(affected_rows=max(cursor.rowcount, 0))

                columns = [Column(name=d[0]) for d in cursor.description]
                rows = list(cursor.fetchall())
                return QueryResult(
                    columns=columns, rows=rows, affected_rows=len(rows)
                )
        except err.MySQLError as e:
            code, message = _error_arguments(e)
            self._reset_if_lost(code)
            raise QueryError(message, should_report=False, code=code) from e

    def select_db(self, database: str) -> None:
        conn = self._get_conn()
        try:
            conn.select_db(database)
        except err.MySQLError as e:
            code, message = _error_arguments(e)
            self._reset_if_lost(code)
            raise QueryError(message, should_report=False, code=code) from e
        self.database = database

    def query_scalar(self, query: str) -> Optional[Cell]:
        """
        Return the first column of the first row, or None for an empty
        result.
        """
        result = self.execute(query)
        if not result.rows or not result.rows[0]:
            return None
        return result.rows[0][0]

    def connection_id(self) -> int:
        return int(self._get_conn().thread_id())

    def close(self) -> None:
        if self.__conn is None:
            return
        try:
            self.__conn.close()
        except err.Error:
            # Closing an already broken connection raises, nothing to release.
            pass
        self.__conn = None

from typing import cast

from mysqlmon.utils.serializable_exception import SerializableException


class MySQLError(SerializableException):
    def format_message(self, message: str) -> str:
        if self.code < 0:
            return message
        return "ERROR {}: {}".format(self.code, message)

    @property
    def code(self) -> int:
        return cast(int, self.extra_data.get("code", -1))


class ConnectError(MySQLError):
    pass


class QueryError(MySQLError):
    pass


class CellDecodeError(SerializableException):
    """
    Stands in for a cell whose value could not be decoded. It is never
    raised by the renderer, the cell is shown as ``ERROR`` instead.
    """

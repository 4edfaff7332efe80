"""
Base class for the errors mysqlmon reports. Each error carries a message,
a free-form ``extra_data`` payload (the server error code, for example) and a
``should_report`` flag which decides whether it is sent to Sentry.

``to_dict`` flattens an error into plain JSON values so it can be attached to
a structured log event:

>>> try:
>>>     raise QueryError("Unknown database 'nope'", should_report=False, code=1049)
>>> except SerializableException as e:
>>>     logger.info("statement_failed", error=e.to_dict())
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, TypedDict, Union

import rapidjson

# mypy has not figured out recursive types yet so this can't be totally typesafe
JsonSerializable = Union[str, int, float, bool, None, Dict[str, Any], List[Any]]


class SerializableExceptionDict(TypedDict):
    __name__: str
    __message__: str
    __extra_data__: Dict[str, JsonSerializable]
    __should_report__: bool


class SerializableException(Exception):
    def __init__(
        self,
        message: Optional[str] = None,
        should_report: bool = True,
        **extra_data: JsonSerializable,
    ) -> None:
        self.extra_data = extra_data
        self.message = self.format_message(message) if message else ""
        # whether or not the error should be reported to sentry
        self.should_report = should_report
        super().__init__(message)

    def format_message(self, message: str) -> str:
        """
        Can be overridden to handle custom formatting
        """
        return message

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> SerializableExceptionDict:
        return {
            "__name__": self.__class__.__name__,
            "__message__": self.message,
            "__should_report__": self.should_report,
            "__extra_data__": self.extra_data,
        }

    def __repr__(self) -> str:
        result: str = rapidjson.dumps(self.to_dict())
        return result

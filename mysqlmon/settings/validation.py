import logging
from typing import Any, Mapping


def validate_settings(locals: Mapping[str, Any]) -> None:
    level = locals.get("LOG_LEVEL")
    if not isinstance(getattr(logging, str(level).upper(), None), int):
        raise ValueError(f"LOG_LEVEL {level!r} is not a valid logging level.")

    port = locals.get("DEFAULT_PORT")
    if not isinstance(port, int) or not 0 < port < 65536:
        raise ValueError(f"DEFAULT_PORT {port!r} is not a valid TCP port.")

    if locals.get("CONNECT_TIMEOUT", 0) <= 0:
        raise ValueError("CONNECT_TIMEOUT must be a positive number of seconds.")

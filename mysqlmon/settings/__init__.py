from __future__ import annotations

import os
from typing import Any, MutableMapping

from mysqlmon.settings.validation import validate_settings

# All settings must be uppercased and have a default value. Anything that
# should not be overridable must not follow this convention.

LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING")
LOG_FORMAT = "%(asctime)s %(message)s"

TESTING = False

SENTRY_DSN: str | None = os.environ.get("SENTRY_DSN")
SENTRY_TRACE_SAMPLE_RATE = float(os.environ.get("SENTRY_TRACE_SAMPLE_RATE", 0))

# Connection defaults, used when the matching command line flag is omitted.
DEFAULT_HOST = os.environ.get("MYSQL_HOST", "localhost")
DEFAULT_PORT = int(os.environ.get("MYSQL_TCP_PORT", 3306))
CONNECT_TIMEOUT = int(os.environ.get("MYSQL_CONNECT_TIMEOUT", 10))
CHARSET = "utf8mb4"

# Line history, stored relative to the home directory.
HISTORY_FILE_NAME = ".mysql_history"


def _load_settings(obj: MutableMapping[str, Any] = locals()) -> None:
    """Load settings from the path provided in the MYSQLMON_SETTINGS environment
    variable if provided. Users can provide a short name like `test` that will
    be expanded to `settings_test.py` in this package, or they can provide a
    full absolute path such as `/foo/bar/my_settings.py`."""

    import importlib
    import importlib.abc
    import importlib.util
    import os

    settings = os.environ.get("MYSQLMON_SETTINGS")

    if settings:
        if settings.startswith("/"):
            if not settings.endswith(".py"):
                settings += ".py"

            settings_spec = importlib.util.spec_from_file_location(
                "mysqlmon.settings.custom", settings
            )
            assert settings_spec is not None
            settings_module = importlib.util.module_from_spec(settings_spec)
            assert isinstance(settings_spec.loader, importlib.abc.Loader)
            settings_spec.loader.exec_module(settings_module)
        else:
            module_format = (
                ".%s" if settings.startswith("settings_") else ".settings_%s"
            )
            settings_module = importlib.import_module(
                module_format % settings, "mysqlmon.settings"
            )

        for attr in dir(settings_module):
            if attr.isupper():
                obj[attr] = getattr(settings_module, attr)


_load_settings()
validate_settings(locals())

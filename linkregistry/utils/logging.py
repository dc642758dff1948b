"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` once at process start (the CLI does so
in `main()`) before any other logging is done.

Logging format (one JSON object per line on stderr, keeping stdout for
command output):
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "linkregistry.registry.registry",
    "message": "Shortened URL.",
    "code": "abc123"
}

Structured data is attached with the `extra` argument of the stdlib logger
calls and shows up as additional top-level keys.

Modules whose operations must not be interrupted by a misbehaving handler or
filter take their logger from `get_guarded_logger()` instead of
`logging.getLogger()`.
"""

import os
import sys
import json
import logging
import logging.config
import traceback
from datetime import datetime, UTC

from linkregistry.constants import ENV


# Attributes every LogRecord carries; anything else on a record came from `extra`
RECORD_ATTRS = frozenset(logging.LogRecord('', logging.NOTSET, '', 0, '', (), None).__dict__) | {'message', 'asctime'}


class JsonFormatter(logging.Formatter):
    """Render a LogRecord, with its `extra` fields, as one JSON object"""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update((key, value) for key, value in record.__dict__.items() if key not in RECORD_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        # datetimes and enums in `extra` fall back to str()
        return json.dumps(log, default=str)


class GuardedLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter whose calls never raise into the caller.

    Errors raised while filtering or handling a record are reported on
    stderr the way `logging.Handler.handleError` reports emit failures,
    then dropped. Caller `extra` passes through unchanged.
    """

    def process(self, msg, kwargs):
        return msg, kwargs

    def log(self, level, msg, *args, **kwargs):
        # Skip this frame so records point at the real call site
        kwargs['stacklevel'] = kwargs.get('stacklevel', 1) + 1
        try:
            super().log(level, msg, *args, **kwargs)
        except Exception:
            if logging.raiseExceptions:
                sys.stderr.write(f'--- Logging error in {self.logger.name} ---\n')
                traceback.print_exc(file=sys.stderr)


def get_guarded_logger(name: str) -> GuardedLoggerAdapter:
    return GuardedLoggerAdapter(logging.getLogger(name), {})


def initialize_logging() -> None:
    log_level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {'()': JsonFormatter},
            },
            'handlers': {
                'stderr': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stderr',
                }
            },
            'root': {
                'level': log_level,
                'handlers': ['stderr'],
            },
        }
    )

"""Handlers for logging."""
import logging
import time
from datetime import datetime, timezone
from typing import NamedTuple, Optional

from werkzeug import Request, Response

from ..chain import NextHandler

LOG = logging.getLogger("middlechain.request")

DEFAULT_FORMAT = "{start_time} | {status} | \t {duration} | {hostname} | {method} {path}"
DEFAULT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


class LogEntry(NamedTuple):
    """The fields available to the format template of a ``RequestLogger``."""

    start_time: str
    status: int
    duration: str
    hostname: str
    method: str
    path: str
    request: Request


def format_duration(seconds: float) -> str:
    """
    Formats a duration for the request log, e.g., ``512µs``, ``12.5ms`` or ``1.204s``.

    :param seconds: the duration in seconds
    :return: a human readable duration
    """
    if seconds < 0.001:
        return f"{seconds * 1_000_000:.0f}µs"
    if seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    return f"{seconds:.3f}s"


class RequestLogger:
    """
    Handler that logs one line for every request once the remaining handlers of the chain have finished. The line
    is rendered from a ``str.format`` template with the fields of ``LogEntry``.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        format: str = DEFAULT_FORMAT,
        date_format: str = DEFAULT_DATE_FORMAT,
        level: int = logging.INFO,
    ):
        self.logger = logger or LOG
        self.format = format
        self.date_format = date_format
        self.level = level

    def set_format(self, format: str) -> None:
        self.format = format

    def set_date_format(self, date_format: str) -> None:
        self.date_format = date_format

    def __call__(self, response: Response, request: Request, next: NextHandler):
        started = datetime.now(tz=timezone.utc)
        start = time.perf_counter()

        next(response, request)

        if not self.logger.isEnabledFor(self.level):
            return

        entry = LogEntry(
            start_time=started.strftime(self.date_format),
            status=response.status_code,
            duration=format_duration(time.perf_counter() - start),
            hostname=request.host,
            method=request.method,
            path=request.path,
            request=request,
        )
        self.logger.log(self.level, self.format.format(**entry._asdict()))

"""Handlers that turn errors raised by downstream handlers into HTTP 500 responses."""
import logging
import traceback
from typing import Callable, NamedTuple, Optional

from werkzeug import Request, Response

from middlechain import config
from middlechain.constants import INTERNAL_SERVER_ERROR_BODY

from ..chain import NextHandler

LOG = logging.getLogger(__name__)


class PanicInformation(NamedTuple):
    """Information about an error caught by the ``Recovery`` handler, passed to its ``panic_handler``."""

    exception: Exception
    stack: str
    request: Request

    def request_description(self) -> str:
        if self.request is None:
            return "no request"
        return f"{self.request.method} {self.request.path}"


PanicHandler = Callable[[PanicInformation], None]


class Recovery:
    """
    Handler that catches any exception raised by the remaining handlers of the chain, logs it, and responds with a
    500 Internal Server Error, unless a downstream handler has already populated the response.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        print_stack: Optional[bool] = None,
        log_stack: bool = True,
        panic_handler: Optional[PanicHandler] = None,
    ):
        """
        :param logger: the logger errors are logged to
        :param print_stack: whether to write the traceback into the response body, defaults to
            ``config.RECOVERY_PRINT_STACK``
        :param log_stack: whether to log the traceback if the logger is enabled for DEBUG
        :param panic_handler: optional callback invoked with the ``PanicInformation`` of every caught error
        """
        self.logger = logger or LOG
        self.print_stack = config.RECOVERY_PRINT_STACK if print_stack is None else print_stack
        self.log_stack = log_stack
        self.panic_handler = panic_handler

    def __call__(self, response: Response, request: Request, next: NextHandler):
        try:
            next(response, request)
        except Exception as e:
            stack = traceback.format_exc()
            self._log(e, request)

            if not self.is_response_populated(response):
                response.status_code = 500
                response.mimetype = "text/plain"
                response.data = stack if self.print_stack else INTERNAL_SERVER_ERROR_BODY

            if self.panic_handler:
                self._call_panic_handler(PanicInformation(exception=e, stack=stack, request=request))

    def _call_panic_handler(self, info: PanicInformation):
        try:
            self.panic_handler(info)
        except Exception as nested:
            msg = "exception while running panic handler for %s"
            if self.logger.isEnabledFor(logging.DEBUG):
                self.logger.exception(msg, info.request_description())
            else:
                self.logger.warning(msg + ": %s", info.request_description(), nested)

    def _log(self, exception: Exception, request: Request):
        msg = "error while handling request %s %s"
        if self.log_stack and self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception(msg, request.method, request.path, exc_info=exception)
        else:
            self.logger.error(msg + ": %s", request.method, request.path, exception)

    @staticmethod
    def is_response_populated(response: Response) -> bool:
        if response.direct_passthrough or response.is_streamed:
            return True
        return response.status_code != 200 or bool(response.get_data())

from middlechain.version import __version__

from .app import classic
from .chain import (
    Chain,
    Handler,
    HandlerFunc,
    InvalidHandlerError,
    NextHandler,
    TerminalHandler,
    WrappedHandler,
    wrap,
    wrap_func,
)
from .config import DEFAULT_ADDRESS, detect_address
from .http import Request, Response

__all__ = [
    "__version__",
    "Chain",
    "Handler",
    "HandlerFunc",
    "WrappedHandler",
    "InvalidHandlerError",
    "NextHandler",
    "TerminalHandler",
    "wrap",
    "wrap_func",
    "classic",
    "detect_address",
    "DEFAULT_ADDRESS",
    "Request",
    "Response",
]

"""
The core concepts of the middleware Chain.
"""
from __future__ import annotations

import copy
import logging
from typing import Callable, List, Optional, Protocol, Tuple

from werkzeug import Request, Response

from middlechain.config import HostAndPort, detect_address

LOG = logging.getLogger(__name__)

NextHandler = Callable[[Response, Request], None]
"""The continuation passed to a handler. Calling it hands control to the rest of the chain; not calling it
short-circuits the chain."""

TerminalHandler = Callable[[Response, Request], None]
"""A plain request handler that knows nothing about the chain, e.g., an application or a router."""


class InvalidHandlerError(TypeError):
    """Raised when a missing or non-callable handler is registered."""


class Handler(Protocol):
    """
    A protocol for middleware in a ``Chain``. Any callable with this signature can be added to a chain, whether it
    is a plain function, a ``HandlerFunc``, a ``WrappedHandler``, or an object implementing ``__call__``.

    Example code could look like this::

        def add_header(response: Response, request: Request, next: NextHandler):
            response.headers["X-Served-By"] = "middlechain"
            next(response, request)

        chain = Chain(add_header)
    """

    def __call__(self, response: Response, request: Request, next: NextHandler) -> None:
        """
        Handle the given request.

        :param response: the response to be populated
        :param request: the incoming request
        :param next: the continuation that invokes the remaining handlers of the chain
        """
        raise NotImplementedError


def _validate(handler, kind: str = "handler"):
    if handler is None:
        raise InvalidHandlerError(f"{kind} cannot be None")
    if not callable(handler):
        raise InvalidHandlerError(f"{kind} {handler!r} is not callable")


def _void(response: Response, request: Request) -> None:
    pass


class HandlerFunc:
    """
    Adapts a function with the ``Handler`` signature into a handler object.
    """

    __slots__ = ("fn",)

    def __init__(self, fn: Callable[[Response, Request, NextHandler], None]):
        _validate(fn, "handler function")
        self.fn = fn

    def __call__(self, response: Response, request: Request, next: NextHandler) -> None:
        self.fn(response, request, next)

    def __repr__(self):
        return f"HandlerFunc({getattr(self.fn, '__name__', self.fn)!r})"


class WrappedHandler:
    """
    Adapts a terminal handler into a middleware that always falls through: the terminal handler is called, then
    the rest of the chain.
    """

    __slots__ = ("handler",)

    def __init__(self, handler: TerminalHandler):
        _validate(handler, "terminal handler")
        self.handler = handler

    def __call__(self, response: Response, request: Request, next: NextHandler) -> None:
        self.handler(response, request)
        next(response, request)

    def __repr__(self):
        return f"WrappedHandler({getattr(self.handler, '__name__', self.handler)!r})"


def wrap(handler: TerminalHandler) -> WrappedHandler:
    """
    Turns a terminal handler object (``handler(response, request)``) into a ``Handler`` that calls it and then
    always invokes ``next``.

    :param handler: the terminal handler
    :return: a new handler
    """
    return WrappedHandler(handler)


def wrap_func(fn: Callable[[Response, Request], None]) -> WrappedHandler:
    """
    Same as ``wrap``, for a plain function. Can also be used as a decorator::

        @wrap_func
        def set_server_header(response, request):
            response.headers["Server"] = "middlechain"

    :param fn: the terminal handler function
    :return: a new handler
    """
    _validate(fn, "terminal handler function")
    return wrap(fn)


class Chain:
    """
    An ordered sequence of middleware handlers that is itself a request handler. Each handler receives the response,
    the request, and a continuation ``next`` that invokes the remainder of the chain. Handlers run in the order in
    which they were added, code after ``next`` runs in reverse order once all downstream handlers have returned,
    and a handler that does not call ``next`` stops the chain.

    Chains are meant to be built up front and then dispatched. Dispatching a chain concurrently from several
    threads is safe, mutating it concurrently with a dispatch is not supported.

    Child chains that share a common prefix of handlers are created with ``derive``, which never modifies the
    parent chain::

        common = Chain(Recovery(), RequestLogger())
        api = common.derive(authenticate)
        public = common.derive(Static("public"))
    """

    _handlers: List[Handler]

    def __init__(self, *handlers: Handler) -> None:
        self._handlers = []
        self.add(*handlers)

    def add(self, *handlers: Handler) -> "Chain":
        """
        Appends the given handlers to the end of this chain, in the given order. All handlers are validated before
        any of them is added.

        :param handlers: the handlers to add
        :raises InvalidHandlerError: if any of the handlers is None or not callable
        :return: this chain
        """
        for handler in handlers:
            _validate(handler)

        self._handlers.extend(handlers)
        return self

    def add_func(self, fn: Callable[[Response, Request, NextHandler], None]) -> "Chain":
        """
        Adds the given function as ``HandlerFunc``.

        :param fn: a function with the ``Handler`` signature
        :return: this chain
        """
        return self.add(HandlerFunc(fn))

    def add_handler(self, handler: TerminalHandler) -> "Chain":
        """
        Adds a terminal handler object, wrapped so that it always calls ``next``.

        :param handler: the terminal handler
        :return: this chain
        """
        return self.add(wrap(handler))

    def add_handler_func(self, fn: Callable[[Response, Request], None]) -> "Chain":
        """
        Adds a terminal handler function, wrapped so that it always calls ``next``. This is typically used for the
        application or router at the end of a chain.

        :param fn: the terminal handler function
        :return: this chain
        """
        return self.add(wrap_func(fn))

    def derive(self, *handlers: Handler) -> "Chain":
        """
        Creates a new chain that contains the current handlers of this chain followed by the given handlers. This
        chain is left untouched, and handlers later added to either chain are not visible to the other.

        :param handlers: the handlers to append to the new chain
        :raises InvalidHandlerError: if any of the handlers is None or not callable
        :return: a new chain
        """
        for handler in handlers:
            _validate(handler)

        # always a freshly allocated list, siblings derived from the same parent must never share storage
        derived = copy.copy(self)
        derived._handlers = list(self._handlers)
        derived._handlers.extend(handlers)
        return derived

    def handlers(self) -> List[Handler]:
        """
        Returns a copy of the handlers of this chain, in invocation order.

        :return: a list of handlers
        """
        return list(self._handlers)

    def dispatch(self, response: Response, request: Request) -> None:
        """
        Runs the request through all handlers of the chain. Returns once the chain has completed or a handler has
        stopped it by not calling ``next``. Exceptions raised by handlers are propagated to the caller.

        :param response: the response to be populated
        :param request: the incoming request
        """
        self._invoke(tuple(self._handlers), response, request, _void)

    def dispatch_with_next(
        self, response: Response, request: Request, final: Optional[NextHandler]
    ) -> None:
        """
        Like ``dispatch``, but ``final`` is called when the last handler of the chain calls ``next``. If the chain is
        empty, ``final`` is called directly.

        :param response: the response to be populated
        :param request: the incoming request
        :param final: the handler that terminates the chain, e.g., a "not found" handler
        """
        if final is None:
            final = _void
        self._invoke(tuple(self._handlers), response, request, final)

    def __call__(
        self, response: Response, request: Request, next: Optional[NextHandler] = None
    ) -> None:
        """
        Makes the chain a handler itself. Invoked with a continuation (i.e., as part of an outer chain), control is
        handed back to the outer chain once the last handler of this chain calls ``next``.
        """
        self.dispatch_with_next(response, request, next)

    @staticmethod
    def _invoke(
        handlers: Tuple[Handler, ...], response: Response, request: Request, final: NextHandler
    ) -> None:
        def _continuation(index: int) -> NextHandler:
            if index == len(handlers):
                return final

            def _next(_response: Response, _request: Request) -> None:
                if LOG.isEnabledFor(logging.DEBUG):
                    LOG.debug("invoking handler %d of %d: %s", index + 1, len(handlers), handlers[index])
                handlers[index](_response, _request, _continuation(index + 1))

            return _next

        _continuation(0)(response, request)

    def run(self, address: Optional[str] = None, **kwargs) -> None:
        """
        Serves this chain through the werkzeug development server. The address is determined by ``detect_address``,
        so the ``PORT`` environment variable is honored if no address (or ``None``) is given.

        :param address: optional listen address, e.g., ``":3000"`` or ``"127.0.0.1:3000"``
        :param kwargs: arguments passed to ``middlechain.serving.werkzeug.serve``
        """
        from middlechain.serving.werkzeug import serve

        listen = HostAndPort.parse(detect_address(address))
        serve(self, host=listen.host, port=listen.port, **kwargs)

    def __len__(self):
        return len(self._handlers)

    def __repr__(self):
        return f"{self.__class__.__name__}({', '.join(repr(h) for h in self._handlers)})"

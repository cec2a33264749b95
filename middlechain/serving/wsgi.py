import logging
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from _typeshed.wsgi import StartResponse, WSGIEnvironment

from middlechain.http import Request, Response

from ..chain import Chain

LOG = logging.getLogger(__name__)


class WsgiChain:
    """
    Exposes a Chain as a WSGI application.
    """

    chain: Chain

    def __init__(self, chain: Chain) -> None:
        super().__init__()
        self.chain = chain

    def __call__(
        self, environ: "WSGIEnvironment", start_response: "StartResponse"
    ) -> Iterable[bytes]:
        LOG.debug(
            "%s %s%s",
            environ["REQUEST_METHOD"],
            environ.get("HTTP_HOST", ""),
            environ.get("RAW_URI", environ.get("PATH_INFO", "")),
        )
        request = Request.from_environ(environ)
        response = Response()

        self.chain.dispatch(response, request)

        return response(environ, start_response)

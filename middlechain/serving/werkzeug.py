import logging
from typing import Optional

from werkzeug import run_simple

from middlechain import config, constants
from middlechain.logging.setup import setup_logging_from_config

from ..chain import Chain
from .wsgi import WsgiChain

LOG = logging.getLogger(__name__)


def serve(
    chain: Chain,
    host: str = constants.BIND_HOST_ALL,
    port: int = constants.DEFAULT_PORT,
    use_reloader: Optional[bool] = None,
    **kwargs,
) -> None:
    """
    Serve a Chain as a WSGI application through werkzeug's development server. Logging is configured from the
    environment before the server starts, so request logs and errors of the chain are printed.

    :param chain: the Chain to serve
    :param host: the host to expose the server to
    :param port: the port to expose the server to
    :param use_reloader: whether to autoreload the server on changes, defaults to ``config.USE_RELOADER``
    :param kwargs: any other arguments that can be passed to `werkzeug.run_simple`
    """
    setup_logging_from_config()

    kwargs["threaded"] = kwargs.get("threaded", True)  # make sure requests don't block
    if use_reloader is None:
        use_reloader = config.USE_RELOADER

    LOG.info("listening on %s", config.HostAndPort(host, port))
    run_simple(host, port, WsgiChain(chain), use_reloader=use_reloader, **kwargs)

import socket
import threading

import pytest
import werkzeug.serving

from middlechain import Chain
from middlechain.serving.wsgi import WsgiChain


def get_free_tcp_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("localhost", 0))
        return sock.getsockname()[1]


@pytest.fixture(autouse=True)
def clear_port_environment(monkeypatch):
    """
    Makes sure that a PORT variable of the environment running the tests doesn't leak into address detection.
    """
    monkeypatch.delenv("PORT", raising=False)


@pytest.fixture
def serve_chain():
    """Serves chains through a threaded werkzeug server and returns the base URL"""
    _servers = []

    def _create(chain: Chain) -> str:
        host = "localhost"
        port = get_free_tcp_port()
        server = werkzeug.serving.make_server(host, port, app=WsgiChain(chain), threaded=True)
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        _servers.append((server, thread))
        return f"http://{host}:{port}"

    yield _create

    for server, thread in _servers:
        server.shutdown()
        thread.join(timeout=10)

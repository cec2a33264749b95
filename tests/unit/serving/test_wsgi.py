import requests
from werkzeug.test import Client

from middlechain import Chain
from middlechain.handlers import Recovery
from middlechain.serving.wsgi import WsgiChain


def echo(response, request, next):
    response.set_json(
        {
            "method": request.method,
            "path": request.path,
            "headers": {k: v for k, v in request.headers.items() if k.lower().startswith("x-")},
        }
    )
    next(response, request)


def test_wsgi_chain_dispatches_request():
    def add_header(response, request, next):
        request.headers["X-Added-By-Chain"] = "yes"
        next(response, request)
        response.headers["X-Served-By"] = "middlechain"

    client = Client(WsgiChain(Chain(add_header, echo)))

    response = client.post("/users", headers={"X-Foo": "bar"})

    assert response.status_code == 200
    assert response.headers["X-Served-By"] == "middlechain"
    assert response.json == {
        "method": "POST",
        "path": "/users",
        "headers": {"X-Foo": "bar", "X-Added-By-Chain": "yes"},
    }


def test_wsgi_chain_with_empty_chain():
    client = Client(WsgiChain(Chain()))

    response = client.get("/")

    assert response.status_code == 200
    assert response.data == b""


def test_wsgi_chain_short_circuit():
    def forbidden(response, request, next):
        response.status_code = 403
        response.data = b"forbidden"

    client = Client(WsgiChain(Chain(forbidden, echo)))

    response = client.get("/")

    assert response.status_code == 403
    assert response.data == b"forbidden"


def test_chain_served_through_werkzeug(serve_chain):
    def fail(response, request, next):
        if request.path == "/fail":
            raise ValueError("failed")
        next(response, request)

    base = Chain(Recovery(print_stack=False), fail)
    url = serve_chain(base.derive(echo))

    response = requests.get(f"{url}/hello", headers={"X-My-Header": "value"})
    assert response.ok
    assert response.json() == {
        "method": "GET",
        "path": "/hello",
        "headers": {"X-My-Header": "value"},
    }

    response = requests.get(f"{url}/fail")
    assert response.status_code == 500
    assert response.text == "500 Internal Server Error"

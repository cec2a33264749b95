from io import BytesIO
from typing import IO, TYPE_CHECKING, Dict, Mapping, Optional, Tuple, Union
from urllib.parse import quote, unquote

if TYPE_CHECKING:
    from _typeshed.wsgi import WSGIEnvironment

from werkzeug.datastructures import Headers
from werkzeug.wrappers.request import Request as WerkzeugRequest

from middlechain.utils import strings


def dummy_wsgi_environment(
    method: str = "GET",
    path: str = "",
    headers: Optional[Union[Dict, Headers]] = None,
    body: Optional[Union[bytes, str, IO[bytes]]] = None,
    scheme: str = "http",
    root_path: str = "/",
    query_string: Optional[str] = None,
    remote_addr: Optional[str] = None,
    server: Optional[Tuple[str, Optional[int]]] = None,
) -> "WSGIEnvironment":
    """
    Creates a dummy WSGIEnvironment that represents a standalone sans-IO HTTP request, which allows handlers and
    chains to be invoked without a server.

    See https://wsgi.readthedocs.io/en/latest/definitions.html#standard-environ-keys

    :param method: The HTTP request method (such as GET or POST)
    :param path: The remainder of the request URL's path
    :param headers: optional HTTP headers
    :param body: the body of the request
    :param scheme: the scheme (http or https)
    :param root_path: The initial portion of the request URL's path that corresponds to the application object.
    :param query_string: The portion of the request URL that follows the "?", if any.
    :param remote_addr: The address making the request
    :param server: The server (tuple of server name and port)
    :return: A WSGIEnvironment dictionary
    """
    environ = {
        "REQUEST_METHOD": method,
        # prepare the paths for the "WSGI decoding dance" done by werkzeug
        "SCRIPT_NAME": unquote(quote(root_path.rstrip("/")), "latin-1"),
        "PATH_INFO": unquote(quote(path), "latin-1"),
        "SERVER_PROTOCOL": "HTTP/1.1",
        "QUERY_STRING": query_string or "",
    }

    if server:
        environ["SERVER_NAME"] = server[0]
        environ["SERVER_PORT"] = str(server[1]) if server[1] else "80"
    else:
        environ["SERVER_NAME"] = "127.0.0.1"
        environ["SERVER_PORT"] = "80"

    if remote_addr:
        environ["REMOTE_ADDR"] = remote_addr

    if headers:
        for k, v in headers.items():
            name = k.upper().replace("-", "_")
            if name not in ("CONTENT_TYPE", "CONTENT_LENGTH"):
                name = f"HTTP_{name}"
            environ[name] = f"{environ[name]},{v}" if name in environ else v

    if not body or isinstance(body, (str, bytes)):
        data = strings.to_bytes(body) if body else b""
        wsgi_input = BytesIO(data)
        if "CONTENT_LENGTH" not in environ:
            environ["CONTENT_LENGTH"] = str(len(data))
    else:
        wsgi_input = body

    environ["wsgi.version"] = (1, 0)
    environ["wsgi.url_scheme"] = scheme
    environ["wsgi.input"] = wsgi_input
    environ["wsgi.input_terminated"] = True
    environ["wsgi.errors"] = BytesIO()
    environ["wsgi.multithread"] = True
    environ["wsgi.multiprocess"] = False
    environ["wsgi.run_once"] = False

    return environ


class Request(WerkzeugRequest):
    """
    An HTTP request object. This is a drop-in replacement for werkzeug's WSGI compliant Request objects that can
    also be created outside a web server environment, e.g., ``Request("GET", "/index.html")``.
    """

    def __init__(
        self,
        method: str = "GET",
        path: str = "",
        headers: Union[Mapping, Headers] = None,
        body: Union[bytes, str] = None,
        scheme: str = "http",
        root_path: str = "/",
        query_string: Union[bytes, str] = b"",
        remote_addr: str = None,
        server: Optional[Tuple[str, Optional[int]]] = None,
    ):
        # latin-1 is what werkzeug would expect
        query_string = strings.to_str(query_string, "latin-1")

        environ = dummy_wsgi_environment(
            method=method,
            path=path,
            headers=headers,
            body=body,
            scheme=scheme,
            root_path=root_path,
            query_string=query_string,
            remote_addr=remote_addr,
            server=server,
        )

        super(Request, self).__init__(environ)

        # werkzeug provides read-only access to the headers of the environment, handlers may modify them
        headers = Headers(headers)
        for h in ["content-length", "content-type"]:
            if h not in headers and h in self.headers:
                headers[h] = self.headers[h]
        self.headers = headers

    @classmethod
    def from_environ(cls, environ: "WSGIEnvironment") -> WerkzeugRequest:
        """
        Creates a request from a WSGI environment served by a real server. The headers of the returned request are
        mutable, so handlers in the chain can modify them.

        :param environ: the WSGI environment
        :return: a werkzeug request
        """
        request = WerkzeugRequest(environ)
        request.headers = Headers(request.headers)
        return request

from unittest import mock

import pytest

from middlechain import Chain
from middlechain.handlers import Static
from middlechain.http import Request, Response


@pytest.fixture
def public_dir(tmp_path):
    (tmp_path / "index.html").write_text("<h1>index</h1>")
    (tmp_path / "hello.txt").write_text("hello world")
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "index.html").write_text("<h1>docs</h1>")
    (tmp_path / "empty").mkdir()
    return tmp_path


def dispatch(chain: Chain, request: Request) -> Response:
    response = Response()
    chain.dispatch(response, request)
    return response


class TestStatic:
    def test_serves_file(self, public_dir):
        downstream = mock.MagicMock()
        chain = Chain(Static(str(public_dir)), downstream)

        response = dispatch(chain, Request("GET", "/hello.txt"))

        assert response.status_code == 200
        assert response.get_data() == b"hello world"
        assert response.mimetype == "text/plain"
        downstream.assert_not_called()

    def test_serves_index_file(self, public_dir):
        chain = Chain(Static(str(public_dir)))

        response = dispatch(chain, Request("GET", "/"))
        assert response.get_data() == b"<h1>index</h1>"

        response = dispatch(chain, Request("GET", "/docs/"))
        assert response.get_data() == b"<h1>docs</h1>"

    def test_redirects_directory_without_trailing_slash(self, public_dir):
        chain = Chain(Static(str(public_dir)))

        response = dispatch(chain, Request("GET", "/docs", query_string="a=b"))

        assert response.status_code == 302
        assert response.headers["Location"] == "/docs/?a=b"

    def test_served_file_keeps_headers_set_upstream(self, public_dir):
        def set_header(response, request, next):
            response.headers["X-Served-By"] = "middlechain"
            next(response, request)

        chain = Chain(set_header, Static(str(public_dir)))

        response = dispatch(chain, Request("GET", "/hello.txt"))

        assert response.headers["X-Served-By"] == "middlechain"
        assert response.headers["Content-Length"] == "11"
        assert not response.direct_passthrough
        assert response.get_data() == b"hello world"

    @pytest.mark.parametrize("path", ["/missing.txt", "/empty/", "/../secret.txt"])
    def test_falls_through_for_missing_files(self, public_dir, path):
        downstream = mock.MagicMock()
        chain = Chain(Static(str(public_dir)), downstream)

        dispatch(chain, Request("GET", path))

        downstream.assert_called_once()

    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE"])
    def test_falls_through_for_other_methods(self, public_dir, method):
        downstream = mock.MagicMock()
        chain = Chain(Static(str(public_dir)), downstream)

        response = dispatch(chain, Request(method, "/hello.txt"))

        downstream.assert_called_once()
        assert response.get_data() == b""

    def test_head_request(self, public_dir):
        downstream = mock.MagicMock()
        chain = Chain(Static(str(public_dir)), downstream)

        response = dispatch(chain, Request("HEAD", "/hello.txt"))

        assert response.status_code == 200
        assert response.headers["Content-Length"] == "11"
        downstream.assert_not_called()

    def test_prefix(self, public_dir):
        downstream = mock.MagicMock()
        chain = Chain(Static(str(public_dir), prefix="/static"), downstream)

        response = dispatch(chain, Request("GET", "/static/hello.txt"))
        assert response.get_data() == b"hello world"
        downstream.assert_not_called()

        dispatch(chain, Request("GET", "/hello.txt"))
        assert downstream.call_count == 1

        dispatch(chain, Request("GET", "/statichello.txt"))
        assert downstream.call_count == 2

    def test_custom_index_file(self, public_dir):
        (public_dir / "empty" / "home.html").write_text("home")
        chain = Chain(Static(str(public_dir), index_file="home.html"))

        response = dispatch(chain, Request("GET", "/empty/"))

        assert response.get_data() == b"home"

import logging

import pytest

from middlechain import Chain
from middlechain.handlers import RequestLogger
from middlechain.handlers.logging import format_duration
from middlechain.http import Request, Response


class CollectingHandler(logging.Handler):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.messages = []

    def emit(self, record):
        self.messages.append(self.format(record))


@pytest.fixture
def get_logger():
    handlers: list[logging.Handler] = []
    logger = logging.getLogger("test.middlechain.request")
    logger.setLevel(logging.INFO)

    def _get_logger():
        handler = CollectingHandler()
        handlers.append(handler)

        # avoid propagation to parent loggers
        logger.propagate = False
        logger.addHandler(handler)
        return logger, handler

    yield _get_logger

    for handler in handlers:
        logger.removeHandler(handler)


def not_found(response, request, next):
    response.status_code = 404


class TestRequestLogger:
    def test_logs_request_after_chain(self, get_logger):
        logger, handler = get_logger()
        request_logger = RequestLogger(logger=logger)
        request_logger.set_format("{method} {path} => {status}")

        chain = Chain(request_logger, not_found)
        chain.dispatch(Response(), Request("GET", "/foobar"))

        assert handler.messages == ["GET /foobar => 404"]

    def test_default_format(self, get_logger):
        logger, handler = get_logger()

        Chain(RequestLogger(logger=logger)).dispatch(
            Response(), Request("GET", "/index.html", server=("example.com", 8080))
        )

        assert len(handler.messages) == 1
        start_time, status, duration, hostname, path = handler.messages[0].split(" | ")
        assert status == "200"
        assert duration.strip()
        assert hostname == "example.com:8080"
        assert path == "GET /index.html"

    def test_date_format(self, get_logger):
        logger, handler = get_logger()
        request_logger = RequestLogger(logger=logger, format="{start_time}")
        request_logger.set_date_format("static")

        Chain(request_logger).dispatch(Response(), Request())

        assert handler.messages == ["static"]

    def test_request_field(self, get_logger):
        logger, handler = get_logger()
        request_logger = RequestLogger(logger=logger, format="{request.method} {request.args[q]}")

        Chain(request_logger).dispatch(Response(), Request("GET", "/search", query_string="q=chain"))

        assert handler.messages == ["GET chain"]

    def test_disabled_logger_still_calls_next(self, get_logger):
        logger, handler = get_logger()
        logger.setLevel(logging.WARNING)
        calls = []

        def record(response, request, next):
            calls.append(request.path)

        Chain(RequestLogger(logger=logger), record).dispatch(Response(), Request("GET", "/"))

        assert calls == ["/"]
        assert handler.messages == []


@pytest.mark.parametrize(
    "seconds,expected", [(0.0005, "500µs"), (0.0125, "12.5ms"), (1.2041, "1.204s")]
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected

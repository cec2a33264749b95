"""Handler for serving static files from a directory."""
import logging
import os

from werkzeug import Request
from werkzeug.exceptions import NotFound
from werkzeug.security import safe_join
from werkzeug.utils import redirect, send_from_directory

from middlechain.constants import DEFAULT_INDEX_FILE
from middlechain.http import Response

from ..chain import NextHandler

LOG = logging.getLogger(__name__)


class Static:
    """
    Handler that serves files from a directory for ``GET`` and ``HEAD`` requests. Requests that do not match a file
    (wrong method, wrong prefix, or missing file) are passed on to the next handler, so a static handler can be put
    in front of an application.
    """

    def __init__(self, directory: str, prefix: str = "", index_file: str = DEFAULT_INDEX_FILE):
        """
        :param directory: the directory to serve files from
        :param prefix: optional URL prefix the files are served under (e.g., ``/static``)
        :param index_file: the file served for requests to a directory
        """
        self.directory = directory
        self.prefix = prefix.rstrip("/")
        self.index_file = index_file

    def __call__(self, response: Response, request: Request, next: NextHandler):
        if request.method not in ("GET", "HEAD"):
            next(response, request)
            return

        path = request.path
        if self.prefix:
            if not path.startswith(self.prefix):
                next(response, request)
                return
            path = path[len(self.prefix) :]
            if path and not path.startswith("/"):
                next(response, request)
                return

        filename = path.lstrip("/")
        full_path = safe_join(self.directory, filename) if filename else self.directory
        if full_path is None or not os.path.exists(full_path):
            next(response, request)
            return

        if os.path.isdir(full_path):
            if not request.path.endswith("/"):
                location = request.path + "/"
                if request.query_string:
                    location += "?" + request.query_string.decode("latin-1")
                response.update_from(redirect(location, code=302))
                return
            filename = f"{filename.rstrip('/')}/{self.index_file}".lstrip("/")

        try:
            served = send_from_directory(self.directory, filename, request.environ)
        except NotFound:
            next(response, request)
            return

        LOG.debug("serving static file %s", filename)
        response.update_from(served)

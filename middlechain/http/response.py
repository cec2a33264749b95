import json
from typing import Any

from werkzeug.wrappers import Response as WerkzeugResponse


class Response(WerkzeugResponse):
    """
    The response every handler of a chain writes to. Handlers never return responses, they populate the one they
    are given, which is why this class can take over the state of responses created elsewhere.
    """

    def update_from(self, other: WerkzeugResponse):
        """
        Takes over the status, the body iterable, and the headers of another response, e.g., one returned by
        ``werkzeug.utils.redirect`` or ``send_from_directory``. Headers already set on this response are kept unless
        the other response sets them too. The body is taken over as iterable, so files are streamed and closed
        together with this response, and ``direct_passthrough`` is left as it is.

        :param other: the response to take over
        """
        self.status_code = other.status_code
        self.response = other.response
        self.headers.update(other.headers)

    def set_json(self, doc: Any):
        """
        Writes the given document as JSON body and sets the mimetype to ``application/json``.

        :param doc: the document to serialize
        """
        self.data = json.dumps(doc)
        self.mimetype = "application/json"

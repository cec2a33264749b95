import logging
import os
from typing import Union

from middlechain.constants import (
    BIND_HOST_ALL,
    DEFAULT_ADDRESS,
    DEFAULT_PORT,
    ENV_PORT,
    LOG_LEVEL_TRACE,
    LOG_LEVELS,
    TRUE_STRINGS,
)


def eval_log_type(env_var_name: str) -> Union[str, bool]:
    """Get the log type from environment variable"""
    log_type = os.environ.get(env_var_name, "").lower().strip()
    return log_type if log_type in LOG_LEVELS else False


def is_env_true(env_var_name: str) -> bool:
    """Whether the given environment variable has a truthy value."""
    return os.environ.get(env_var_name, "").lower().strip() in TRUE_STRINGS


# log level (trace, debug, info, warn, error) of the middlechain loggers
MC_LOG = eval_log_type("MC_LOG")

# whether to enable debug output
DEBUG = is_env_true("DEBUG") or MC_LOG in ("debug", LOG_LEVEL_TRACE)

# whether the recovery handler writes the traceback of an error into the response body
RECOVERY_PRINT_STACK = is_env_true("RECOVERY_PRINT_STACK")

# whether the werkzeug development server should reload on code changes
USE_RELOADER = is_env_true("USE_RELOADER")


def is_trace_logging_enabled():
    return MC_LOG == LOG_LEVEL_TRACE


if DEBUG:
    logging.getLogger("middlechain").setLevel(logging.DEBUG)

LOG = logging.getLogger(__name__)


class HostAndPort:
    """
    Definition of an address for a server to listen to.

    Includes a `parse` method to convert from `str`, allowing for default fallbacks, and an equality check
    against strings to keep tests short.
    """

    host: str
    port: int

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port

    @classmethod
    def parse(
        cls,
        input: str,
        default_host: str = BIND_HOST_ALL,
        default_port: int = DEFAULT_PORT,
    ) -> "HostAndPort":
        """
        Parse a `HostAndPort` from strings like:
            - 127.0.0.1:3000 -> host=127.0.0.1, port=3000
            - 127.0.0.1      -> host=127.0.0.1, port=`default_port`
            - :3000          -> host=`default_host`, port=3000
            - [::1]:3000     -> host=::1, port=3000
        """
        host, port = default_host, default_port
        value = input.strip()

        if value.startswith("["):
            # bracketed IPv6 literal, an optional port follows the closing bracket
            end = value.find("]")
            if end < 0:
                raise ValueError(f"invalid IPv6 address {input}")
            host = value[1:end] or default_host
            value = value[end + 1 :]
            if value and not value.startswith(":"):
                raise ValueError(f"invalid address {input}")
            port_s = value[1:]
        elif ":" in value:
            hostname, port_s = value.rsplit(":", 1)
            if hostname.strip():
                host = hostname.strip()
        else:
            port_s = ""
            if value:
                host = value

        if port_s:
            try:
                port = int(port_s)
            except ValueError as e:
                raise ValueError(f"specified port {port_s} not a number") from e

        if port < 0 or port >= 2**16:
            raise ValueError("port out of range")

        return cls(host=host, port=port)

    def host_and_port(self):
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{host}:{self.port}" if self.port is not None else host

    def __hash__(self) -> int:
        return hash((self.host, self.port))

    def __eq__(self, other: "str | HostAndPort") -> bool:
        if isinstance(other, self.__class__):
            return self.host == other.host and self.port == other.port
        elif isinstance(other, str):
            return str(self) == other
        else:
            raise TypeError(f"cannot compare {self.__class__} to {other.__class__}")

    def __str__(self) -> str:
        return self.host_and_port()

    def __repr__(self) -> str:
        return f"HostAndPort(host={self.host}, port={self.port})"


def detect_address(*addresses: str) -> str:
    """
    Determines the address a chain should listen on. The first explicitly passed address wins, then the ``PORT``
    environment variable (as ``:<port>``), and finally ``DEFAULT_ADDRESS``. Empty addresses and ``None`` are
    skipped.

    :param addresses: optional explicit addresses, only the first non-empty one is used
    :return: the listen address
    """
    for address in addresses:
        if address:
            return address

    port = os.environ.get(ENV_PORT, "").strip()
    if port:
        return f":{port}"

    return DEFAULT_ADDRESS

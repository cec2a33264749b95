from middlechain.version import __version__

# middlechain version
VERSION = __version__

# address used by ``Chain.run`` if neither an explicit address nor the PORT variable is set
DEFAULT_PORT = 8080
DEFAULT_ADDRESS = f":{DEFAULT_PORT}"

# host bound to if an address only specifies a port (e.g., ":8080")
BIND_HOST_ALL = "0.0.0.0"

# environment variable that overrides the port of the listen address
ENV_PORT = "PORT"

DEFAULT_ENCODING = "utf-8"

# strings to indicate truthy/falsy values
TRUE_STRINGS = ("1", "true", "True")
# strings with valid log levels for MC_LOG
LOG_LEVELS = ("trace", "debug", "info", "warn", "error", "warning")
LOG_LEVEL_TRACE = "trace"

# default body of the response written by the recovery handler
INTERNAL_SERVER_ERROR_BODY = "500 Internal Server Error"

# index file served by the static handler for directory requests
DEFAULT_INDEX_FILE = "index.html"
# directory served by the classic chain
DEFAULT_STATIC_DIRECTORY = "public"

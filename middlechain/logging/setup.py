import logging
import sys
import warnings

from middlechain import config, constants

from .format import AddFormattedAttributes, DefaultFormatter

# default levels of loggers that are too chatty at the level of the middlechain loggers
default_log_levels = {
    "urllib3": logging.WARNING,
    "requests": logging.WARNING,
    "werkzeug": logging.WARNING,
    "middlechain.chain": logging.INFO,
    "middlechain.request": logging.INFO,
}

trace_log_levels = {
    "werkzeug": logging.INFO,
    "middlechain.chain": logging.DEBUG,
    "middlechain.request": logging.DEBUG,
}


def get_log_level_from_config() -> int:
    # MC_LOG overrides DEBUG
    if config.MC_LOG:
        log_level = str(config.MC_LOG).upper()
        if log_level.lower() == constants.LOG_LEVEL_TRACE:
            log_level = "DEBUG"
        if log_level == "WARN":
            log_level = "WARNING"
        return logging.getLevelName(log_level)

    return logging.DEBUG if config.DEBUG else logging.INFO


def setup_logging_from_config():
    setup_logging(get_log_level_from_config())

    if config.is_trace_logging_enabled():
        for name, level in trace_log_levels.items():
            logging.getLogger(name).setLevel(level)


def create_default_handler(log_level: int):
    log_handler = logging.StreamHandler(stream=sys.stderr)
    log_handler.setLevel(log_level)
    log_handler.setFormatter(DefaultFormatter())
    log_handler.addFilter(AddFormattedAttributes())
    return log_handler


def setup_logging(log_level=logging.INFO) -> None:
    """
    Configures the python logging environment for middlechain applications.

    :param log_level: the optional log level.
    """
    # basically logging.basicConfig, but with an explicit handler
    log_handler = create_default_handler(log_level)
    logging.basicConfig(level=log_level, handlers=[log_handler])

    logging.captureWarnings(True)
    warnings.filterwarnings("ignore", category=DeprecationWarning)

    logging.root.setLevel(log_level)
    logging.getLogger("middlechain").setLevel(log_level)
    for logger, level in default_log_levels.items():
        logging.getLogger(logger).setLevel(max(level, log_level))

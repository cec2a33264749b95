"""Tools for formatting middlechain logs."""
import logging
from functools import lru_cache

MAX_THREAD_NAME_LEN = 12
MAX_NAME_LEN = 26

LOG_FORMAT = f"%(asctime)s.%(msecs)03d %(mc_level)5s --- [%(mc_thread){MAX_THREAD_NAME_LEN}s] %(mc_name)-{MAX_NAME_LEN}s : %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

CUSTOM_LEVEL_NAMES = {
    50: "FATAL",
    40: "ERROR",
    30: "WARN",
    20: "INFO",
    10: "DEBUG",
}


class DefaultFormatter(logging.Formatter):
    """
    A formatter that uses ``LOG_FORMAT`` and ``LOG_DATE_FORMAT``.
    """

    def __init__(self, fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT):
        super().__init__(fmt=fmt, datefmt=datefmt)


class AddFormattedAttributes(logging.Filter):
    """
    Filter that adds the attributes used by ``LOG_FORMAT`` to a log record:

    - mc_level: the abbreviated log level, at most 5 characters long
    - mc_name: the logger name, compressed to ``MAX_NAME_LEN`` (e.g., ``m.handlers.recovery``)
    - mc_thread: the tail of the thread name, at most ``MAX_THREAD_NAME_LEN`` characters long
    """

    def __init__(self, max_name_len: int = None, max_thread_len: int = None):
        super().__init__()
        self.max_name_len = max_name_len or MAX_NAME_LEN
        self.max_thread_len = max_thread_len or MAX_THREAD_NAME_LEN

    def filter(self, record):
        record.mc_level = CUSTOM_LEVEL_NAMES.get(record.levelno, record.levelname)
        record.mc_name = self._compressed_name(record.name)
        record.mc_thread = record.threadName[-self.max_thread_len :]
        return True

    @lru_cache(maxsize=256)
    def _compressed_name(self, name):
        return compress_logger_name(name, self.max_name_len)


def compress_logger_name(name: str, length: int) -> str:
    """
    Shortens a dotted logger name to fit the given length. Leading parts are collapsed to their first letter,
    starting from the left, until the name fits. For example ``my.very.long.logger.name`` with length=17 turns into
    ``m.v.l.logger.name``. If even the fully collapsed name is too long, the last part is cut to what's left.

    :param name: the logger name
    :param length: the max length of the logger name
    :return: the compressed name
    """
    if len(name) <= length:
        return name

    parts = name.split(".")
    *head, last = parts

    # expand parts from the right for as long as the result fits
    expanded = []
    budget = length - (2 * len(head))
    for part in reversed(head):
        if len(last) + sum(len(p) - 1 for p in expanded) + len(part) - 1 > budget:
            break
        expanded.append(part)

    collapsed = [p[0] for p in head[: len(head) - len(expanded)]]
    if collapsed and len(expanded) == 0 and len(last) > budget:
        last = last[: max(budget, 1)]
    elif not head:
        last = last[:length]

    return ".".join(collapsed + list(reversed(expanded)) + [last])

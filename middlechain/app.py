from middlechain.constants import DEFAULT_STATIC_DIRECTORY

from .chain import Chain
from .handlers import Recovery, RequestLogger, Static


def classic(directory: str = DEFAULT_STATIC_DIRECTORY) -> Chain:
    """
    Creates a chain with the default middleware: ``Recovery``, ``RequestLogger``, and ``Static`` serving files from
    the given directory.

    :param directory: the directory static files are served from
    :return: a new chain
    """
    return Chain(Recovery(), RequestLogger(), Static(directory))

"""Common middleware handlers for chains."""
from .logging import RequestLogger
from .recovery import PanicInformation, Recovery
from .static import Static

__all__ = ["RequestLogger", "Recovery", "PanicInformation", "Static"]

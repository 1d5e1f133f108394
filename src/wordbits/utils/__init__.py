from .log import configure_logger
from .words import from_bytes, to_bytes

__all__ = ["configure_logger", "from_bytes", "to_bytes"]

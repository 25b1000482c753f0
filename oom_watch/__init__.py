"""Parse kernel OOM killer reports from /dev/kmsg into structured events."""

__all__ = [
    "OomInstance",
    "OomParser",
    "new",
    "open_kmsg",
    "OomWatchError",
    "SourceUnavailable",
    "MalformedTerminalLine",
]

from .errors import MalformedTerminalLine, OomWatchError, SourceUnavailable
from .models import OomInstance
from .log.kmsg_scanner import open_kmsg
from .detective.oom_parser import OomParser, new

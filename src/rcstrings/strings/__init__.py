"""String table parsing and models."""

from .content import RcFileContent
from .ids import next_id
from .models import StringEntry, escape_value, unescape_value
from .parser import RcParser

__all__ = [
    "RcFileContent",
    "RcParser",
    "StringEntry",
    "escape_value",
    "next_id",
    "unescape_value",
]

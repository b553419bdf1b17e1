"""Header synchronization."""

from .header_writer import HeaderFileWriter

__all__ = ["HeaderFileWriter"]

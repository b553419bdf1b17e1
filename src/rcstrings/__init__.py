"""Keep .rc string tables and their resource headers in sync."""

__version__ = "0.1.0"

"""bgit - commit files to other branches without checking them out."""

__version__ = "0.1.0"

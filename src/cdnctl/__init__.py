"""cdnctl — command-line control for CDN services."""

__version__ = "0.4.0"

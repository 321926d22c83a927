"""Push files to GitHub through the REST content API."""

__version__ = "0.1.0"

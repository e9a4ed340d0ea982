"""Resume-driven job search with paginated results and chat advice."""

__version__ = "0.1.0"

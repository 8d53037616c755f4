"""Parse Taiwan Stock Exchange feed captures (Formats 1 and 6) into an in-memory database."""

__version__ = "0.1.0"
"""Release version of the Eye2Gene web application."""

__version__ = "1.0.0"

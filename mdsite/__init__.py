"""Static site generator for Markdown content rendered through Jinja2 templates."""

__version__ = "0.1.0"

__all__ = ["__version__"]
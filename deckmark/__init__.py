"""Markdown parsing into styled elements for terminal presentations."""

__version__ = "0.1.0"

__all__ = ["elements", "html", "inlines", "parse", "text", "text_style"]
"""Knowledge graph builder and query tools for source trees."""

__version__ = "1.0.0"

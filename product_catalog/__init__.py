"""Product catalog REST backend with Contentful sync and reports."""

__version__ = "1.0.0"

"""Wiki.js page tools for the Model Context Protocol."""

__version__ = "1.0.0"

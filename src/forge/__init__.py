"""forge - create new projects from zipped templates."""

__version__ = "0.1.0"

"""TMDB proxy addon application package."""

__version__ = "1.0.4"

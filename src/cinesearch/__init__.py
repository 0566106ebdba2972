"""CineSearch: hybrid local/remote search for a movie and series catalog."""

__version__ = "0.1.0"

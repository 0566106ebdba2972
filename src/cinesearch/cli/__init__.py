"""CineSearch command-line interface."""

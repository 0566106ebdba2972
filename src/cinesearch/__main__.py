"""Entry point for ``python -m cinesearch``."""

from cinesearch.cli.typer_app import app

if __name__ == "__main__":
    app()

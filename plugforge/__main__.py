"""Entry point for running plugforge as a module: python -m plugforge."""

from plugforge.cli.commands import app

if __name__ == "__main__":
    app()

"""Allow running toolhost as ``python -m toolhost``."""

from toolhost.cli import app

if __name__ == "__main__":
    app()

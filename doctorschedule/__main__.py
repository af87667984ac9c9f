"""
Entry point for ``python -m doctorschedule``.
"""

from .cli.app import app

if __name__ == "__main__":
    app()

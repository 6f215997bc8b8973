"""
Entry point for running hassbridge as a module: python -m hassbridge
"""

from hassbridge.cli.commands import app

if __name__ == "__main__":
    app()

"""
cdnlookup/cli - Click CLI
"""

from .app import cli

__all__: list[str] = ["cli"]

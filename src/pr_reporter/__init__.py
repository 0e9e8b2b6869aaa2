"""Merged pull request reports for GitHub organizations."""

__version__ = "0.1.0"

"""Discord bot that routes submission permission requests to reviewers."""

__version__ = "0.1.0"

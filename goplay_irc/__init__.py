"""IRC bot that evaluates Go snippets on the Go playground."""

__version__ = "0.3.0"

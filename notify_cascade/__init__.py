"""Send CI run notifications to a generic webhook and Slack."""

__version__ = "0.1.0"

"""viewforge — configuration-driven view generation."""

__version__ = "0.1.0"

"""Self-hosted local event tracker with a daily AI-assisted web scan."""

__version__ = "1.0.0"

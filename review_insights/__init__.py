"""AI-assisted code review service with analytics over review history."""

__version__ = "1.0.0"

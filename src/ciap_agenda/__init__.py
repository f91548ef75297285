"""CIAP agenda service: events, reminders and natural-language scheduling."""

__version__ = "0.1.0"

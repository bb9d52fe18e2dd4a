"""another-mq broker configuration package."""

__version__ = "0.1.0"

"""Typed configuration loading for the another-mq broker."""

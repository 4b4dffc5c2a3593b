"""Shared decorators and exception types."""

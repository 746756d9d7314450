"""Core enumerations and exception hierarchy."""

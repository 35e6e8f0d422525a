# FILE: app/exceptions.py
"""Exceptions shared across domains."""


class BadRequestError(ValueError):
    """Caller-supplied input is unusable (empty prompt, empty HTML, blank name)."""
    pass


__all__ = ["BadRequestError"]

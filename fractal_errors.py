"""Errors raised while expanding or drawing an L-system fractal.

The engine and the interpreter raise these; the web service and the CLI
turn them into user-visible messages.
"""


class FractalError(Exception):
    """Base class for every fractal rendering failure."""


class InvalidConfig(FractalError, ValueError):
    """Malformed rule, empty axiom or out-of-range parameter."""


class ResourceLimitExceeded(FractalError):
    """Expansion would grow past the allowed sequence length."""

    def __init__(self, message, limit=None):
        super().__init__(message)
        self.limit = limit


class MalformedSequence(FractalError):
    """A ']' was reached with nothing on the branch stack."""

    def __init__(self, message, index=None):
        super().__init__(message)
        self.index = index


__all__ = [
    "FractalError",
    "InvalidConfig",
    "ResourceLimitExceeded",
    "MalformedSequence",
]

"""Exceptions raised by commitchain."""


class CommitChainError(Exception):
    """Base exception for all commitchain errors."""


class InvalidArgumentError(CommitChainError, ValueError):
    """Raised when an operation receives an argument it cannot accept.

    Always raised before any state is mutated.
    """

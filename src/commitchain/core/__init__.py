"""Repository management for commitchain."""

from .repository import Repository

__all__ = ["Repository"]

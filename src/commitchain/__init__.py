"""commitchain - in-memory commit chains with chronological synchronization."""

from commitchain.core.repository import Repository
from commitchain.exceptions import CommitChainError, InvalidArgumentError
from commitchain.models import Commit, CommitIdGenerator, default_id_generator

__version__ = "0.1.0"

__all__ = [
    "Commit",
    "CommitChainError",
    "CommitIdGenerator",
    "InvalidArgumentError",
    "Repository",
    "default_id_generator",
]

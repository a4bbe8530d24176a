"""Data models for commitchain."""

from .commit import DEFAULT_DATE_FORMAT, Commit
from .ids import CommitIdGenerator, current_time_ms, default_id_generator

__all__ = [
    "DEFAULT_DATE_FORMAT",
    "Commit",
    "CommitIdGenerator",
    "current_time_ms",
    "default_id_generator",
]

"""Commit model for commitchain repositories."""

from datetime import datetime, tzinfo
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict

from commitchain.exceptions import InvalidArgumentError
from commitchain.models.ids import (
    CommitIdGenerator,
    current_time_ms,
    default_id_generator,
)

DEFAULT_DATE_FORMAT = "%Y-%m-%d at %H:%M:%S %Z"


class Commit(BaseModel):
    """A single immutable entry in a repository's history.

    Commits form a singly-linked chain through ``previous``, newest first.
    Only the owning ``Repository`` changes that link.
    """

    id: str
    message: str
    timestamp: int  # milliseconds since the epoch
    _previous: Optional["Commit"] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def create(
        cls,
        message: str,
        previous: Optional["Commit"] = None,
        *,
        ids: Optional[CommitIdGenerator] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> "Commit":
        """Create a commit with the next id and the current time."""
        if not isinstance(message, str):
            raise InvalidArgumentError("Commit message must be a string")

        ids = ids if ids is not None else default_id_generator
        clock = clock if clock is not None else current_time_ms

        commit = cls(id=ids.next_id(), message=message, timestamp=clock())
        commit._link(previous)
        return commit

    @property
    def previous(self) -> Optional["Commit"]:
        """The next older commit in this chain, or None."""
        return self._previous

    @property
    def created_at(self) -> datetime:
        """Commit time as an aware datetime in local time."""
        return datetime.fromtimestamp(self.timestamp / 1000).astimezone()

    def format(
        self, tz: Optional[tzinfo] = None, date_format: str = DEFAULT_DATE_FORMAT
    ) -> str:
        """Render as ``"<id> at <date>: <message>"``."""
        if tz is None:
            moment = self.created_at
        else:
            moment = datetime.fromtimestamp(self.timestamp / 1000, tz=tz)
        return f"{self.id} at {moment.strftime(date_format)}: {self.message}"

    def _link(self, previous: Optional["Commit"]) -> None:
        # Repository-internal: rewires the chain, never touches fields.
        self._previous = previous

    # Compare on the record itself; the chain link stays out of it.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Commit):
            return NotImplemented
        return (self.id, self.message, self.timestamp) == (
            other.id,
            other.message,
            other.timestamp,
        )

    def __hash__(self) -> int:
        return hash((self.id, self.message, self.timestamp))

    def __str__(self) -> str:
        return self.format()

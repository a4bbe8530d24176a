"""Repository management: commit chains and chronological synchronization."""

import logging
from datetime import tzinfo
from itertools import islice
from typing import Callable, Iterator, List, Optional

from commitchain.exceptions import InvalidArgumentError
from commitchain.models.commit import DEFAULT_DATE_FORMAT, Commit
from commitchain.models.ids import CommitIdGenerator

logger = logging.getLogger(__name__)


class Repository:
    """Owns a most-recent-first chain of commits.

    ``size`` always matches the number of commits reachable from the head.
    Instances are not safe for concurrent use.
    """

    def __init__(
        self,
        name: str,
        *,
        ids: Optional[CommitIdGenerator] = None,
        clock: Optional[Callable[[], int]] = None,
        tz: Optional[tzinfo] = None,
        date_format: str = DEFAULT_DATE_FORMAT,
    ):
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError("Repository name cannot be None or empty")

        self.name = name
        self.tz = tz
        self.date_format = date_format
        self._ids = ids
        self._clock = clock
        self._head: Optional[Commit] = None
        self._size = 0

    @property
    def head(self) -> Optional[str]:
        """Id of the most recent commit, or None if empty."""
        return self._head.id if self._head is not None else None

    @property
    def size(self) -> int:
        """Number of commits in the repository."""
        return self._size

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Commit]:
        current = self._head
        while current is not None:
            yield current
            current = current.previous

    def __contains__(self, target_id: object) -> bool:
        return self.contains(target_id)

    def __str__(self) -> str:
        if self._head is None:
            return f"{self.name} - No commits"
        return f"{self.name} - Current head: {self._format(self._head)}"

    def __repr__(self) -> str:
        return f"Repository(name={self.name!r}, size={self._size})"

    def contains(self, target_id: object) -> bool:
        """Check whether a commit with ``target_id`` is in this repository."""
        return any(commit.id == target_id for commit in self)

    def commit(self, message: str) -> str:
        """Add a commit on top of the current head and return its id."""
        new_commit = Commit.create(
            message, self._head, ids=self._ids, clock=self._clock
        )
        self._head = new_commit
        self._size += 1

        logger.debug("%s: committed %s (size=%d)", self.name, new_commit.id, self._size)
        return new_commit.id

    def drop(self, target_id: str) -> bool:
        """Remove the commit with ``target_id``, keeping the rest in order.

        Returns False if no such commit exists.
        """
        if self._head is None:
            return False

        if self._head.id == target_id:
            self._head = self._head.previous
            self._size -= 1
            logger.debug("%s: dropped head %s", self.name, target_id)
            return True

        current = self._head
        while current.previous is not None:
            if current.previous.id == target_id:
                current._link(current.previous.previous)
                self._size -= 1
                logger.debug("%s: dropped %s", self.name, target_id)
                return True
            current = current.previous

        return False

    def log(self, n: int) -> List[Commit]:
        """Return up to ``n`` most recent commits, newest first.

        Asking for more commits than exist is not an error.
        """
        if isinstance(n, bool) or not isinstance(n, int) or n < 1:
            raise InvalidArgumentError(
                "Number of commits to retrieve must be positive"
            )
        return list(islice(self, n))

    def history(self, n: int) -> str:
        """Return the ``n`` most recent commits formatted, one per line."""
        return "\n".join(self._format(commit) for commit in self.log(n))

    def synchronize(self, other: "Repository") -> None:
        """Merge ``other``'s commits into this repository and empty ``other``.

        Commits end up ordered by timestamp, newest first. When two commits
        share a timestamp, the one already in this repository comes first.
        Commits are relinked, not copied.
        """
        if other is self or other._head is None:
            logger.debug("%s: nothing to synchronize from %s", self.name, other.name)
            return

        if self._head is None:
            self._head = other._head
            self._size = other._size
            other._clear()
            logger.debug(
                "%s: adopted %d commits from %s", self.name, self._size, other.name
            )
            return

        mine: Optional[Commit] = self._head
        theirs: Optional[Commit] = other._head
        merged_head: Optional[Commit] = None
        tail: Optional[Commit] = None

        while mine is not None and theirs is not None:
            if mine.timestamp >= theirs.timestamp:
                node, mine = mine, mine.previous
            else:
                node, theirs = theirs, theirs.previous

            if tail is None:
                merged_head = node
            else:
                tail._link(node)
            tail = node

        # One side is exhausted; the other is already in order.
        tail._link(mine if mine is not None else theirs)

        self._head = merged_head
        self._size = sum(1 for _ in self)
        other._clear()

        logger.debug(
            "%s: merged commits from %s (size=%d)", self.name, other.name, self._size
        )

    def _format(self, commit: Commit) -> str:
        return commit.format(self.tz, self.date_format)

    def _clear(self) -> None:
        self._head = None
        self._size = 0

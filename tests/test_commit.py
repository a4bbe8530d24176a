"""Tests for the Commit model and id generation."""

import threading
from datetime import timezone
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from commitchain.exceptions import InvalidArgumentError
from commitchain.models import Commit, CommitIdGenerator, default_id_generator


def test_create_assigns_sequential_ids():
    first = Commit.create("first")
    second = Commit.create("second", first)

    assert first.id == "0"
    assert second.id == "1"
    assert second.previous is first
    assert first.previous is None
    assert default_id_generator.peek() == 2


def test_create_uses_clock(clock):
    commit = Commit.create("hello", clock=clock)
    assert commit.timestamp == clock.now


def test_create_rejects_none_message():
    with pytest.raises(InvalidArgumentError):
        Commit.create(None)
    # No id was consumed
    assert default_id_generator.peek() == 0


def test_invalid_argument_is_value_error():
    with pytest.raises(ValueError):
        Commit.create(None)


def test_fields_are_immutable():
    commit = Commit.create("message")
    with pytest.raises(ValidationError):
        commit.message = "changed"


def test_previous_has_no_public_setter():
    older = Commit.create("older")
    commit = Commit.create("newer")
    with pytest.raises((AttributeError, ValidationError)):
        commit.previous = older
    assert commit.previous is None


def test_format_in_utc():
    commit = Commit(id="0", message="msg", timestamp=0)
    assert commit.format(timezone.utc) == "0 at 1970-01-01 at 00:00:00 UTC: msg"


def test_format_in_named_zone():
    # 2024-01-15 12:30:45 UTC
    commit = Commit(id="7", message="Fix parser", timestamp=1_705_321_845_000)
    assert (
        commit.format(ZoneInfo("America/New_York"))
        == "7 at 2024-01-15 at 07:30:45 EST: Fix parser"
    )


def test_str_uses_local_time():
    commit = Commit.create("local")
    expected_date = commit.created_at.strftime("%Y-%m-%d at %H:%M:%S %Z")
    assert str(commit) == f"0 at {expected_date}: local"


def test_custom_date_format():
    commit = Commit(id="3", message="m", timestamp=0)
    assert commit.format(timezone.utc, "%H:%M") == "3 at 00:00: m"


def test_independent_generators_do_not_share_ids():
    ids_a = CommitIdGenerator()
    ids_b = CommitIdGenerator(start=100)

    assert Commit.create("a", ids=ids_a).id == "0"
    assert Commit.create("b", ids=ids_b).id == "100"
    assert Commit.create("c", ids=ids_a).id == "1"
    assert default_id_generator.peek() == 0


def test_generator_reset():
    ids = CommitIdGenerator()
    ids.next_id()
    ids.next_id()
    ids.reset()
    assert ids.next_id() == "0"
    ids.reset(start=42)
    assert ids.next_id() == "42"


def test_shared_generator_is_unique_across_threads():
    ids = CommitIdGenerator()
    seen = []
    lock = threading.Lock()

    def worker():
        local = [ids.next_id() for _ in range(500)]
        with lock:
            seen.extend(local)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(seen) == 4000
    assert len(set(seen)) == 4000


def test_equality_ignores_chain_link():
    older = Commit(id="1", message="m", timestamp=5)
    linked = Commit.create("m", older, ids=CommitIdGenerator(start=9), clock=lambda: 5)
    unlinked = Commit(id="9", message="m", timestamp=5)

    assert linked == unlinked
    assert hash(linked) == hash(unlinked)
    assert linked != older


def test_comparing_heads_of_long_chains(clock):
    def build_chain(count):
        head = None
        for i in range(count):
            clock.advance()
            head = Commit.create(str(i), head, clock=clock)
        return head

    head_a = build_chain(3000)
    head_b = build_chain(3000)

    assert head_a != head_b
    assert head_a == head_a
    assert head_b not in [head_a]
    assert {head_a, head_b} == {head_b, head_a}

from __future__ import annotations

from adrelay.state.history import HistoryEntry
from adrelay.history.buffer import BoundedHistory


def _entry(n: int) -> HistoryEntry:
    return HistoryEntry(payload={"n": n}, timestamp="2026-01-01T00:00:00.000Z", request_id=f"r{n}", source="single")


def test_overflow_evicts_oldest_first() -> None:
    history: BoundedHistory[HistoryEntry] = BoundedHistory(capacity=100)
    for n in range(105):
        history.append(_entry(n))

    entries = history.all()
    assert len(entries) == 100
    assert entries[0].payload == {"n": 5}
    assert entries[-1].payload == {"n": 104}


def test_append_stamps_increasing_sequence() -> None:
    history: BoundedHistory[HistoryEntry] = BoundedHistory(capacity=3)
    stored = [history.append(_entry(n)) for n in range(5)]
    assert [e.seq for e in stored] == [0, 1, 2, 3, 4]
    assert [e.seq for e in history.all()] == [2, 3, 4]
    assert history.latest_cursor == 4


def test_latest_returns_newest_or_none() -> None:
    history: BoundedHistory[HistoryEntry] = BoundedHistory(capacity=2)
    assert history.latest() is None
    history.append(_entry(1))
    history.append(_entry(2))
    latest = history.latest()
    assert latest is not None and latest.payload == {"n": 2}


def test_since_returns_only_newer_entries() -> None:
    history: BoundedHistory[HistoryEntry] = BoundedHistory(capacity=10)
    for n in range(5):
        history.append(_entry(n))

    fresh, latest = history.since(2)
    assert [e.seq for e in fresh] == [3, 4]
    assert latest == 4

    fresh, latest = history.since(4)
    assert fresh == []
    assert latest == 4

    fresh, _ = history.since(-1)
    assert len(fresh) == 5


def test_since_after_eviction_returns_retained_tail() -> None:
    history: BoundedHistory[HistoryEntry] = BoundedHistory(capacity=3)
    for n in range(10):
        history.append(_entry(n))
    fresh, latest = history.since(1)
    assert [e.seq for e in fresh] == [7, 8, 9]
    assert latest == 9


def test_since_on_empty_history() -> None:
    history: BoundedHistory[HistoryEntry] = BoundedHistory(capacity=3)
    assert history.since(5) == ([], -1)
    assert history.latest_cursor == -1


def test_clear_reports_previous_count_and_resets_cursor() -> None:
    history: BoundedHistory[HistoryEntry] = BoundedHistory(capacity=5)
    for n in range(4):
        history.append(_entry(n))

    assert history.clear() == 4
    assert len(history) == 0
    assert history.all() == []

    stored = history.append(_entry(99))
    assert stored.seq == 0
    # A cursor held from before the clear still sees the new entry.
    fresh, latest = history.since(3)
    assert [e.payload for e in fresh] == [{"n": 99}]
    assert latest == 0


def test_entry_serialization() -> None:
    entry = BoundedHistory(capacity=1).append(_entry(7))
    assert entry.to_frame() == {
        "data": {"n": 7},
        "timestamp": "2026-01-01T00:00:00.000Z",
        "requestId": "r7",
        "source": "single",
    }
    assert entry.to_dict()["id"] == 0

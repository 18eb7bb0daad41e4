"""Tests for the reference-counted storage cell."""

import threading

import pytest

from cowarc import Cell


def test_new_cell_has_single_owner():
    cell = Cell([1, 2, 3])

    assert cell.strong_count == 1
    assert cell.is_unique()
    assert cell.value == [1, 2, 3]


def test_acquire_returns_same_cell_and_counts():
    cell = Cell("x")

    assert cell.acquire() is cell
    assert cell.strong_count == 2
    assert not cell.is_unique()


def test_release_reports_remaining_and_frees_value_at_zero():
    """Last release drops the value.

    Why: Holding the value after the last owner is gone would leak memory.
    """
    cell = Cell(object())
    cell.acquire()

    assert cell.release() == 1
    assert cell.value is not None
    assert cell.release() == 0
    assert cell.released
    with pytest.raises(AttributeError):
        _ = cell.value


def test_over_release_raises():
    cell = Cell(1)
    cell.release()

    with pytest.raises(RuntimeError, match="released more times"):
        cell.release()


def test_acquire_after_release_raises():
    """A freed cell can never be resurrected.

    Why: Resurrecting would hand out a handle to storage without a value.
    """
    cell = Cell(1)
    cell.release()

    with pytest.raises(RuntimeError, match="already been released"):
        cell.acquire()


def test_replace_if_unique_writes_only_for_sole_owner():
    cell = Cell(1)

    assert cell.replace_if_unique(2)
    assert cell.value == 2

    cell.acquire()
    assert not cell.replace_if_unique(3)
    assert cell.value == 2


def test_concurrent_acquire_release_keeps_exact_count():
    """Count changes from many threads never get lost.

    Why: A lost decrement leaks storage; a lost increment frees it too early.
    """
    cell = Cell([0])
    iterations = 2000

    def churn():
        for _ in range(iterations):
            cell.acquire()
            cell.release()

    threads = [threading.Thread(target=churn) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert cell.strong_count == 1


def test_repr_shows_value_and_count():
    cell = Cell(5)
    assert repr(cell) == "Cell(5, strong_count=1)"

    cell.release()
    assert repr(cell) == "Cell('<released>', strong_count=0)"

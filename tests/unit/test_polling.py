"""Unit tests for bounded polling and clocks."""

import threading

import pytest

from cvrelay.contexts.syncing.polling import BoundedPoll, PageClock, SystemClock


@pytest.mark.unit
def test_immediate_success_does_not_sleep(fake_clock):
    """Test that a predicate that already holds returns without sleeping."""
    poll = BoundedPoll(2.0, 5, clock=fake_clock)

    assert poll.wait(lambda: True)
    assert fake_clock.sleeps == []


@pytest.mark.unit
def test_expiry_after_max_attempts(fake_clock):
    """Test that a never-true predicate is checked max_attempts times."""
    checks = []
    poll = BoundedPoll(2.0, 4, clock=fake_clock)

    assert not poll.wait(lambda: checks.append(1))
    assert len(checks) == 4
    assert fake_clock.sleeps == [2.0, 2.0, 2.0]


@pytest.mark.unit
def test_success_after_some_attempts(fake_clock):
    """Test that polling stops as soon as the predicate holds."""
    answers = iter([False, False, True, True])
    poll = BoundedPoll(0.5, 10, clock=fake_clock)

    assert poll.wait(lambda: next(answers))
    assert fake_clock.sleeps == [0.5, 0.5]


@pytest.mark.unit
def test_stop_event_ends_wait(fake_clock):
    """Test that a set stop event ends the wait before the next check."""
    stop_event = threading.Event()
    checks = []

    class StoppingClock:
        def sleep(self, seconds):
            stop_event.set()

    poll = BoundedPoll(1.0, 10, clock=StoppingClock(), stop_event=stop_event)

    assert not poll.wait(lambda: checks.append(1))
    assert len(checks) == 1

    assert not BoundedPoll(1.0, 10, clock=fake_clock, stop_event=stop_event).wait(lambda: True)


@pytest.mark.unit
def test_predicate_errors_propagate(fake_clock):
    """Test that predicate exceptions reach the caller."""
    def broken():
        raise RuntimeError("page closed")

    with pytest.raises(RuntimeError):
        BoundedPoll(1.0, 3, clock=fake_clock).wait(broken)


@pytest.mark.unit
def test_invalid_arguments():
    """Test constructor validation."""
    with pytest.raises(ValueError):
        BoundedPoll(-1.0, 3)
    with pytest.raises(ValueError):
        BoundedPoll(1.0, 0)


@pytest.mark.unit
def test_ceiling():
    """Test the upper bound of a wait."""
    assert BoundedPoll(2.0, 60).ceiling == 120.0


@pytest.mark.unit
def test_system_clock_wakes_on_stop():
    """Test that SystemClock returns at once when the stop event is set."""
    stop_event = threading.Event()
    stop_event.set()

    SystemClock(stop_event).sleep(30)


@pytest.mark.unit
def test_page_clock_sleeps_in_milliseconds():
    """Test that PageClock delegates to the page in milliseconds."""
    class Page:
        def __init__(self):
            self.timeouts = []

        def wait_for_timeout(self, ms):
            self.timeouts.append(ms)

    page = Page()
    PageClock(page).sleep(1.5)

    assert page.timeouts == [1500.0]

"""Tests for AvailabilitySignal."""

from proxylite.app.availability import AvailabilitySignal


def test_starts_unavailable():
    assert AvailabilitySignal().is_available is False


def test_register_delivers_current_state_immediately():
    signal = AvailabilitySignal()
    seen: list[bool] = []

    signal.on_available(seen.append)

    assert seen == [False]


def test_flip_notifies_registered_listeners_once():
    signal = AvailabilitySignal()
    first: list[bool] = []
    second: list[bool] = []
    signal.on_available(first.append)
    signal.on_available(second.append)

    signal.mark_available()
    signal.mark_available()

    assert first == [False, True]
    assert second == [False, True]
    assert signal.is_available is True


def test_late_listener_gets_true_only_once():
    signal = AvailabilitySignal()
    signal.mark_available()
    seen: list[bool] = []

    signal.on_available(seen.append)
    signal.mark_available()

    assert seen == [True]


def test_handles_are_distinct():
    signal = AvailabilitySignal()

    handles = {signal.on_available(lambda ready: None) for _ in range(3)}

    assert len(handles) == 3

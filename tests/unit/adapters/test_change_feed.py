"""Tests for the in-process change feed."""

from app.adapters.persistence.change_feed import ChangeFeed


def test_publish_reaches_every_listener():
    feed = ChangeFeed()
    calls = []
    feed.subscribe(lambda: calls.append("a"))
    feed.subscribe(lambda: calls.append("b"))

    feed.publish()

    assert calls == ["a", "b"]


def test_unsubscribe_stops_delivery():
    feed = ChangeFeed()
    calls = []
    unsubscribe = feed.subscribe(lambda: calls.append(1))

    unsubscribe()
    feed.publish()

    assert calls == []
    assert len(feed) == 0


def test_unsubscribe_twice_is_harmless():
    feed = ChangeFeed()
    unsubscribe = feed.subscribe(lambda: None)
    unsubscribe()
    unsubscribe()
    assert len(feed) == 0


def test_same_callback_subscribed_twice_is_independent():
    feed = ChangeFeed()
    calls = []
    listener = lambda: calls.append(1)  # noqa: E731
    first = feed.subscribe(listener)
    feed.subscribe(listener)

    first()
    feed.publish()

    assert calls == [1]


def test_failing_listener_does_not_stop_others():
    feed = ChangeFeed()
    calls = []

    def broken():
        raise RuntimeError("listener bug")

    feed.subscribe(broken)
    feed.subscribe(lambda: calls.append("ok"))

    feed.publish()

    assert calls == ["ok"]


def test_listener_may_unsubscribe_during_publish():
    feed = ChangeFeed()
    calls = []
    holder = {}

    def once():
        calls.append("once")
        holder["unsubscribe"]()

    holder["unsubscribe"] = feed.subscribe(once)
    feed.publish()
    feed.publish()

    assert calls == ["once"]

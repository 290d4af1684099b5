"""Tests for the Observable/Signal event helpers."""

from mediabox.utils.events import Observable, Signal


class Source(Observable):
    changed = Signal(str, int)


class TestSignal:
    """Connection, emission and isolation between instances."""

    def test_emit_calls_connected_callbacks_in_order(self):
        source = Source()
        seen = []
        source.changed.connect(lambda name, n: seen.append(("first", name, n)))
        source.changed.connect(lambda name, n: seen.append(("second", name, n)))
        source.changed.emit("a", 1)
        assert seen == [("first", "a", 1), ("second", "a", 1)]

    def test_instances_do_not_share_receivers(self):
        a, b = Source(), Source()
        seen = []
        a.changed.connect(lambda *args: seen.append(args))
        b.changed.emit("b", 2)
        assert seen == []
        assert a.changed.receiver_count() == 1
        assert b.changed.receiver_count() == 0

    def test_connect_twice_and_disconnect(self):
        source = Source()
        seen = []

        def callback(name, n):
            seen.append(n)

        source.changed.connect(callback)
        source.changed.connect(callback)
        source.changed.emit("x", 1)
        source.changed.disconnect(callback)
        source.changed.emit("x", 2)
        assert seen == [1]

    def test_failing_callback_does_not_stop_emission(self):
        source = Source()
        seen = []

        def broken(name, n):
            raise RuntimeError("bug")

        source.changed.connect(broken)
        source.changed.connect(lambda name, n: seen.append(n))
        source.changed.emit("x", 3)
        assert seen == [3]

    def test_class_access_returns_descriptor(self):
        assert isinstance(Source.changed, Signal)
        assert Source.changed.name == "changed"

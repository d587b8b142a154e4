"""
Tests for room fan-out.
"""

import json

from tests.conftest import FakeConnection


class TestBroadcaster:

    def test_delivers_only_to_room_members(self, registry, broadcaster):
        a, b, other = FakeConnection(), FakeConnection(), FakeConnection()
        registry.set_room(a, "lobby")
        registry.set_room(b, "lobby")
        registry.set_room(other, "kitchen")

        delivered = broadcaster.broadcast("lobby", {"type": "presence", "room": "lobby"})

        assert delivered == 2
        assert a.events() == [{"type": "presence", "room": "lobby"}]
        assert b.events() == [{"type": "presence", "room": "lobby"}]
        assert other.sent == []

    def test_one_failing_peer_does_not_block_others(self, registry, broadcaster):
        first, stuck, last = FakeConnection(), FakeConnection(), FakeConnection()
        for conn in (first, stuck, last):
            registry.set_room(conn, "lobby")
        stuck.full = True

        delivered = broadcaster.broadcast("lobby", {"n": 1})

        assert delivered == 2
        assert first.events() == [{"n": 1}]
        assert last.events() == [{"n": 1}]
        assert stuck.sent == []

    def test_unexpected_send_error_is_contained(self, registry, broadcaster):
        class Exploding(FakeConnection):
            def send(self, text):
                raise ValueError("bad peer")

        bad, good = Exploding(), FakeConnection()
        registry.set_room(bad, "lobby")
        registry.set_room(good, "lobby")

        assert broadcaster.broadcast("lobby", {"n": 1}) == 1
        assert good.events() == [{"n": 1}]

    def test_successive_broadcasts_keep_order_per_connection(self, registry, broadcaster):
        conn = FakeConnection()
        registry.set_room(conn, "lobby")

        for n in range(5):
            broadcaster.broadcast("lobby", {"n": n})

        assert [e["n"] for e in conn.events()] == [0, 1, 2, 3, 4]

    def test_empty_room(self, broadcaster):
        assert broadcaster.broadcast("nobody-here", {"n": 1}) == 0

    def test_frame_is_compact_json(self, registry, broadcaster):
        conn = FakeConnection()
        registry.set_room(conn, "lobby")

        broadcaster.broadcast("lobby", {"type": "typing", "typing": True})

        assert conn.sent == [json.dumps({"type": "typing", "typing": True}, separators=(",", ":"))]

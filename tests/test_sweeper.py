#!/usr/bin/env python3
"""
Unit tests for the inactivity sweeper.
"""

import threading
import time
import unittest
from unittest.mock import Mock, patch

from chat_room_api.app.errors import StorageFailure
from chat_room_api.services.sweeper import InactivitySweeper
from tests.chat_room_fixtures import FakeClock, make_chat_room


class TestInactivitySweep(unittest.TestCase):
    """A single sweep tick."""

    def setUp(self):
        self.clock = FakeClock()
        self.room = make_chat_room(self.clock)

    def _register_at(self, name, offset_ms):
        self.clock.now += offset_ms
        self.room.directory.register(name)
        self.clock.now -= offset_ms

    def test_evicts_stale_participant_and_keeps_active_one(self):
        self._register_at("A", -11000)
        self._register_at("B", -1000)
        before = len(self.room.messages.list_all())

        evicted = self.room.sweeper.sweep()

        self.assertEqual(evicted, ["A"])
        self.assertEqual([p.name for p in self.room.directory.list()], ["B"])

        new_messages = self.room.messages.list_all()[before:]
        self.assertEqual(len(new_messages), 1)
        departure = new_messages[0].to_dict()
        self.assertEqual(departure["from"], "A")
        self.assertEqual(departure["to"], "Todos")
        self.assertEqual(departure["text"], "sai da sala...")
        self.assertEqual(departure["type"], "status")

    def test_heartbeat_at_threshold_is_stale(self):
        self._register_at("A", -10000)
        self.assertEqual(self.room.sweeper.sweep(), ["A"])

    def test_nothing_to_do(self):
        self._register_at("B", -1000)
        before = len(self.room.messages.list_all())

        self.assertEqual(self.room.sweeper.sweep(), [])

        self.assertEqual(len(self.room.messages.list_all()), before)
        self.assertEqual([p.name for p in self.room.directory.list()], ["B"])

    def test_one_departure_per_evicted_participant(self):
        for name in ("A", "C", "D"):
            self._register_at(name, -20000)

        evicted = self.room.sweeper.sweep()

        self.assertEqual(sorted(evicted), ["A", "C", "D"])
        departures = [m for m in self.room.messages.list_all() if m.text == "sai da sala..."]
        self.assertEqual(sorted(m.sender for m in departures), ["A", "C", "D"])
        self.assertEqual(self.room.directory.list(), [])

    def test_reregistration_creates_a_new_participant(self):
        self._register_at("A", -11000)
        self.room.sweeper.sweep()

        participant = self.room.directory.register("A")

        self.assertEqual(participant.last_heartbeat, self.clock.now)

    def test_heartbeat_between_find_and_evict_keeps_participant(self):
        self._register_at("A", -11000)
        before = len(self.room.messages.list_all())
        find_inactive = self.room.directory.find_inactive

        def find_then_heartbeat(cutoff):
            inactive = find_inactive(cutoff)
            self.room.directory.heartbeat("A")
            return inactive

        with patch.object(self.room.directory, "find_inactive", side_effect=find_then_heartbeat):
            evicted = self.room.sweeper.sweep()

        self.assertEqual(evicted, [])
        self.assertEqual([p.name for p in self.room.directory.list()], ["A"])
        self.assertEqual(len(self.room.messages.list_all()), before)

    def test_failures_are_logged_and_swallowed(self):
        directory = Mock()
        directory.find_inactive.side_effect = StorageFailure("Store operation failed: down")
        log = Mock()
        logger = Mock()
        sweeper = InactivitySweeper(directory, log, clock=self.clock, logger=logger)

        self.assertEqual(sweeper.sweep(), [])

        logger.exception.assert_called_once()
        log.append.assert_not_called()


class TestSweeperLifecycle(unittest.TestCase):
    """The background timer."""

    def test_start_runs_ticks_until_stopped(self):
        directory = Mock()
        directory.find_inactive.return_value = []
        sweeper = InactivitySweeper(directory, Mock(), interval_ms=10, logger=Mock())

        sweeper.start()
        sweeper.start()  # idempotent
        try:
            deadline = time.monotonic() + 2.0
            while directory.find_inactive.call_count < 2 and time.monotonic() < deadline:
                time.sleep(0.01)
            self.assertTrue(sweeper.running)
        finally:
            sweeper.stop()

        self.assertGreaterEqual(directory.find_inactive.call_count, 2)
        self.assertFalse(sweeper.running)

    def test_restart_after_stop_timeout_runs_a_single_loop(self):
        entered = threading.Event()
        release = threading.Event()
        callers = []

        def blocking_find(cutoff):
            callers.append(threading.current_thread())
            if len(callers) == 1:
                entered.set()
                release.wait(2.0)
            return []

        directory = Mock()
        directory.find_inactive.side_effect = blocking_find
        sweeper = InactivitySweeper(directory, Mock(), interval_ms=10, logger=Mock())

        sweeper.start()
        self.assertTrue(entered.wait(2.0))
        first_thread = callers[0]

        sweeper.stop(timeout=0.05)
        self.assertFalse(sweeper.running)
        sweeper.start()
        release.set()
        try:
            first_thread.join(2.0)
            self.assertFalse(first_thread.is_alive())

            deadline = time.monotonic() + 2.0
            while (
                not any(t is not first_thread for t in callers) and time.monotonic() < deadline
            ):
                time.sleep(0.01)
            self.assertTrue(sweeper.running)
        finally:
            sweeper.stop()

        self.assertEqual(sum(1 for t in callers if t is first_thread), 1)
        self.assertTrue(any(t is not first_thread for t in callers))

    def test_stop_without_start(self):
        sweeper = InactivitySweeper(Mock(), Mock(), logger=Mock())
        sweeper.stop()
        self.assertFalse(sweeper.running)


if __name__ == "__main__":
    unittest.main()

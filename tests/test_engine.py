"""
Motor Monitor Tests - Sampling Engine
=====================================

Integration tests for MonitoringService:
- Start/stop idempotence and stop determinism
- Reset semantics while idle and while running
- Subscriber fan-out, isolation and unsubscription
- Disposal and lifecycle misuse
- Torn-read freedom under concurrent access

Timing:
-------
Live-loop tests use 10-20 ms intervals and poll with generous timeouts,
so they only assert lower bounds on activity and upper bounds on rates.

Author: Motor Monitor Team
Date: October 19, 2026
"""

import unittest
import threading
import time
import numpy as np
import logging

from domain import AxisStatus
from engine import (
    EngineDisposedError,
    MonitoringService,
    SubscriptionRegistry,
)
from kinematics import KinematicModel, NoiseModel

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

LOOP_THREAD_NAME = "motor-monitor-loop"


def wait_for(predicate, timeout: float = 2.0, poll: float = 0.005) -> bool:
    """Poll predicate until it holds or timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(poll)
    return predicate()


def loop_threads():
    return [t for t in threading.enumerate() if t.name == LOOP_THREAD_NAME and t.is_alive()]


class Recorder:
    """Thread-safe subscriber that keeps every snapshot."""

    def __init__(self):
        self._lock = threading.Lock()
        self.snapshots = []

    def __call__(self, snapshot):
        with self._lock:
            self.snapshots.append(snapshot)

    def __len__(self):
        with self._lock:
            return len(self.snapshots)

    @property
    def last(self):
        with self._lock:
            return self.snapshots[-1]


class EngineTestCase(unittest.TestCase):
    """Creates a seeded service and always disposes it."""

    def setUp(self):
        """Set up test fixtures."""
        self.service = MonitoringService(seed=1234)
        self.recorder = Recorder()
        self.service.subscribe(self.recorder)

    def tearDown(self):
        self.service.dispose()
        self.assertTrue(wait_for(lambda: not loop_threads()))


class TestInitialState(EngineTestCase):
    """Test the freshly constructed service."""

    def test_idle_and_ready(self):
        snap = self.service.get_current_status()

        self.assertFalse(self.service.is_running)
        self.assertEqual(snap.status, AxisStatus.READY)
        self.assertEqual(snap.encoder_command, 0)
        self.assertEqual(snap.encoder_feedback, 0)
        self.assertEqual(snap.position_error, 0)
        self.assertEqual(self.service.interval_ms, 100)

    def test_no_publish_without_activity(self):
        """A subscriber added while idle receives nothing by itself."""
        time.sleep(0.05)
        self.assertEqual(len(self.recorder), 0)


class TestStartStop(EngineTestCase):
    """Test the run-state machine."""

    def test_start_sets_running(self):
        self.service.start_monitoring(10)

        self.assertTrue(self.service.is_running)
        self.assertEqual(self.service.get_current_status().status, AxisStatus.RUNNING)
        self.assertTrue(wait_for(lambda: len(self.recorder) >= 3))
        self.assertTrue(all(s.status == AxisStatus.RUNNING for s in self.recorder.snapshots[:3]))

    def test_double_start_single_loop(self):
        """Second start is a no-op: one loop thread, one tick rate."""
        self.service.start_monitoring(20)
        self.service.start_monitoring(20)
        self.service.start_monitoring()

        self.assertEqual(len(loop_threads()), 1)
        self.assertEqual(self.service.interval_ms, 20)

        started = time.monotonic()
        time.sleep(0.4)
        ticks = self.service.stats.tick_count
        elapsed = time.monotonic() - started

        self.assertGreater(ticks, 0)
        self.assertLessEqual(ticks, int(elapsed / 0.020) + 2)

    def test_stop_is_deterministic(self):
        """After stop returns: idle, READY, and no more ticks delivered."""
        self.service.start_monitoring(10)
        self.assertTrue(wait_for(lambda: len(self.recorder) >= 2))

        self.service.stop_monitoring()

        self.assertFalse(self.service.is_running)
        self.assertEqual(self.service.get_current_status().status, AxisStatus.READY)
        self.assertEqual(self.recorder.last.status, AxisStatus.READY)
        self.assertEqual(loop_threads(), [])

        count = len(self.recorder)
        time.sleep(0.1)
        self.assertEqual(len(self.recorder), count)

    def test_stop_publishes_once(self):
        """Exactly one final snapshot; a second stop is a no-op."""
        self.service.start_monitoring(1000)
        self.service.stop_monitoring()
        self.service.stop_monitoring()

        self.assertEqual(len(self.recorder), 1)
        self.assertEqual(self.recorder.last.status, AxisStatus.READY)

    def test_stop_when_idle_is_noop(self):
        self.service.stop_monitoring()
        self.assertEqual(len(self.recorder), 0)

    def test_restart_after_stop(self):
        """A new run starts a fresh loop; the old one is gone."""
        self.service.start_monitoring(10)
        self.assertTrue(wait_for(lambda: len(self.recorder) >= 2))
        self.service.stop_monitoring()

        self.service.start_monitoring(15)
        self.assertEqual(len(loop_threads()), 1)
        self.assertEqual(self.service.interval_ms, 15)

        count = len(self.recorder)
        self.assertTrue(wait_for(lambda: len(self.recorder) >= count + 2))
        self.service.stop_monitoring()

    def test_invalid_interval_rejected(self):
        for bad in [0, -10, 1.5, "100", True]:
            with self.assertRaises(ValueError):
                self.service.start_monitoring(bad)

        self.assertFalse(self.service.is_running)
        self.assertEqual(self.service.get_current_status().status, AxisStatus.READY)
        self.assertEqual(loop_threads(), [])

    def test_stop_from_subscriber(self):
        """A subscriber on the loop thread may stop the engine."""
        stopped = threading.Event()

        def stop_on_first(snapshot):
            if snapshot.status == AxisStatus.RUNNING and not stopped.is_set():
                self.service.stop_monitoring()
                stopped.set()

        self.service.subscribe(stop_on_first)
        self.service.start_monitoring(10)

        self.assertTrue(stopped.wait(2.0))
        self.assertFalse(self.service.is_running)
        self.assertTrue(wait_for(lambda: not loop_threads()))
        self.assertEqual(self.service.get_current_status().status, AxisStatus.READY)

    def test_stop_from_subscriber_cuts_publish_short(self):
        """Subscribers after the stopper never see the interrupted tick."""
        service = MonitoringService(seed=7)
        stopped = threading.Event()
        tail = Recorder()

        def stop_on_first(snapshot):
            if snapshot.status == AxisStatus.RUNNING and not stopped.is_set():
                stopped.set()
                service.stop_monitoring()

        service.subscribe(stop_on_first)
        service.subscribe(tail)
        try:
            service.start_monitoring(10)
            self.assertTrue(stopped.wait(2.0))
            self.assertTrue(wait_for(lambda: not loop_threads()))
            time.sleep(0.05)

            self.assertEqual([s.status for s in tail.snapshots], [AxisStatus.READY])
            self.assertEqual(tail.last, service.get_current_status())
        finally:
            service.dispose()

    def test_tick_advances_by_interval(self):
        """Simulation time steps by the configured interval."""
        self.service.start_monitoring(10)
        self.assertTrue(wait_for(lambda: self.service.stats.tick_count >= 3))
        self.service.stop_monitoring()

        ticks = self.service.stats.tick_count
        self.assertAlmostEqual(self.service.simulation_time, ticks * 0.010, places=9)


class TestReset(EngineTestCase):
    """Test reset semantics."""

    def _assert_zeroed(self, snap):
        self.assertEqual(snap.encoder_command, 0)
        self.assertEqual(snap.encoder_feedback, 0)
        self.assertEqual(snap.position, 0.0)
        self.assertEqual(snap.speed, 0.0)
        self.assertEqual(snap.torque, 0.0)

    def test_reset_when_idle(self):
        for _ in range(4):
            self.service.run_once()

        self.service.reset()

        snap = self.service.get_current_status()
        self._assert_zeroed(snap)
        self._assert_zeroed(self.recorder.last)
        self.assertEqual(snap.status, AxisStatus.READY)
        self.assertEqual(self.service.simulation_time, 0.0)
        self.assertFalse(self.service.is_running)

    def test_next_tick_starts_fresh_run(self):
        """After reset the next tick is evaluated at t = 0.1 s."""
        for _ in range(7):
            self.service.run_once()
        self.service.reset()

        snap = self.service.run_once()

        expected = 100.0 * np.sin(0.1 * np.pi)
        self.assertAlmostEqual(snap.position, expected, places=9)
        self.assertEqual(snap.encoder_command, int(expected * 1000.0))

    def test_reset_while_running(self):
        """Reset keeps the run going and publishes a zeroed RUNNING snapshot."""
        self.service.start_monitoring(10)
        self.assertTrue(wait_for(lambda: len(self.recorder) >= 3))

        self.service.reset()

        self.assertTrue(self.service.is_running)
        zeroed = [
            s for s in list(self.recorder.snapshots)
            if s.status == AxisStatus.RUNNING and s.encoder_command == 0
            and s.position == 0.0 and s.torque == 0.0
        ]
        self.assertGreaterEqual(len(zeroed), 1)

        count = len(self.recorder)
        self.assertTrue(wait_for(lambda: len(self.recorder) >= count + 2))
        self.service.stop_monitoring()

        self.assertLess(self.service.simulation_time, 2.0)

    def test_reset_waits_for_tick_publish(self):
        """A reset during a tick's fan-out is delivered after it, never before."""
        entered = threading.Event()
        release = threading.Event()
        tail = Recorder()

        def slow(snapshot):
            if not entered.is_set():
                entered.set()
                release.wait(2.0)

        self.service.subscribe(slow)
        self.service.subscribe(tail)

        ticker = threading.Thread(target=self.service.run_once)
        ticker.start()
        self.assertTrue(entered.wait(2.0))

        resetter = threading.Thread(target=self.service.reset)
        resetter.start()
        time.sleep(0.05)
        release.set()

        ticker.join(2.0)
        resetter.join(2.0)

        self.assertEqual(len(tail), 2)
        self._assert_zeroed(tail.last)
        self.assertEqual(tail.last, self.service.get_current_status())

    def test_reset_from_subscriber_supersedes_tick(self):
        """Subscribers after a resetting one only see the zeroed snapshot."""
        tail = Recorder()

        def reset_on_tick(snapshot):
            if snapshot.encoder_command != 0:
                self.service.reset()

        self.service.subscribe(reset_on_tick)
        self.service.subscribe(tail)

        tick = self.service.run_once()

        self.assertNotEqual(tick.encoder_command, 0)
        self.assertEqual(len(tail), 1)
        self._assert_zeroed(tail.last)
        self.assertEqual([s.encoder_command for s in self.recorder.snapshots],
                         [tick.encoder_command, 0])


class TestFanOut(EngineTestCase):
    """Test subscriber delivery."""

    def test_every_subscriber_gets_equal_snapshots(self):
        recorders = [Recorder() for _ in range(4)]
        for recorder in recorders:
            self.service.subscribe(recorder)

        published = self.service.run_once()

        for recorder in recorders + [self.recorder]:
            self.assertEqual(len(recorder), 1)
            self.assertEqual(recorder.last, published)

    def test_failing_subscriber_is_isolated(self):
        """One raising subscriber does not block others or stop the loop."""
        def broken(snapshot):
            raise RuntimeError("display gone")

        after = Recorder()
        self.service.subscribe(broken)
        self.service.subscribe(after)

        with self.assertLogs("utils.logging", level="ERROR"):
            self.service.run_once()

        self.assertEqual(len(after), 1)
        self.assertEqual(self.service.stats.subscriber_failures, 1)

        self.service.start_monitoring(10)
        self.assertTrue(wait_for(lambda: len(after) >= 4))
        self.assertTrue(self.service.is_running)
        self.service.stop_monitoring()

    def test_unsubscribe(self):
        other = Recorder()
        subscription = self.service.subscribe(other)
        self.service.run_once()

        self.assertTrue(subscription.unsubscribe())
        self.assertFalse(subscription.unsubscribe())
        self.service.run_once()

        self.assertEqual(len(other), 1)
        self.assertEqual(len(self.recorder), 2)

    def test_unsubscribe_during_publish(self):
        """Removing a subscription mid-publish does not skip the others."""
        holder = {}
        tail = Recorder()

        def remove_self(snapshot):
            self.service.unsubscribe(holder["sub"])

        holder["sub"] = self.service.subscribe(remove_self)
        self.service.subscribe(tail)

        self.service.run_once()
        self.service.run_once()

        self.assertEqual(len(tail), 2)
        self.assertEqual(self.service.subscriber_count, 2)

    def test_subscriber_must_be_callable(self):
        with self.assertRaises(TypeError):
            self.service.subscribe("not callable")


class TestSnapshotInvariants(EngineTestCase):
    """Test properties that hold for every published snapshot."""

    def test_identity_and_bounds(self):
        for _ in range(300):
            self.service.run_once()

        for snap in self.recorder.snapshots:
            self.assertEqual(snap.position_error, snap.encoder_command - snap.encoder_feedback)
            self.assertLessEqual(abs(snap.position_error), 5)
            self.assertGreaterEqual(snap.torque, 0.0)
            self.assertLessEqual(snap.torque, 100.0)

    def test_seed_reproducible(self):
        """Equal seeds produce identical measurement sequences."""
        other = MonitoringService(seed=1234)
        try:
            ours = [self.service.run_once() for _ in range(20)]
            theirs = [other.run_once() for _ in range(20)]
        finally:
            other.dispose()

        self.assertEqual(
            [(s.encoder_feedback, round(s.torque, 9)) for s in ours],
            [(s.encoder_feedback, round(s.torque, 9)) for s in theirs],
        )

    def test_injected_model(self):
        quiet = KinematicModel(noise=NoiseModel(feedback_noise_pulses=0,
                                                torque_noise_max=0.0))
        service = MonitoringService(model=quiet)
        try:
            for _ in range(5):
                snap = service.run_once()
        finally:
            service.dispose()

        self.assertEqual(snap.position_error, 0)
        self.assertAlmostEqual(snap.position, 100.0, delta=1e-6)

    def test_no_torn_reads(self):
        """Concurrent reads and resets never mix fields from different ticks."""
        omega = 2 * np.pi * 0.5
        amplitude = 100.0
        torn = []
        done = threading.Event()

        def reader():
            while not done.is_set():
                snap = self.service.get_current_status()
                if snap.encoder_command == 0 and snap.speed == 0.0:
                    continue
                value = (snap.position / amplitude) ** 2 + (snap.speed / (amplitude * omega)) ** 2
                if abs(value - 1.0) > 1e-9:
                    torn.append(snap)

        threads = [threading.Thread(target=reader) for _ in range(3)]
        for thread in threads:
            thread.start()

        self.service.start_monitoring(1)
        for _ in range(20):
            time.sleep(0.01)
            self.service.reset()
        self.service.stop_monitoring()

        done.set()
        for thread in threads:
            thread.join(2.0)

        self.assertEqual(torn, [])


class TestDispose(unittest.TestCase):
    """Test teardown and lifecycle misuse."""

    def test_dispose_stops_running_loop(self):
        service = MonitoringService(seed=0)
        service.start_monitoring(10)
        self.assertEqual(len(loop_threads()), 1)

        service.dispose()

        self.assertFalse(service.is_running)
        self.assertTrue(service.disposed)
        self.assertTrue(wait_for(lambda: not loop_threads()))

    def test_calls_after_dispose_fail_fast(self):
        service = MonitoringService(seed=0)
        service.dispose()
        service.dispose()

        for call in [
            service.get_current_status,
            service.start_monitoring,
            service.stop_monitoring,
            service.reset,
            service.run_once,
            lambda: service.subscribe(print),
        ]:
            with self.assertRaises(EngineDisposedError):
                call()

    def test_context_manager(self):
        with MonitoringService(seed=0) as service:
            service.start_monitoring(10)
            self.assertTrue(service.is_running)

        self.assertTrue(service.disposed)
        self.assertTrue(wait_for(lambda: not loop_threads()))

    def test_invalid_config(self):
        from utils.config import ConfigError

        with self.assertRaises(ConfigError):
            MonitoringService({"engine": {"interval_ms": 0}})


class FailOnceModel(KinematicModel):
    """Model whose first step raises, as a broken sensor bus would."""

    def __init__(self):
        super().__init__(noise=NoiseModel(seed=0))
        self.failures = 1

    def advance(self, dt):
        if self.failures:
            self.failures -= 1
            raise RuntimeError("sensor bus fault")
        return super().advance(dt)


class TestLoopFailure(unittest.TestCase):
    """Test an unexpected tick loop failure."""

    def test_failure_clears_run_state(self):
        service = MonitoringService(model=FailOnceModel())
        try:
            with self.assertLogs("engine.service", level="ERROR"):
                service.start_monitoring(10)
                self.assertTrue(wait_for(lambda: not service.is_running))

            self.assertEqual(service.get_current_status().status, AxisStatus.ERROR)
            self.assertTrue(wait_for(lambda: not loop_threads()))

            service.start_monitoring(10)
            self.assertTrue(service.is_running)
            self.assertEqual(len(loop_threads()), 1)
            self.assertTrue(wait_for(lambda: service.stats.tick_count >= 2))
            self.assertEqual(service.get_current_status().status, AxisStatus.RUNNING)
        finally:
            service.dispose()


class TestSubscriptionRegistry(unittest.TestCase):
    """Test the registry on its own."""

    def test_publish_counts(self):
        registry = SubscriptionRegistry()
        received = []
        registry.add(received.append)
        registry.add(lambda item: 1 / 0)

        with self.assertLogs("utils.logging", level="ERROR"):
            delivered, failed = registry.publish("x")

        self.assertEqual((delivered, failed), (1, 1))
        self.assertEqual(received, ["x"])

    def test_superseded_publish_stops(self):
        """Once is_current turns false the rest of the pass is dropped."""
        registry = SubscriptionRegistry()
        received = []
        current = {"ok": True}

        def first(item):
            received.append(("first", item))
            current["ok"] = False

        registry.add(first)
        registry.add(lambda item: received.append(("second", item)))

        delivered, failed = registry.publish("x", lambda: current["ok"])

        self.assertEqual((delivered, failed), (1, 0))
        self.assertEqual(received, [("first", "x")])

    def test_clear_deactivates(self):
        registry = SubscriptionRegistry()
        sub = registry.add(print)
        registry.clear()

        self.assertEqual(len(registry), 0)
        self.assertFalse(sub.active)


if __name__ == "__main__":
    unittest.main()

"""
Motor Monitor Engine - Periodic Sampling Service
================================================

Owns the axis status, ticks the kinematic model on a background thread,
and fans each resulting snapshot out to subscribers.

Run States:
-----------
    Idle ──start_monitoring()──▶ Running
      ▲                            │
      └──────stop_monitoring()─────┘

- Idle:    no loop thread, axis status READY
- Running: one loop thread, axis status RUNNING

start/stop are idempotent. reset() and get_current_status() work in
either state. dispose() stops the loop and makes every later call raise
EngineDisposedError.

Tick Loop:
----------
1. Wait for the next deadline or the stop event, whichever comes first
2. Advance simulation time by the interval and evaluate the model
3. Write the sample into the owned MotorStatus and capture a snapshot
4. Publish the snapshot to every subscriber

Locking:
--------
- _state_lock:     MotorStatus, model time, run flag, statistics
- _tick_lock:      one write-and-publish at a time (tick, reset, final
                   stop snapshot); reentrant
- _lifecycle_lock: start/stop transitions from outside a publish

Every write that publishes bumps a generation counter. A fan-out whose
generation is no longer current drops its remaining deliveries, so a
subscriber that resets or stops the engine mid-publish is never followed
by the stale snapshot it interrupted.

Subscribers run with only the reentrant _tick_lock held, so they may call
get_current_status(), reset() or stop_monitoring() freely. Marshalling
onto a UI thread is the subscriber's job.

Example:
--------
>>> from engine import MonitoringService
>>>
>>> with MonitoringService(seed=0) as service:
...     service.subscribe(lambda snap: print(snap.position))
...     service.start_monitoring(100)
...     time.sleep(1.0)
...     service.stop_monitoring()

Author: Motor Monitor Team
Date: October 19, 2026
"""

import threading
import time
from contextlib import contextmanager, nullcontext
from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, ContextManager, Dict, Iterator, Optional
import logging

from domain import AxisStatus, MotorStatus, MotorStatusSnapshot
from kinematics import KinematicModel, KinematicParameters, NoiseModel
from utils.config import DEFAULT_CONFIG, merge_configs, validate_config

from .errors import EngineDisposedError
from .subscriptions import Subscription, SubscriptionRegistry

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EngineStats:
    """Basic tick timing and delivery statistics."""

    tick_count: int = 0
    publish_count: int = 0
    subscriber_failures: int = 0
    overrun_count: int = 0
    last_tick_duration_ns: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class MonitoringService:
    """
    Simulated single-axis telemetry source.

    Attributes:
        config: Effective configuration (defaults merged with overrides)
    """

    def __init__(self,
                 config: Optional[Dict[str, Any]] = None,
                 model: Optional[KinematicModel] = None,
                 seed: Optional[int] = None):
        """
        Initialize the sampling service.

        Args:
            config: Overrides layered over DEFAULT_CONFIG
            model: Pre-built kinematic model (built from config when omitted)
            seed: Noise seed; takes precedence over engine.seed in config

        Raises:
            ConfigError: If the merged configuration is invalid
        """
        self.config = merge_configs(DEFAULT_CONFIG, config or {})
        validate_config(self.config)

        engine_config = self.config["engine"]
        self._default_interval_ms = int(engine_config["interval_ms"])
        self._stop_timeout_s = float(engine_config["stop_timeout_s"])

        if model is None:
            model = self._build_model(self.config, seed)
        self._model = model

        self._status = MotorStatus(status=AxisStatus.READY)
        self._subscribers = SubscriptionRegistry()
        self._stats = EngineStats()

        self._state_lock = threading.RLock()
        self._tick_lock = threading.RLock()
        self._lifecycle_lock = threading.RLock()

        self._interval_ms = self._default_interval_ms
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None
        self._running = False
        self._disposed = False
        self._generation = 0
        self._local = threading.local()

        logger.info(
            f"MonitoringService initialized: interval={self._default_interval_ms}ms, "
            f"f={self._model.parameters.frequency_hz}Hz, "
            f"A={self._model.parameters.amplitude}"
        )

    @staticmethod
    def _build_model(config: Dict[str, Any], seed: Optional[int]) -> KinematicModel:
        kinematics = config["kinematics"]
        if seed is None:
            seed = config["engine"].get("seed")

        noise = NoiseModel(
            feedback_noise_pulses=kinematics["feedback_noise_pulses"],
            torque_noise_max=kinematics["torque_noise_max"],
            seed=seed,
        )
        return KinematicModel(KinematicParameters.from_config(config), noise)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        """True while a tick loop is live; cleared if the loop fails."""
        return self._running

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def interval_ms(self) -> int:
        """Tick interval of the current (or most recent) run."""
        return self._interval_ms

    @property
    def simulation_time(self) -> float:
        """Accumulated simulation time [s]."""
        with self._state_lock:
            return self._model.elapsed

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def stats(self) -> EngineStats:
        with self._state_lock:
            return replace(self._stats)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def get_current_status(self) -> MotorStatusSnapshot:
        """
        Snapshot of the current status, regardless of run state.

        Returns:
            Immutable MotorStatusSnapshot
        """
        self._check_alive()
        with self._state_lock:
            return MotorStatusSnapshot.from_status(self._status)

    def subscribe(self, callback: Callable[[MotorStatusSnapshot], None]) -> Subscription:
        """
        Register a status observer.

        Args:
            callback: Called on the loop thread with each snapshot

        Returns:
            Subscription handle; call .unsubscribe() to stop delivery
        """
        self._check_alive()
        return self._subscribers.add(callback)

    def unsubscribe(self, subscription: Subscription) -> bool:
        self._check_alive()
        return self._subscribers.remove(subscription)

    def start_monitoring(self, interval_ms: Optional[int] = None) -> None:
        """
        Start periodic sampling.

        No-op if already running.

        Args:
            interval_ms: Tick interval [ms] (engine.interval_ms when omitted)

        Raises:
            ValueError: If interval_ms is not a positive integer
            EngineDisposedError: If the service was disposed
        """
        self._check_alive()

        if interval_ms is None:
            interval_ms = self._default_interval_ms
        if isinstance(interval_ms, bool) or not isinstance(interval_ms, int):
            raise ValueError(f"interval_ms must be an integer, got {interval_ms!r}")
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be > 0, got {interval_ms}")

        with self._lifecycle():
            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._run_loop,
                args=(stop_event, interval_ms),
                name="motor-monitor-loop",
                daemon=True,
            )

            with self._state_lock:
                if self._running:
                    logger.debug("start_monitoring ignored: already running")
                    return
                self._interval_ms = interval_ms
                self._status.status = AxisStatus.RUNNING
                self._stop_event = stop_event
                self._thread = thread
                self._running = True

            thread.start()

        logger.info(f"Monitoring started: interval={interval_ms}ms")

    def stop_monitoring(self) -> None:
        """
        Stop periodic sampling and publish one final READY snapshot.

        No-op if not running. Blocks until the loop thread has exited, so
        no tick notification from this run is delivered after return.
        Called from a subscriber, it signals the loop and returns without
        waiting; the interrupted publish is cut short, so subscribers after
        the caller receive only the final READY snapshot.

        Raises:
            EngineDisposedError: If the service was disposed
        """
        self._check_alive()
        self._stop()

    def reset(self) -> None:
        """
        Zero all measurements and simulation time, then publish.

        Run state and axis status are unchanged; when running, the next
        tick evaluates the model one interval into a fresh run.

        Raises:
            EngineDisposedError: If the service was disposed
        """
        self._check_alive()

        with self._exclusive():
            with self._state_lock:
                self._status.zero()
                self._model.reset()
                self._generation += 1
                generation = self._generation
                snapshot = MotorStatusSnapshot.from_status(self._status)

            logger.info("Motor values reset")
            self._publish(snapshot, generation)

    def run_once(self) -> MotorStatusSnapshot:
        """
        Execute one tick: advance, sample, publish.

        Returns:
            The published snapshot

        Raises:
            EngineDisposedError: If the service was disposed
        """
        self._check_alive()
        return self._tick()

    def dispose(self) -> None:
        """Stop the loop if running and release subscribers. Idempotent."""
        if self._disposed:
            return

        self._stop()
        self._subscribers.clear()
        self._disposed = True

        logger.info("MonitoringService disposed")

    def __enter__(self) -> "MonitoringService":
        self._check_alive()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_alive(self) -> None:
        if self._disposed:
            raise EngineDisposedError()

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        """Hold the write-and-publish exclusion, tracking nesting per thread."""
        with self._tick_lock:
            depth = getattr(self._local, "depth", 0)
            self._local.depth = depth + 1
            try:
                yield
            finally:
                self._local.depth = depth

    def _in_publish(self) -> bool:
        return getattr(self._local, "depth", 0) > 0

    def _lifecycle(self) -> ContextManager:
        # A stop holding _lifecycle_lock may be joining the loop thread that
        # is running this publish; taking the lock here would deadlock.
        if self._in_publish():
            return nullcontext()
        return self._lifecycle_lock

    def _stop(self) -> None:
        # Inside a publish the loop thread may be waiting on _tick_lock,
        # which this thread holds, so joining it would stall.
        with self._lifecycle():
            self._halt(join=not self._in_publish())

    def _halt(self, join: bool) -> None:
        with self._state_lock:
            if not self._running:
                logger.debug("stop ignored: not running")
                return
            self._running = False
            self._generation += 1
            thread, stop_event = self._thread, self._stop_event
            self._thread = None
            self._stop_event = None

        stop_event.set()

        if join and thread is not None:
            thread.join(timeout=self._stop_timeout_s)
            if thread.is_alive():
                logger.warning(
                    f"Tick loop did not exit within {self._stop_timeout_s}s; "
                    f"a subscriber may be blocking"
                )

        with self._exclusive():
            with self._state_lock:
                self._status.status = AxisStatus.READY
                generation = self._generation
                snapshot = MotorStatusSnapshot.from_status(self._status)

            logger.info("Monitoring stopped")
            self._publish(snapshot, generation)

    def _tick(self, stop_event: Optional[threading.Event] = None) -> Optional[MotorStatusSnapshot]:
        with self._exclusive():
            # A stop that landed while waiting for the lock ends the run here.
            if stop_event is not None and stop_event.is_set():
                return None

            start_ns = time.monotonic_ns()

            with self._state_lock:
                sample = self._model.advance(self._interval_ms / 1000.0)
                self._status.apply_sample(sample)
                generation = self._generation
                snapshot = MotorStatusSnapshot.from_status(self._status)
                self._stats.tick_count += 1
                self._stats.last_tick_duration_ns = time.monotonic_ns() - start_ns

            self._publish(snapshot, generation)

        return snapshot

    def _publish(self, snapshot: MotorStatusSnapshot, generation: int) -> None:
        delivered, failed = self._subscribers.publish(
            snapshot, lambda: self._generation == generation
        )

        with self._state_lock:
            self._stats.publish_count += 1
            self._stats.subscriber_failures += failed

        if failed:
            logger.warning(f"Publish delivered to {delivered} subscribers, {failed} failed")

    def _run_loop(self, stop_event: threading.Event, interval_ms: int) -> None:
        period_ns = interval_ms * 1_000_000
        next_tick = time.monotonic_ns() + period_ns

        try:
            while True:
                wait_ns = next_tick - time.monotonic_ns()
                if stop_event.wait(max(wait_ns, 0) / 1_000_000_000):
                    break

                if self._tick(stop_event) is None:
                    break

                next_tick += period_ns
                now = time.monotonic_ns()
                if next_tick < now:
                    # Missed deadline, reset schedule to avoid a burst of ticks.
                    next_tick = now
                    with self._state_lock:
                        self._stats.overrun_count += 1
        except Exception:
            logger.exception("Tick loop terminated unexpectedly")
            with self._state_lock:
                self._status.status = AxisStatus.ERROR
                if self._stop_event is stop_event:
                    self._running = False
                    self._thread = None
                    self._stop_event = None
            return

        logger.debug("Tick loop exited")

"""
Motor Monitor Engine - Subscription Registry
============================================

Explicit registry of status observers with synchronous fan-out.

Delivery Rules:
---------------
1. Every active subscription receives each published item once, in
   subscription order.
2. Publishing iterates over a copy of the registry, so a callback may
   unsubscribe itself (or others) mid-publish without disturbing the pass.
3. An exception raised by one callback is logged and counted; delivery
   continues with the next subscription.
4. When an is_current check is given and turns false, the remaining
   subscriptions are skipped; a newer item has superseded this one.

Example:
--------
>>> registry = SubscriptionRegistry()
>>> sub = registry.add(print)
>>> registry.publish("hello")
hello
(1, 0)
>>> sub.unsubscribe()

Author: Motor Monitor Team
Date: October 19, 2026
"""

import threading
from typing import Any, Callable, List, Optional, Tuple
import logging

from utils.logging import log_error

logger = logging.getLogger(__name__)


class Subscription:
    """Handle returned by SubscriptionRegistry.add()."""

    def __init__(self, registry: "SubscriptionRegistry", callback: Callable[[Any], None]):
        self._registry = registry
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> bool:
        """
        Remove this subscription from its registry.

        Returns:
            True if it was still registered
        """
        return self._registry.remove(self)

    def __repr__(self) -> str:
        name = getattr(self.callback, "__qualname__", repr(self.callback))
        return f"Subscription({name}, active={self.active})"


class SubscriptionRegistry:
    """Thread-safe ordered set of subscriptions."""

    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions: List[Subscription] = []

    def add(self, callback: Callable[[Any], None]) -> Subscription:
        """
        Register a callback.

        Args:
            callback: Called with each published item

        Returns:
            Subscription handle

        Raises:
            TypeError: If callback is not callable
        """
        if not callable(callback):
            raise TypeError(f"Subscriber must be callable, got {type(callback).__name__}")

        subscription = Subscription(self, callback)
        with self._lock:
            self._subscriptions.append(subscription)

        logger.debug(f"Added {subscription}")
        return subscription

    def remove(self, subscription: Subscription) -> bool:
        with self._lock:
            try:
                self._subscriptions.remove(subscription)
            except ValueError:
                return False
            subscription.active = False

        logger.debug(f"Removed {subscription}")
        return True

    def clear(self) -> None:
        with self._lock:
            for subscription in self._subscriptions:
                subscription.active = False
            self._subscriptions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(self,
                item: Any,
                is_current: Optional[Callable[[], bool]] = None) -> Tuple[int, int]:
        """
        Deliver item to every active subscription.

        Args:
            item: Object handed to each callback
            is_current: Checked before each delivery; once it returns
                False the rest of the pass is dropped

        Returns:
            Tuple of (delivered, failed) counts
        """
        with self._lock:
            subscriptions = tuple(self._subscriptions)

        delivered = 0
        failed = 0
        for subscription in subscriptions:
            if is_current is not None and not is_current():
                logger.debug(f"Publish superseded after {delivered + failed} deliveries")
                break
            if not subscription.active:
                continue
            try:
                subscription.callback(item)
                delivered += 1
            except Exception as e:
                failed += 1
                log_error(e, context=f"Subscriber {subscription} raised during publish")

        return delivered, failed

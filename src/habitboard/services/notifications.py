"""In-process change feed for store subscribers."""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from ..domain.entities import ChangeKind
from ..logging_config import get_logger

logger = get_logger(__name__)

ChangeCallback = Callable[[ChangeKind], None]


@dataclass(frozen=True)
class Subscription:
    """Handle returned by :meth:`ChangeNotifier.subscribe`."""

    token: int
    kinds: frozenset[ChangeKind]


class ChangeNotifier:
    """Fan committed changes out to registered callbacks.

    Callbacks run synchronously on the publishing thread. A callback that
    raises is logged and skipped; it never propagates to the publisher.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._callbacks: dict[int, tuple[frozenset[ChangeKind], ChangeCallback]] = {}

    def subscribe(
        self, callback: ChangeCallback, kinds: Optional[Iterable[ChangeKind]] = None
    ) -> Subscription:
        wanted = frozenset(kinds) if kinds is not None else frozenset(ChangeKind)
        with self._lock:
            token = next(self._counter)
            self._callbacks[token] = (wanted, callback)
        return Subscription(token=token, kinds=wanted)

    def unsubscribe(self, subscription: Subscription) -> bool:
        with self._lock:
            return self._callbacks.pop(subscription.token, None) is not None

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._callbacks)

    def publish(self, *kinds: ChangeKind) -> int:
        """Notify each interested subscriber once per distinct kind.

        Returns the number of callbacks that completed without raising.
        """
        with self._lock:
            targets = list(self._callbacks.items())

        delivered = 0
        for kind in dict.fromkeys(kinds):
            for token, (wanted, callback) in targets:
                if kind not in wanted:
                    continue
                try:
                    callback(kind)
                except Exception:
                    logger.exception(
                        "Change subscriber failed",
                        extra={"subscription": token, "kind": kind.value},
                    )
                else:
                    delivered += 1
        return delivered

    def clear(self) -> None:
        with self._lock:
            self._callbacks.clear()


__all__ = ["ChangeCallback", "ChangeNotifier", "Subscription"]

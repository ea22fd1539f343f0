"""Keyed debouncing of remote calls.

Each key owns at most one pending timer. Scheduling again under the same key
cancels the earlier call, so a burst of calls collapses into the last one once
the key has been quiet for ``delay`` seconds.
"""

import logging
import threading
from typing import Any, Callable, Dict, Hashable, Tuple

from .. import config

logger = logging.getLogger(__name__)


class Debouncer:

    def __init__(self, delay: float = None, timer_factory: Callable[..., Any] = threading.Timer):
        self.delay = config.DEBOUNCE_SECONDS if delay is None else delay
        self._timer_factory = timer_factory
        # key -> (token, timer, fn, args, kwargs); the token tells a fired
        # timer whether it is still current
        self._pending: Dict[Hashable, Tuple[object, Any, Callable, tuple, dict]] = {}
        self._lock = threading.Lock()
        self._closed = False

    @property
    def pending_keys(self) -> list:
        with self._lock:
            return list(self._pending)

    def schedule(self, key: Hashable, fn: Callable, *args, **kwargs) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError('debouncer is closed')
            old = self._pending.pop(key, None)
            if old is not None:
                old[1].cancel()
            token = object()
            timer = self._timer_factory(self.delay, self._fire, args=(key, token))
            timer.daemon = True
            self._pending[key] = (token, timer, fn, args, kwargs)
        timer.start()

    def _fire(self, key: Hashable, token: object) -> None:
        with self._lock:
            entry = self._pending.get(key)
            if entry is None or entry[0] is not token:
                # superseded or cancelled after the timer had already started running
                return
            del self._pending[key]
        _, _, fn, args, kwargs = entry
        logger.debug('debounced call firing for %r', key)
        try:
            fn(*args, **kwargs)
        except Exception:
            logger.exception('debounced call for %r failed', key)

    def cancel(self, key: Hashable) -> bool:
        with self._lock:
            entry = self._pending.pop(key, None)
        if entry is None:
            return False
        entry[1].cancel()
        return True

    def cancel_all(self) -> int:
        with self._lock:
            entries = list(self._pending.values())
            self._pending.clear()
        for entry in entries:
            entry[1].cancel()
        return len(entries)

    def flush(self) -> int:
        """Run every pending call now instead of waiting for its timer."""
        with self._lock:
            entries = list(self._pending.items())
            self._pending.clear()
        for key, (_, timer, fn, args, kwargs) in entries:
            timer.cancel()
            try:
                fn(*args, **kwargs)
            except Exception:
                logger.exception('debounced call for %r failed', key)
        return len(entries)

    def close(self) -> int:
        """Cancel everything pending and refuse new calls."""
        with self._lock:
            self._closed = True
        return self.cancel_all()

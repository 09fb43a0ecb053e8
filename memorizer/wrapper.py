# cache the result of a single argument function call, per argument value.
#
# the wrapped function must be referentially transparent. this is not checked:
# an impure function keeps returning whatever its first successful call returned.
#
# concurrency: at most once per key. the first caller of an uncached key runs the
# function while concurrent callers of the same key wait for it. a failure is never
# cached, the exception goes back to the caller as is and the next caller retries.

import functools
import inspect
import logging
import threading
from typing import Any, Callable, Dict, Generic, Hashable, List, NamedTuple, Optional, TypeVar

from .outcome import Outcome

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class MemoEntry(NamedTuple):
    key: Any
    value: Any


class MemoStats(NamedTuple):
    hits: int
    misses: int  # number of times the wrapped function actually ran
    failures: int


class Memorizer(Generic[K, V]):
    def __init__(self, f: Callable[[K], V]):
        if not callable(f):
            raise TypeError("memorizer requires a callable, got %r" % (f,))
        self.f = f
        self._cache: Dict[K, MemoEntry] = {}
        # guards _cache, _key_locks and the counters. never held while f runs
        self._lock = threading.Lock()
        # one lock per key being computed, so that distinct keys compute in parallel
        self._key_locks: Dict[K, threading.Lock] = {}
        self._hits = 0
        self._misses = 0
        self._failures = 0
        # __dict__ of f is not copied, f may be a callable object with its own state
        functools.update_wrapper(self, f, updated=())
        self.name: str = getattr(f, "__qualname__", None) or repr(f)

    def __call__(self, key: K) -> V:
        entry = self._hit(key)
        if entry is not None:
            return entry.value

        with self._key_lock(key):
            # someone else may have computed it while we were waiting
            entry = self._hit(key)
            if entry is not None:
                return entry.value

            outcome = Outcome.attempt(self.f, key)
            with self._lock:
                self._misses += 1
                if outcome.failed:
                    self._failures += 1
                else:
                    entry = MemoEntry(key, outcome.value)
                    self._cache[key] = entry
                    self._key_locks.pop(key, None)

        if entry is None:
            logger.debug("%s(%r) failed, not cached: %r", self.name, key, outcome.error)
            return outcome.get()  # re-raises
        logger.debug("%s(%r) computed and cached", self.name, key)
        return entry.value

    def __get__(self, instance, owner=None):
        # decorating a method: the instance becomes the cache key
        if instance is None:
            return self
        return functools.partial(self, instance)

    def _hit(self, key: K) -> Optional[MemoEntry]:
        with self._lock:
            entry = self._cache.get(key)
            if entry is not None:
                self._hits += 1
        if entry is not None:
            logger.debug("%s(%r) cache hit", self.name, key)
        return entry

    def _key_lock(self, key: K) -> threading.Lock:
        with self._lock:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._key_locks[key] = lock
            return lock

    def lookup(self, key: K) -> Optional[MemoEntry]:
        """return the cached entry of key without computing anything (and without counting a hit)"""
        with self._lock:
            return self._cache.get(key)

    def entries(self) -> List[MemoEntry]:
        with self._lock:
            return list(self._cache.values())

    def stats(self) -> MemoStats:
        with self._lock:
            return MemoStats(self._hits, self._misses, self._failures)

    def __contains__(self, key: K) -> bool:
        return self.lookup(key) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __repr__(self) -> str:
        return "Memorizer(%s, entries=%d)" % (self.name, len(self))


def memoized(f: Callable[[K], V]) -> Memorizer[K, V]:
    return Memorizer(f)


def memorizer(f: Callable) -> Callable:
    """decorator version.

    a function taking one argument becomes a Memorizer keyed by that argument
    (for a method taking only self, the cache is per instance).
    a function taking no argument is evaluated once, at its first call.
    """
    if len(inspect.signature(f).parameters) == 0:
        from .lazy import Lazy
        lazy = Lazy(f)

        @functools.wraps(f)
        def w():
            return lazy.get()
        w.lazy = lazy  # type: ignore
        return w
    return Memorizer(f)

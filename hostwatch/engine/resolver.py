"""Asynchronous reverse-name resolver.

:class:`AsyncHostResolver` answers :meth:`~AsyncHostResolver.resolve`
immediately from its cache, or with a placeholder :class:`Host` while a
single background worker thread performs the blocking lookup.  When a
name is found it is cached and every subscriber is notified through an
injected *dispatch* callable, so the owner decides which thread or event
loop runs the callbacks::

    resolver = AsyncHostResolver(dispatch=loop.call_soon_threadsafe)
    resolver.subscribe(view)
    host = resolver.resolve("10.0.0.1")   # Host(name=None) at first

Failed lookups are not cached; the next :meth:`resolve` for the same
address schedules a fresh attempt.  Cached names never expire.
"""

import logging
import threading
import weakref
from collections import OrderedDict
from typing import Callable, Optional, Protocol

from pydantic import BaseModel

from hostwatch.engine.dns import Address, reverse_dns
from hostwatch.engine.host import Host

logger = logging.getLogger(__name__)

Lookup = Callable[[str], Optional[str]]
Dispatch = Callable[[Callable[[], None]], object]

_WORKER_NAME = "hostwatch-resolver"


class ResolvedHostSubscriber(Protocol):
    """Anything that wants to hear about completed resolutions."""

    def resolved(self, host: Host) -> None: ...


class ResolverInfo(BaseModel):
    """Point-in-time counters for a resolver.

    Attributes:
        cached: Addresses with a known name.
        pending: Addresses waiting for the worker.
        in_flight: Addresses currently being looked up.
        subscribers: Live registered subscribers.
        worker_running: Whether the worker thread is active.
    """

    cached: int
    pending: int
    in_flight: int
    subscribers: int
    worker_running: bool


# ---------------------------------------------------------------------------
# Shared state
# ---------------------------------------------------------------------------


class ResolutionCache:
    """Write-once mapping of address to resolved name."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._names: dict[str, str] = {}

    def get(self, address: str) -> Optional[str]:
        with self._lock:
            return self._names.get(address)

    def put(self, address: str, name: str) -> bool:
        """Store *name* unless *address* is already cached.

        Returns:
            ``True`` if this call created the entry.
        """
        with self._lock:
            if address in self._names:
                return False
            self._names[address] = name
            return True

    def __contains__(self, address: object) -> bool:
        with self._lock:
            return address in self._names

    def __len__(self) -> int:
        with self._lock:
            return len(self._names)


class PendingSet:
    """Insertion-ordered set of addresses awaiting lookup.

    Not synchronised on its own: :class:`AsyncHostResolver` guards it with
    the same lock as the worker's running flag.
    """

    def __init__(self) -> None:
        self._items: OrderedDict[str, None] = OrderedDict()

    def add(self, address: str) -> bool:
        if address in self._items:
            return False
        self._items[address] = None
        return True

    def take(self) -> Optional[str]:
        """Remove and return the oldest address, or ``None`` if empty."""
        if not self._items:
            return None
        address, _ = self._items.popitem(last=False)
        return address

    def clear(self) -> int:
        count = len(self._items)
        self._items.clear()
        return count

    def __contains__(self, address: object) -> bool:
        return address in self._items

    def __len__(self) -> int:
        return len(self._items)


class SubscriberRegistry:
    """Weakly-held subscribers, unique by identity, in registration order."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._refs: list[weakref.ref] = []

    def _prune(self) -> None:
        # Caller holds the lock.
        self._refs = [ref for ref in self._refs if ref() is not None]

    def _index(self, subscriber: object) -> int:
        for i, ref in enumerate(self._refs):
            if ref() is subscriber:
                return i
        return -1

    def add(self, subscriber: ResolvedHostSubscriber) -> bool:
        with self._lock:
            self._prune()
            if self._index(subscriber) >= 0:
                return False
            self._refs.append(weakref.ref(subscriber))
            return True

    def remove(self, subscriber: ResolvedHostSubscriber) -> bool:
        with self._lock:
            i = self._index(subscriber)
            if i < 0:
                return False
            del self._refs[i]
            return True

    def clear(self) -> None:
        with self._lock:
            self._refs.clear()

    def snapshot(self) -> list:
        """Return strong references to every live subscriber."""
        with self._lock:
            self._prune()
            return [ref() for ref in self._refs]

    def __contains__(self, subscriber: object) -> bool:
        with self._lock:
            return self._index(subscriber) >= 0

    def __len__(self) -> int:
        with self._lock:
            self._prune()
            return len(self._refs)


def _run_inline(callback: Callable[[], None]) -> None:
    callback()


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class AsyncHostResolver:
    """Non-blocking, caching reverse-name resolver.

    Args:
        lookup: Blocking ``address -> name | None`` function.  Only the
            worker thread calls it.
        dispatch: Schedules a zero-argument callable on the notification
            context (for example ``loop.call_soon_threadsafe``).  Called
            once per subscriber per completed resolution.  Defaults to
            running the callback directly on the worker thread.
    """

    def __init__(self, lookup: Lookup = reverse_dns, dispatch: Optional[Dispatch] = None) -> None:
        self._lookup = lookup
        self._dispatch: Dispatch = dispatch or _run_inline

        self._cache = ResolutionCache()
        self._subscribers = SubscriberRegistry()

        # Guards the pending set, the in-flight set and the running flag.
        self._lock = threading.Lock()
        self._pending = PendingSet()
        self._in_flight: set[str] = set()
        self._running = False
        self._idle = threading.Event()
        self._idle.set()

    # -- public API ---------------------------------------------------------

    def resolve(self, address: Address) -> Host:
        """Return the best-known :class:`Host` for *address* without blocking.

        On a cache miss the address is queued for the worker (once) and a
        placeholder host is returned.
        """
        placeholder = Host.from_address(address)
        name = self._cache.get(placeholder.address)
        if name is not None:
            return Host.from_address(placeholder.address, name)
        self._request(placeholder.address)
        return placeholder

    def subscribe(self, subscriber: ResolvedHostSubscriber) -> bool:
        return self._subscribers.add(subscriber)

    def unsubscribe(self, subscriber: ResolvedHostSubscriber) -> bool:
        return self._subscribers.remove(subscriber)

    def unsubscribe_all(self) -> None:
        self._subscribers.clear()

    def cancel_all_pending_requests(self) -> int:
        """Drop every queued address that the worker has not started.

        Lookups already in progress still complete and notify.

        Returns:
            Number of addresses removed from the queue.
        """
        with self._lock:
            dropped = self._pending.clear()
        if dropped:
            logger.info("Cancelled %d pending resolution(s)", dropped)
        return dropped

    def wait_until_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until the worker has drained the queue.

        Returns:
            ``False`` if *timeout* expired first.
        """
        return self._idle.wait(timeout)

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def info(self) -> ResolverInfo:
        with self._lock:
            pending = len(self._pending)
            in_flight = len(self._in_flight)
            running = self._running
        return ResolverInfo(
            cached=len(self._cache),
            pending=pending,
            in_flight=in_flight,
            subscribers=len(self._subscribers),
            worker_running=running,
        )

    # -- worker -------------------------------------------------------------

    def _request(self, address: str) -> None:
        with self._lock:
            if address in self._in_flight or address in self._cache:
                return
            # Duplicates still fall through: a failed start may have left
            # work queued with no worker.
            self._pending.add(address)
            if self._running:
                return
            self._running = True
            self._idle.clear()
        self._start_worker()

    def _start_worker(self) -> None:
        thread = threading.Thread(target=self._run_worker, name=_WORKER_NAME, daemon=True)
        try:
            thread.start()
        except RuntimeError:
            logger.exception("Could not start resolver worker")
            with self._lock:
                self._running = False
                self._idle.set()

    def _run_worker(self) -> None:
        logger.debug("Resolver worker started")
        while True:
            with self._lock:
                address = self._pending.take()
                if address is None:
                    self._running = False
                    self._idle.set()
                    break
                self._in_flight.add(address)
            try:
                self._process(address)
            finally:
                with self._lock:
                    self._in_flight.discard(address)
        logger.debug("Resolver worker idle")

    def _process(self, address: str) -> None:
        try:
            name = self._lookup(address)
        except Exception:
            logger.exception("Lookup raised for %s", address)
            return

        if not name:
            logger.debug("No name for %s; not caching", address)
            return
        if not self._cache.put(address, name):
            return

        host = Host(address=address, name=name)
        for subscriber in self._subscribers.snapshot():
            self._notify(subscriber, host)

    def _notify(self, subscriber: ResolvedHostSubscriber, host: Host) -> None:
        def deliver() -> None:
            # Honour an unsubscribe that happened after dispatch.
            if subscriber not in self._subscribers:
                return
            try:
                subscriber.resolved(host)
            except Exception:
                logger.exception("Subscriber %r failed for %s", subscriber, host.address)

        try:
            self._dispatch(deliver)
        except Exception:
            logger.exception("Could not dispatch resolution of %s", host.address)

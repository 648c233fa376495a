"""
Change Feed - publishes committed table changes to subscribers.

Writers never call this module. It hooks SQLAlchemy session events on a
session factory:
1. after_flush collects the names of tables touched by the flush
2. after_commit posts them to the feed's queue
3. after_rollback discards what was collected

A subscriber supplies the tables it watches, a projection (Session -> result)
and a callback. The writer's commit only posts the changed table names; a
worker thread owned by the feed recomputes each matching projection in a
fresh session and hands its result to the callback.
"""
import logging
import queue
import threading
from itertools import chain
from typing import Any, Callable, FrozenSet, Iterable, List, Optional

from sqlalchemy import event
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)

_PENDING_KEY = "leasehub_changed_tables"
_STOP = object()

Projection = Callable[[Session], Any]


class Subscription:
     """Handle returned by ChangeFeed.subscribe; cancel() stops delivery."""

     def __init__(self, feed: "ChangeFeed", tables: FrozenSet[str], projection: Projection, callback: Callable[[Any], None]):
          self.feed = feed
          self.tables = tables
          self.projection = projection
          self.callback = callback
          self.active = True

     def cancel(self) -> None:
          self.active = False
          self.feed._remove(self)

     def matches(self, changed: Iterable[str]) -> bool:
          return bool(self.tables.intersection(changed))


class ChangeFeed:

     def __init__(self, session_factory: sessionmaker):
          self._session_factory = session_factory
          self._subscriptions: List[Subscription] = []
          self._lock = threading.Lock()
          self._changes: "queue.Queue" = queue.Queue()
          self._worker: Optional[threading.Thread] = None

          event.listen(session_factory, "after_flush", self._collect)
          event.listen(session_factory, "after_commit", self._publish)
          event.listen(session_factory, "after_rollback", self._discard)

     def subscribe(self, tables: Iterable[str], projection: Projection, callback: Callable[[Any], None]) -> Subscription:
          subscription = Subscription(self, frozenset(tables), projection, callback)
          with self._lock:
               self._subscriptions.append(subscription)
               if self._worker is None:
                    self._worker = threading.Thread(target=self._run, name="change-feed", daemon=True)
                    self._worker.start()
          return subscription

     def snapshot(self, projection: Projection) -> Any:
          """Run a projection once against the current state of the store."""
          with self._session_factory() as session:
               return projection(session)

     def wait_idle(self) -> None:
          """Block until every posted change has been delivered."""
          self._changes.join()

     def close(self) -> None:
          """Stop the worker and detach from the session factory."""
          event.remove(self._session_factory, "after_flush", self._collect)
          event.remove(self._session_factory, "after_commit", self._publish)
          event.remove(self._session_factory, "after_rollback", self._discard)
          with self._lock:
               worker, self._worker = self._worker, None
          if worker is not None:
               self._changes.put(_STOP)
               worker.join()

     @property
     def subscriber_count(self) -> int:
          with self._lock:
               return len(self._subscriptions)

     def _remove(self, subscription: Subscription) -> None:
          with self._lock:
               if subscription in self._subscriptions:
                    self._subscriptions.remove(subscription)

     def _collect(self, session: Session, flush_context) -> None:
          changed = session.info.setdefault(_PENDING_KEY, set())
          for obj in chain(session.new, session.dirty, session.deleted):
               table = getattr(obj, "__table__", None)
               if table is not None:
                    changed.add(table.name)

     def _discard(self, session: Session) -> None:
          session.info.pop(_PENDING_KEY, None)

     def _publish(self, session: Session) -> None:
          changed = session.info.pop(_PENDING_KEY, None)
          if not changed:
               return
          with self._lock:
               if self._worker is None:
                    return
          self._changes.put(frozenset(changed))

     def _run(self) -> None:
          while True:
               changed = self._changes.get()
               try:
                    if changed is _STOP:
                         return
                    self._deliver(changed)
               finally:
                    self._changes.task_done()

     def _deliver(self, changed: FrozenSet[str]) -> None:
          with self._lock:
               targets = [s for s in self._subscriptions if s.active and s.matches(changed)]

          for subscription in targets:
               try:
                    result = self.snapshot(subscription.projection)
                    if subscription.active:
                         subscription.callback(result)
               except Exception:
                    # One broken subscriber must not stop delivery to the others
                    logger.exception("Change subscriber failed for tables %s", sorted(changed))
